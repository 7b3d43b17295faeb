"""Validation helpers shared across the store and the boundary services."""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Tuple

from .exceptions import ValidationError
from .models import parse_datetime, truncate_to_millis

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")

THEME_MODES = {"dark", "light"}


def parse_amount(raw: object, field: str) -> Decimal:
    """Convert raw input to a finite, non-negative Decimal.

    The result carries the precision of the JSON number it is persisted as,
    so the value read back from storage compares equal to the one returned
    here.
    """
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(f"{field} must be a numeric value")
    text = raw.strip() if isinstance(raw, str) else str(raw)
    try:
        amount = Decimal(text)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative")

    as_float = float(amount)
    if not math.isfinite(as_float):
        raise ValidationError(f"{field} is too large")
    # abs() folds -0.0 into 0.0
    return Decimal(repr(abs(as_float)))


def validate_required_str(value: object, field: str, max_length: Optional[int] = None) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    if max_length is not None and len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_optional_str(value: object, field: str, max_length: Optional[int] = None) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return value


def validate_date_text(value: object, field: str) -> str:
    """Accept any non-empty text, defaulting to today's local date when blank."""
    if value is None:
        return date.today().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    return trimmed or date.today().isoformat()


def validate_datetime(value: object, field: str) -> datetime:
    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    elif isinstance(value, str):
        try:
            dt = parse_datetime(value)
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO 8601 timestamp") from exc
    else:
        raise ValidationError(f"{field} must be a datetime or ISO 8601 string")
    return truncate_to_millis(dt.astimezone(timezone.utc))


def validate_created_at(candidate: object) -> datetime:
    if candidate is None or candidate == "":
        return truncate_to_millis(datetime.now(timezone.utc))
    return validate_datetime(candidate, "createdAt")


def validate_enum(value: object, field: str, allowed: Iterable[str]) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    canonical = value.strip().lower()
    if canonical not in allowed:
        raise ValidationError(f"{field} must be one of: {', '.join(sorted(allowed))}")
    return canonical


def parse_year_month(value: object, field: str = "month") -> Tuple[int, int]:
    """Parse ``YYYY-MM`` into a ``(year, month)`` pair."""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a YYYY-MM string")
    match = MONTH_PATTERN.fullmatch(value.strip())
    if not match:
        raise ValidationError(f"{field} must be a YYYY-MM string")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"{field} has an invalid month")
    return year, month
