"""Data models for the expense record store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

__all__ = ["Category", "Expense", "isoformat_utc", "parse_datetime", "truncate_to_millis"]


def truncate_to_millis(dt: datetime) -> datetime:
    """Drop sub-millisecond precision so the value survives an ISO round-trip."""
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def isoformat_utc(dt: datetime) -> str:
    """Return an ISO 8601 instant with milliseconds and a trailing Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    iso = dt.isoformat(timespec="milliseconds")
    # datetime.isoformat renders +00:00 for UTC; replace with the shorter Z form.
    return iso.replace("+00:00", "Z")


def parse_datetime(value: str) -> datetime:
    """Parse ISO 8601 datetime strings with optional trailing Z into UTC-aware datetime."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        # Treat naive datetimes as UTC to avoid accidental timezone drift.
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class Category(str, Enum):
    """Closed set of categories offered by the entry form."""

    FOOD = "Food"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    OTHERS = "Others"

    @classmethod
    def parse(cls, value: object) -> Optional["Category"]:
        """Return the matching member, or None for anything outside the set."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip())
        except ValueError:
            return None

    @classmethod
    def names(cls) -> list:
        return [member.value for member in cls]


@dataclass(frozen=True)
class Expense:
    id: str
    amount: Decimal
    category: str
    date: str
    created_at: datetime
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives.

        ``amount`` is emitted as a JSON number. Amounts are normalised to the
        shortest float representation on the way in, so ``float`` here is
        exact and a read-back ``Decimal`` compares equal.
        """
        return {
            "id": self.id,
            "amount": float(self.amount),
            "category": self.category,
            "date": self.date,
            "notes": self.notes,
            "createdAt": isoformat_utc(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        """Hydrate an Expense from JSON-native data."""
        return cls(
            id=str(data["id"]),
            amount=Decimal(str(data["amount"])),
            category=data["category"],
            date=data.get("date") or "",
            created_at=parse_datetime(data["createdAt"]),
            notes=data.get("notes") or "",
        )

    @property
    def known_category(self) -> Optional[Category]:
        return Category.parse(self.category)
