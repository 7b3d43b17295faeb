"""Pure derivations over an expense snapshot.

Every function takes the same read-only sequence of ``Expense`` records and
returns fresh values; none of them touch storage. Callers refreshing a view
should read the store once and feed that snapshot to each function so the
derived numbers agree with each other.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .models import Expense
from .theme import LIGHT, Palette

__all__ = [
    "CategoryShare",
    "ChartPoint",
    "category_breakdown",
    "category_color",
    "category_percentage",
    "category_totals",
    "chart_series",
    "month_records",
    "month_to_date_total",
    "recent_n",
    "sorted_by_recency",
    "total_amount",
]

ZERO = Decimal("0")
ONE_DECIMAL = Decimal("0.1")
HUNDRED = Decimal("100")

_DATE_PREFIX = re.compile(r"^\s*(\d{4})-(\d{1,2})(?:\D|$)")

Reference = Union[datetime, date, None]


@dataclass(frozen=True)
class CategoryShare:
    category: str
    total: Decimal
    percentage: Decimal
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "total": f"{self.total:.2f}",
            "percentage": f"{self.percentage:.1f}",
            "color": self.color,
        }


@dataclass(frozen=True)
class ChartPoint:
    label: str
    value: Decimal
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "value": float(self.value), "color": self.color}


def total_amount(records: Sequence[Expense]) -> Decimal:
    return sum((record.amount for record in records), start=ZERO)


def category_totals(records: Sequence[Expense]) -> Dict[str, Decimal]:
    """Sum amounts per category; categories with no records are left out."""
    totals: Dict[str, Decimal] = {}
    for record in records:
        totals[record.category] = totals.get(record.category, ZERO) + record.amount
    return totals


def _percentage(part: Decimal, whole: Decimal) -> Decimal:
    if whole == 0:
        return ZERO
    return (part / whole * HUNDRED).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def category_percentage(records: Sequence[Expense], category: str) -> Decimal:
    """Share of ``category`` in the grand total, rounded to one decimal.

    Zero when nothing has been spent, or nothing in that category.
    """
    part = category_totals(records).get(category, ZERO)
    return _percentage(part, total_amount(records))


def _year_month(value: str) -> Optional[Tuple[int, int]]:
    match = _DATE_PREFIX.match(value or "")
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return year, month


def _reference_month(reference: Reference) -> Tuple[int, int]:
    if reference is None:
        reference = datetime.now()
    elif isinstance(reference, datetime) and reference.tzinfo is not None:
        # Compare in the local calendar, where the record dates were entered.
        reference = reference.astimezone()
    return reference.year, reference.month


def month_records(records: Sequence[Expense], reference: Reference = None) -> List[Expense]:
    """Records whose calendar date falls in the reference's month and year.

    The date text is compared as written; records with an unparseable date
    are left out.
    """
    target = _reference_month(reference)
    return [record for record in records if _year_month(record.date) == target]


def month_to_date_total(records: Sequence[Expense], reference: Reference = None) -> Decimal:
    return total_amount(month_records(records, reference))


def sorted_by_recency(records: Sequence[Expense]) -> List[Expense]:
    # sorted() is stable, so equal timestamps keep their stored order.
    return sorted(records, key=lambda record: record.created_at, reverse=True)


def recent_n(records: Sequence[Expense], n: int) -> List[Expense]:
    if n <= 0:
        return []
    return sorted_by_recency(records)[:n]


def category_color(category: str, palette: Optional[Palette] = None) -> str:
    return (palette or LIGHT).color_for(category)


def category_breakdown(
    records: Sequence[Expense], palette: Optional[Palette] = None
) -> List[CategoryShare]:
    """Per-category totals with their share, largest first."""
    totals = category_totals(records)
    grand_total = sum(totals.values(), start=ZERO)
    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return [
        CategoryShare(
            category=category,
            total=amount,
            percentage=_percentage(amount, grand_total),
            color=category_color(category, palette),
        )
        for category, amount in ordered
    ]


def chart_series(records: Sequence[Expense], palette: Optional[Palette] = None) -> List[ChartPoint]:
    return [
        ChartPoint(label=category, value=amount, color=category_color(category, palette))
        for category, amount in category_totals(records).items()
    ]
