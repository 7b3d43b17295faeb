"""Framework-agnostic boundary services consumed by the API and the console."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from . import analytics
from .analytics import CategoryShare, ChartPoint, Reference
from .exceptions import ValidationError
from .logging_setup import get_logger
from .models import Category, Expense
from .storage import JSONStorage
from .store import ExpenseStore, ThemePreferenceStore
from .theme import palette_for

logger = get_logger("expense_core.services")

RECENT_LIMIT = 3


@dataclass(frozen=True)
class DashboardView:
    total: Decimal
    count: int
    month_total: Decimal
    month_count: int
    category_breakdown: List[CategoryShare]
    chart_series: List[ChartPoint]
    recent: List[Expense]
    theme: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": f"{self.total:.2f}",
            "count": self.count,
            "monthTotal": f"{self.month_total:.2f}",
            "monthCount": self.month_count,
            "categoryBreakdown": [share.to_dict() for share in self.category_breakdown],
            "chartSeries": [point.to_dict() for point in self.chart_series],
            "recent": [expense.to_dict() for expense in self.recent],
            "theme": self.theme,
        }


class ExpenseTracker:
    """Entry points the presentation layer calls.

    Holds nothing but the store handles: each call reads a fresh snapshot,
    so a record added through one view is visible to every other view on
    its next call.
    """

    def __init__(self, expenses: ExpenseStore, theme: ThemePreferenceStore) -> None:
        self._expenses = expenses
        self._theme = theme

    @classmethod
    def from_storage(cls, storage: JSONStorage) -> "ExpenseTracker":
        return cls(ExpenseStore(storage), ThemePreferenceStore(storage))

    @property
    def expenses(self) -> ExpenseStore:
        return self._expenses

    @property
    def theme(self) -> ThemePreferenceStore:
        return self._theme

    def add_expense(self, payload: Mapping[str, object]) -> Expense:
        """Validate form input against the offered categories and store it."""
        category = Category.parse(payload.get("category"))
        if category is None:
            raise ValidationError(f"category must be one of: {', '.join(Category.names())}")
        amount = payload.get("amount")
        if amount is None or (isinstance(amount, str) and not amount.strip()):
            raise ValidationError("Please enter a valid amount")
        record = {
            "amount": amount,
            "category": category.value,
            "date": payload.get("date"),
            "notes": payload.get("notes"),
        }
        return self._expenses.append(record)

    def all_expenses_sorted(self) -> List[Expense]:
        return analytics.sorted_by_recency(self._expenses.read_all())

    def dashboard(self, reference: Reference = None, mode: Optional[str] = None) -> DashboardView:
        snapshot = self._expenses.read_all()
        theme = mode or self._theme.resolve()
        palette = palette_for(theme)
        this_month = analytics.month_records(snapshot, reference)
        logger.debug("Building dashboard over %d records", len(snapshot))
        return DashboardView(
            total=analytics.total_amount(snapshot),
            count=len(snapshot),
            month_total=analytics.total_amount(this_month),
            month_count=len(this_month),
            category_breakdown=analytics.category_breakdown(snapshot, palette),
            chart_series=analytics.chart_series(snapshot, palette),
            recent=analytics.recent_n(snapshot, RECENT_LIMIT),
            theme=palette.name,
        )
