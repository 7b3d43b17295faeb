"""Expense record store and analytics engine."""

from .exceptions import StorageError, ValidationError
from .models import Category, Expense
from .services import DashboardView, ExpenseTracker
from .storage import JSONStorage
from .store import ExpenseStore, ThemePreferenceStore

__all__ = [
    "Category",
    "Expense",
    "DashboardView",
    "ExpenseTracker",
    "ExpenseStore",
    "ThemePreferenceStore",
    "JSONStorage",
    "StorageError",
    "ValidationError",
]
