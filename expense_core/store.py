"""Persistent stores for expense records and the theme preference."""

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union
from uuid import uuid4

from .exceptions import StorageError, ValidationError
from .logging_setup import get_logger
from .models import Expense
from .storage import JSONStorage
from .validators import (
    THEME_MODES,
    parse_amount,
    validate_created_at,
    validate_date_text,
    validate_enum,
    validate_optional_str,
    validate_required_str,
)

logger = get_logger("expense_core.store")

EXPENSES_KEY = "expenses"
THEME_PREFERENCE_KEY = "themePreference"

# First-run demonstration data, persisted the first time the collection is read.
FALLBACK_EXPENSES: List[Dict[str, Any]] = [
    {
        "id": "1",
        "amount": 25.50,
        "category": "Food",
        "date": "2024-01-15",
        "notes": "Lunch at downtown cafe",
        "createdAt": "2024-01-15T12:30:00.000Z",
    },
    {
        "id": "2",
        "amount": 45.00,
        "category": "Transport",
        "date": "2024-01-14",
        "notes": "Gas for the week",
        "createdAt": "2024-01-14T08:15:00.000Z",
    },
    {
        "id": "3",
        "amount": 120.99,
        "category": "Shopping",
        "date": "2024-01-13",
        "notes": "New winter jacket",
        "createdAt": "2024-01-13T16:45:00.000Z",
    },
    {
        "id": "4",
        "amount": 15.75,
        "category": "Others",
        "date": "2024-01-12",
        "notes": "Monthly subscription",
        "createdAt": "2024-01-12T10:20:00.000Z",
    },
]


class ExpenseStore:
    """Append-only expense collection persisted as a single blob.

    The store keeps no records in memory; every call reads the blob, so all
    views observe a write as soon as ``append`` returns. Mutations go through
    one lock, which serialises concurrent read-modify-write cycles issued
    against the same store.
    """

    def __init__(self, storage: JSONStorage, resource: str = EXPENSES_KEY) -> None:
        self._storage = storage
        self._resource = resource
        self._lock = threading.RLock()

    # Public API -----------------------------------------------------------
    def append(self, payload: Union[Mapping[str, object], Expense]) -> Expense:
        if isinstance(payload, Expense):
            payload = payload.to_dict()
        with self._lock:
            raw = self._storage.read(self._resource)
            current = [] if raw is None else self._hydrate(raw)
            expense = Expense(**self._validate_payload(payload, {e.id for e in current}))
            current.append(expense)
            self._persist(current)
        logger.info("Appended expense %s (%s %.2f)", expense.id, expense.category, expense.amount)
        return expense

    def read_all(self) -> List[Expense]:
        """Return every persisted record in stored order.

        The very first read of an absent collection persists and returns the
        fallback sample set; later reads return whatever is stored.
        """
        with self._lock:
            raw = self._storage.read(self._resource)
            if raw is None:
                logger.info("No %s found; seeding %d sample records", self._resource, len(FALLBACK_EXPENSES))
                self._storage.write(self._resource, FALLBACK_EXPENSES)
                raw = FALLBACK_EXPENSES
            return self._hydrate(raw)

    def clear(self) -> None:
        """Reset the collection to empty (the fallback set is not re-seeded)."""
        with self._lock:
            self._storage.write(self._resource, [])
        logger.info("Cleared %s", self._resource)

    def reset(self) -> None:
        """Forget the collection entirely so the next read seeds it again."""
        with self._lock:
            self._storage.remove(self._resource)

    # Internal helpers -----------------------------------------------------
    def _persist(self, expenses: Iterable[Expense]) -> None:
        # Storage layer handles atomic writes.
        self._storage.write(self._resource, [expense.to_dict() for expense in expenses])

    def _hydrate(self, raw: object) -> List[Expense]:
        if not isinstance(raw, list):
            raise StorageError(f"Expected list payload for {self._resource!r}")
        try:
            return [Expense.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise StorageError(f"Malformed expense record in {self._resource!r}") from exc

    def _validate_payload(self, payload: Mapping[str, object], existing_ids: Set[str]) -> Dict[str, object]:
        expense_id = payload.get("id")
        if expense_id is None or expense_id == "":
            expense_id = str(uuid4())
        elif not isinstance(expense_id, (str, int)) or isinstance(expense_id, bool):
            raise ValidationError("id must be a string")
        expense_id = str(expense_id)
        if expense_id in existing_ids:
            raise ValidationError(f"Expense {expense_id} already exists")

        created_at = payload.get("createdAt", payload.get("created_at"))
        return {
            "id": expense_id,
            "amount": parse_amount(payload.get("amount"), "amount"),
            "category": validate_required_str(payload.get("category"), "category"),
            "date": validate_date_text(payload.get("date"), "date"),
            "notes": validate_optional_str(payload.get("notes"), "notes"),
            "created_at": validate_created_at(created_at),
        }


class ThemePreferenceStore:
    """Single-value store for the dark/light display preference."""

    def __init__(self, storage: JSONStorage, resource: str = THEME_PREFERENCE_KEY) -> None:
        self._storage = storage
        self._resource = resource
        self._lock = threading.RLock()

    def get(self) -> Optional[str]:
        value = self._storage.read(self._resource)
        if value is None:
            return None
        if not isinstance(value, str) or value not in THEME_MODES:
            logger.warning("Ignoring unrecognised theme preference %r", value)
            return None
        return value

    def set(self, mode: object) -> str:
        canonical = validate_enum(mode, "mode", THEME_MODES)
        with self._lock:
            self._storage.write(self._resource, canonical)
        return canonical

    def resolve(self, system_default: str = "light") -> str:
        return self.get() or system_default

    def toggle(self, system_default: str = "light") -> str:
        with self._lock:
            current = self.resolve(system_default)
            return self.set("light" if current == "dark" else "dark")
