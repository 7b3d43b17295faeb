"""Shared fixtures: every test gets its own storage directory."""

from __future__ import annotations

from pathlib import Path

import pytest

from api.app import create_app
from expense_core.config import Settings
from expense_core.services import ExpenseTracker
from expense_core.storage import JSONStorage
from expense_core.store import ExpenseStore, ThemePreferenceStore


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def storage(data_dir: Path) -> JSONStorage:
    return JSONStorage(data_dir)


@pytest.fixture
def store(storage: JSONStorage) -> ExpenseStore:
    return ExpenseStore(storage)


@pytest.fixture
def theme_store(storage: JSONStorage) -> ThemePreferenceStore:
    return ThemePreferenceStore(storage)


@pytest.fixture
def tracker(store: ExpenseStore, theme_store: ThemePreferenceStore) -> ExpenseTracker:
    return ExpenseTracker(store, theme_store)


@pytest.fixture
def client(data_dir: Path):
    app = create_app(data_dir, settings=Settings(data_dir=data_dir, env="dev"))
    app.config.update(TESTING=True)
    return app.test_client()
