import json
import os
from decimal import Decimal

import pytest

from expense_core.exceptions import StorageError
from expense_core.storage import JSONStorage


def test_read_missing_key_returns_none(storage):
    assert storage.read("expenses") is None


def test_write_then_read_decodes_fractions_as_decimal(storage):
    storage.write("expenses", [{"amount": 25.5, "count": 2}])

    payload = storage.read("expenses")

    assert payload == [{"amount": Decimal("25.5"), "count": 2}]
    assert isinstance(payload[0]["amount"], Decimal)


def test_blob_is_a_json_file_named_after_the_key(storage, data_dir):
    storage.write("themePreference", "dark")

    assert json.loads((data_dir / "themePreference.json").read_text(encoding="utf-8")) == "dark"


def test_corrupted_blob_raises_storage_error(storage, data_dir):
    (data_dir / "expenses.json").write_text("[{", encoding="utf-8")

    with pytest.raises(StorageError):
        storage.read("expenses")


def test_unserialisable_value_leaves_previous_blob_untouched(storage, data_dir):
    storage.write("expenses", [{"id": "1"}])

    with pytest.raises(StorageError):
        storage.write("expenses", [{"id": object()}])

    assert storage.read("expenses") == [{"id": "1"}]
    assert not (data_dir / "expenses.json.tmp").exists()


def test_nan_is_rejected_at_serialisation(storage):
    with pytest.raises(StorageError):
        storage.write("expenses", [{"amount": float("nan")}])


def test_failed_replace_keeps_old_blob_and_cleans_temp_file(storage, data_dir, monkeypatch):
    storage.write("expenses", [])

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", broken_replace)

    with pytest.raises(StorageError):
        storage.write("expenses", [{"id": "1"}])

    assert storage.read("expenses") == []
    assert not (data_dir / "expenses.json.tmp").exists()


@pytest.mark.parametrize("key", ["", "../escape", ".hidden", "a/b"])
def test_invalid_keys_are_refused(storage, key):
    with pytest.raises(StorageError):
        storage.read(key)


def test_remove_deletes_blob_and_tolerates_absence(storage):
    storage.write("expenses", [])
    storage.remove("expenses")
    storage.remove("expenses")

    assert storage.read("expenses") is None


def test_base_path_is_created(tmp_path):
    target = tmp_path / "nested" / "dir"

    storage = JSONStorage(target)

    assert storage.base_path == target
    assert target.is_dir()
