"""Key-value persistence for the expense record store."""

from __future__ import annotations

import json
import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from .exceptions import StorageError
from .logging_setup import get_logger

logger = get_logger("expense_core.storage")


class JSONStorage:
    """Directory-backed key-value storage with crash-safe writes.

    Each key maps to one ``<key>.json`` blob. A write either replaces the
    whole blob or leaves the previous one in place.
    """

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Unable to create storage directory {self._base_path}") from exc

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise StorageError(f"Invalid storage key {key!r}")
        return self._base_path / f"{key}.json"

    def read(self, key: str) -> Optional[Any]:
        """Return the decoded value stored under ``key``, or None when absent."""
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                # Fractional numbers come back as Decimal to keep sums exact.
                return json.load(handle, parse_float=Decimal)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Corrupted JSON data in {path}") from exc
        except OSError as exc:
            raise StorageError(f"Unable to read from {path}") from exc

    def write(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            encoded = json.dumps(value, indent=2, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Unable to serialise value for {key!r}") from exc
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(encoded)
                handle.flush()
                os.fsync(handle.fileno())
            # Use replace for atomic move on POSIX; ensures crash-safe persistence.
            os.replace(temp_path, path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise StorageError(f"Unable to write to {path}") from exc
        logger.debug("Wrote %s (%d bytes)", path, len(encoded))

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Unable to remove {path}") from exc

    @property
    def base_path(self) -> Path:
        return self._base_path
