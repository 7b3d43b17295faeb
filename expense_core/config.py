"""Environment-driven settings shared by the API and the console."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    env: str = "prod"
    allowed_origins: List[str] = field(default_factory=list)
    log_level: Optional[str] = None

    @property
    def is_development(self) -> bool:
        return self.env in {"dev", "development"}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    raw_origins = env.get("EXPENSE_TRACKER_ALLOWED_ORIGINS") or ""
    return Settings(
        data_dir=Path(env.get("EXPENSE_TRACKER_DATA_DIR") or "data"),
        env=(env.get("EXPENSE_TRACKER_ENV") or "prod").strip().lower(),
        allowed_origins=[origin.strip() for origin in raw_origins.split(",") if origin.strip()],
        log_level=env.get("EXPENSE_TRACKER_LOG_LEVEL") or None,
    )
