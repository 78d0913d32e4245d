# src/smart_calendar/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every value has a local default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "SMART"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    export_dir: Path

    # ---- Storage / export naming ----
    storage_key: str
    export_prefix: str

    # ---- Views ----
    calendar_preview: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "smart-calendar").strip() or "smart-calendar"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/smart_calendar"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "storage.sqlite3")
        export_dir = _env_path(_k("EXPORT_DIR"), Path("."))

        storage_key = _env(_k("STORAGE_KEY"), "ceo-smart-tasks").strip() or "ceo-smart-tasks"
        export_prefix = _env(_k("EXPORT_PREFIX"), "ceo-smart-tasks").strip() or "ceo-smart-tasks"

        calendar_preview = max(0, _env_int(_k("CALENDAR_PREVIEW"), 2))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            export_dir=export_dir,
            storage_key=storage_key,
            export_prefix=export_prefix,
            calendar_preview=calendar_preview,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
