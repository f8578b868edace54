# src/timeplanner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a default.
- Settings are passed explicitly to whatever needs them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TIMEPLANNER"

# Local .env never overrides the real environment.
load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
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
    file_log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    planner_db_path: Path
    settings_db_path: Path
    log_file: Path

    # ---- Schedule behaviour ----
    refresh_interval_seconds: float
    shift_minutes: int
    default_templates_sort: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "timeplanner") or "timeplanner"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        file_log_level = _env(_k("FILE_LOG_LEVEL"), "DEBUG")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/timeplanner"))
        planner_db_path = _env_path(_k("PLANNER_DB_PATH"), data_dir / "planner.sqlite3")
        settings_db_path = _env_path(_k("SETTINGS_DB_PATH"), data_dir / "settings.sqlite3")
        log_file = _env_path(_k("LOG_FILE"), data_dir / "timeplanner.log")

        refresh_interval_seconds = max(0.1, _env_float(_k("REFRESH_INTERVAL_SECONDS"), 1.0))
        shift_minutes = _env_int(_k("SHIFT_MINUTES"), 15)
        if shift_minutes <= 0:
            shift_minutes = 15
        default_templates_sort = _env(_k("DEFAULT_TEMPLATES_SORT"), "date").strip().lower() or "date"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            file_log_level=file_log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            planner_db_path=planner_db_path,
            settings_db_path=settings_db_path,
            log_file=log_file,
            refresh_interval_seconds=refresh_interval_seconds,
            shift_minutes=shift_minutes,
            default_templates_sort=default_templates_sort,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
