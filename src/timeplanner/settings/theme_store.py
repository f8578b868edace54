# src/timeplanner/settings/theme_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

logger = logging.getLogger(__name__)


class ThemeColors(StrEnum):
    DEFAULT = "default"
    LIGHT = "light"
    DARK = "dark"


class Language(StrEnum):
    DEFAULT = "default"
    EN = "en"
    RU = "ru"


@dataclass(slots=True, frozen=True)
class ThemeSettings:
    """User preferences passed explicitly to whatever renders the app."""

    language: Language = Language.DEFAULT
    theme_colors: ThemeColors = ThemeColors.DEFAULT
    is_dynamic_color_enable: bool = False


class ThemeSettingsStore:
    """
    Single-row SQLite settings store.

    Older databases lack is_dynamic_color_enable; it is added on open.
    """

    def __init__(self, db_path: str | Path = "settings.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("ThemeSettingsStore ready db=%s", self._db_path)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS theme_settings (
                    id INTEGER PRIMARY KEY CHECK (id = 0),
                    language TEXT NOT NULL DEFAULT 'default',
                    theme_colors TEXT NOT NULL DEFAULT 'default'
                )
                """
            )
            cur.execute("PRAGMA table_info(theme_settings)")
            cols = {row["name"] for row in cur.fetchall()}
            if "is_dynamic_color_enable" not in cols:
                cur.execute(
                    "ALTER TABLE theme_settings ADD COLUMN is_dynamic_color_enable INTEGER NOT NULL DEFAULT 0"
                )
                logger.info("ThemeSettingsStore migration: added column is_dynamic_color_enable")
            conn.commit()
        finally:
            conn.close()

    def fetch_settings(self) -> ThemeSettings:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM theme_settings WHERE id = 0")
            row = cur.fetchone()
        finally:
            conn.close()

        if row is None:
            return ThemeSettings()

        language = Language.DEFAULT
        with contextlib.suppress(ValueError):
            language = Language(row["language"])
        colors = ThemeColors.DEFAULT
        with contextlib.suppress(ValueError):
            colors = ThemeColors(row["theme_colors"])
        return ThemeSettings(
            language=language,
            theme_colors=colors,
            is_dynamic_color_enable=bool(row["is_dynamic_color_enable"]),
        )

    def update_settings(self, settings: ThemeSettings) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO theme_settings(id, language, theme_colors, is_dynamic_color_enable)
                VALUES (0, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    language = excluded.language,
                    theme_colors = excluded.theme_colors,
                    is_dynamic_color_enable = excluded.is_dynamic_color_enable
                """,
                (
                    settings.language.value,
                    settings.theme_colors.value,
                    int(settings.is_dynamic_color_enable),
                ),
            )
            conn.commit()
        finally:
            conn.close()
