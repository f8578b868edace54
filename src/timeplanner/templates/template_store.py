# src/timeplanner/templates/template_store.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
import time
from datetime import time as dtime
from pathlib import Path

from .template_models import Template

logger = logging.getLogger(__name__)


class TemplateStore:
    """
    SQLite template store.

    repeat_days is stored as a JSON array of weekday numbers.
    Each method opens its own SQLite connection.
    """

    def __init__(self, db_path: str | Path = "planner.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TemplateStore ready db=%s", self._db_path)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS templates (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    start_time TEXT NOT NULL,
                    end_time TEXT NOT NULL,
                    category_id INTEGER NOT NULL,
                    sub_category_id INTEGER,
                    is_important INTEGER NOT NULL DEFAULT 0,
                    is_enable_notification INTEGER NOT NULL DEFAULT 1,
                    repeat_days TEXT NOT NULL DEFAULT '[]',
                    updated_at REAL NOT NULL DEFAULT 0
                )
                """
            )

            cur.execute("PRAGMA table_info(templates)")
            cols = {row["name"] for row in cur.fetchall()}
            if "repeat_days" not in cols:
                cur.execute("ALTER TABLE templates ADD COLUMN repeat_days TEXT NOT NULL DEFAULT '[]'")
                logger.info("TemplateStore migration: added column repeat_days")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _days_to_str(days: tuple[int, ...]) -> str:
        return json.dumps(list(days))

    @staticmethod
    def _str_to_days(raw: str | None) -> tuple[int, ...]:
        if not raw:
            return ()
        try:
            val = json.loads(raw)
        except ValueError:
            logger.warning("Malformed repeat_days value %r; treating as empty.", raw)
            return ()
        if not isinstance(val, list):
            return ()
        return tuple(int(d) for d in val if isinstance(d, int) and 0 <= d <= 6)

    def _row_to_template(self, row: sqlite3.Row) -> Template:
        return Template(
            id=int(row["id"]),
            start_time=dtime.fromisoformat(row["start_time"]),
            end_time=dtime.fromisoformat(row["end_time"]),
            category_id=int(row["category_id"]),
            sub_category_id=int(row["sub_category_id"]) if row["sub_category_id"] is not None else None,
            is_important=bool(row["is_important"]),
            is_enable_notification=bool(row["is_enable_notification"]),
            repeat_days=self._str_to_days(row["repeat_days"]),
        )

    # ---- public API ----

    def add_template(self, template: Template) -> int:
        """Insert a template; its id is assigned by SQLite (template.id is ignored)."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO templates(
                    start_time, end_time, category_id, sub_category_id,
                    is_important, is_enable_notification, repeat_days, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    template.start_time.isoformat(timespec="minutes"),
                    template.end_time.isoformat(timespec="minutes"),
                    int(template.category_id),
                    template.sub_category_id,
                    int(template.is_important),
                    int(template.is_enable_notification),
                    self._days_to_str(template.repeat_days),
                    time.time(),
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for templates insert")
            logger.debug("Template added id=%s", rowid)
            return int(rowid)
        finally:
            conn.close()

    def fetch_template_by_id(self, template_id: int) -> Template | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM templates WHERE id = ?", (int(template_id),))
            row = cur.fetchone()
            return self._row_to_template(row) if row else None
        finally:
            conn.close()

    def fetch_all_templates(self) -> list[Template]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM templates ORDER BY id ASC")
            return [self._row_to_template(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def update_template(self, template: Template) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                UPDATE templates
                SET start_time = ?, end_time = ?, category_id = ?, sub_category_id = ?,
                    is_important = ?, is_enable_notification = ?, repeat_days = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    template.start_time.isoformat(timespec="minutes"),
                    template.end_time.isoformat(timespec="minutes"),
                    int(template.category_id),
                    template.sub_category_id,
                    int(template.is_important),
                    int(template.is_enable_notification),
                    self._days_to_str(template.repeat_days),
                    time.time(),
                    int(template.id),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def delete_template_by_id(self, template_id: int) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM templates WHERE id = ?", (int(template_id),))
            conn.commit()
        finally:
            conn.close()

    def delete_all_templates(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM templates")
            conn.commit()
        finally:
            conn.close()
