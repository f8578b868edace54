# src/timeplanner/categories/category_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from .category_models import Categories, MainCategory, SubCategory

logger = logging.getLogger(__name__)


class CategoryStore:
    """SQLite store for main categories and their sub-categories."""

    def __init__(self, db_path: str | Path = "planner.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("CategoryStore ready db=%s", self._db_path)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS main_categories (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS sub_categories (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    main_category_id INTEGER NOT NULL
                        REFERENCES main_categories(id) ON DELETE CASCADE,
                    name TEXT NOT NULL
                )
                """
            )
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_sub_categories_main ON sub_categories(main_category_id)"
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def fetch_categories(self) -> list[Categories]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT id, name FROM main_categories ORDER BY id ASC")
            mains = [MainCategory(id=int(r["id"]), name=str(r["name"])) for r in cur.fetchall()]

            cur.execute("SELECT id, main_category_id, name FROM sub_categories ORDER BY id ASC")
            subs: dict[int, list[SubCategory]] = {}
            for r in cur.fetchall():
                sub = SubCategory(id=int(r["id"]), main_category_id=int(r["main_category_id"]), name=str(r["name"]))
                subs.setdefault(sub.main_category_id, []).append(sub)

            return [Categories(main_category=m, sub_categories=subs.get(m.id, [])) for m in mains]
        finally:
            conn.close()

    def fetch_main_category(self, category_id: int) -> MainCategory | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT id, name FROM main_categories WHERE id = ?", (int(category_id),))
            row = cur.fetchone()
            return MainCategory(id=int(row["id"]), name=str(row["name"])) if row else None
        finally:
            conn.close()

    def add_main_category(self, name: str) -> int:
        if not name or not name.strip():
            raise ValueError("name is required")
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("INSERT INTO main_categories(name) VALUES (?)", (name.strip(),))
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for main_categories insert")
            return int(rowid)
        finally:
            conn.close()

    def update_main_category(self, category: MainCategory) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "UPDATE main_categories SET name = ? WHERE id = ?",
                (category.name.strip(), int(category.id)),
            )
            conn.commit()
        finally:
            conn.close()

    def delete_main_category(self, category_id: int) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM main_categories WHERE id = ?", (int(category_id),))
            conn.commit()
        finally:
            conn.close()

    def add_sub_category(self, main_category_id: int, name: str) -> int:
        if not name or not name.strip():
            raise ValueError("name is required")
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                "INSERT INTO sub_categories(main_category_id, name) VALUES (?, ?)",
                (int(main_category_id), name.strip()),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for sub_categories insert")
            return int(rowid)
        finally:
            conn.close()

    def delete_sub_category(self, sub_category_id: int) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM sub_categories WHERE id = ?", (int(sub_category_id),))
            conn.commit()
        finally:
            conn.close()
