# src/timeplanner/schedules/schedule_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from datetime import date, datetime
from pathlib import Path
from typing import Any

from .schedule_models import ExecutionStatus, Schedule, TimeRange, TimeTask

logger = logging.getLogger(__name__)


class ScheduleStore:
    """
    SQLite schedule store.

    Two tables:
    - schedules: one row per calendar day (ISO date key)
    - time_tasks: tasks owned by a schedule (ON DELETE CASCADE)

    A schedule update rewrites all of its tasks in one transaction
    (last write wins at the granularity of a full schedule).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "planner.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_schedules()
        except sqlite3.Error:
            total = -1
        logger.info("ScheduleStore ready db=%s schedules=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS schedules (
                    date TEXT PRIMARY KEY,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS time_tasks (
                    key INTEGER PRIMARY KEY,
                    date TEXT NOT NULL REFERENCES schedules(date) ON DELETE CASCADE,
                    start_at TEXT NOT NULL,
                    end_at TEXT NOT NULL,
                    category_id INTEGER NOT NULL,
                    sub_category_id INTEGER,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    is_important INTEGER NOT NULL DEFAULT 0,
                    is_enable_notification INTEGER NOT NULL DEFAULT 1,
                    execution_status TEXT NOT NULL DEFAULT 'planned',
                    note TEXT
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(time_tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE time_tasks ADD COLUMN {name} {decl}")
                logger.info("ScheduleStore migration: added column %s", name)

            add_col("is_important", "INTEGER NOT NULL DEFAULT 0")
            add_col("is_enable_notification", "INTEGER NOT NULL DEFAULT 1")
            add_col("execution_status", "TEXT NOT NULL DEFAULT 'planned'")
            add_col("note", "TEXT")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_time_tasks_date ON time_tasks(date, start_at)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _task_params(task: TimeTask) -> tuple[Any, ...]:
        return (
            int(task.key),
            task.date.isoformat(),
            task.time_range.start.isoformat(),
            task.time_range.end.isoformat(),
            int(task.category_id),
            task.sub_category_id,
            int(task.is_completed),
            int(task.is_important),
            int(task.is_enable_notification),
            task.execution_status.value,
            task.note,
        )

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> TimeTask:
        return TimeTask(
            key=int(row["key"]),
            date=date.fromisoformat(row["date"]),
            time_range=TimeRange(
                datetime.fromisoformat(row["start_at"]),
                datetime.fromisoformat(row["end_at"]),
            ),
            category_id=int(row["category_id"]),
            sub_category_id=int(row["sub_category_id"]) if row["sub_category_id"] is not None else None,
            is_completed=bool(row["is_completed"]),
            is_important=bool(row["is_important"]),
            is_enable_notification=bool(row["is_enable_notification"]),
            execution_status=ExecutionStatus.from_db(row["execution_status"]),
            note=row["note"],
        )

    def _write_tasks(self, cur: sqlite3.Cursor, day: date, tasks: list[TimeTask]) -> None:
        cur.execute("DELETE FROM time_tasks WHERE date = ?", (day.isoformat(),))
        cur.executemany(
            """
            INSERT INTO time_tasks(
                key, date, start_at, end_at,
                category_id, sub_category_id,
                is_completed, is_important, is_enable_notification,
                execution_status, note
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [self._task_params(t) for t in tasks],
        )

    # ---- public API ----

    def count_schedules(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM schedules")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def fetch_schedule_by_date(self, day: date) -> Schedule | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT date FROM schedules WHERE date = ?", (day.isoformat(),))
            if cur.fetchone() is None:
                return None
            cur.execute(
                "SELECT * FROM time_tasks WHERE date = ? ORDER BY start_at ASC, key ASC",
                (day.isoformat(),),
            )
            tasks = [self._row_to_task(r) for r in cur.fetchall()]
            return Schedule(date=day, time_tasks=tuple(tasks))
        finally:
            conn.close()

    def create_schedule(self, day: date, tasks: list[TimeTask]) -> Schedule:
        schedule = Schedule(date=day, time_tasks=tuple(tasks))
        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO schedules(date, created_at, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(date) DO UPDATE SET updated_at = excluded.updated_at
                """,
                (day.isoformat(), now, now),
            )
            self._write_tasks(cur, day, list(schedule.time_tasks))
            conn.commit()
            logger.debug("Schedule created date=%s tasks=%d", day, len(schedule.time_tasks))
            return schedule
        finally:
            conn.close()

    def update_schedule(self, schedule: Schedule) -> None:
        """Rewrite the whole schedule (upsert)."""
        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO schedules(date, created_at, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(date) DO UPDATE SET updated_at = excluded.updated_at
                """,
                (schedule.date.isoformat(), now, now),
            )
            self._write_tasks(cur, schedule.date, list(schedule.time_tasks))
            conn.commit()
            logger.debug("Schedule updated date=%s tasks=%d", schedule.date, len(schedule.time_tasks))
        finally:
            conn.close()

    def delete_schedule(self, day: date) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM schedules WHERE date = ?", (day.isoformat(),))
            conn.commit()
        finally:
            conn.close()
