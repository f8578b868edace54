# src/timeplanner/core/clock.py

from __future__ import annotations

from datetime import datetime


class SystemDateProvider:
    """Local wall clock, minute-level precision is all the planner needs."""

    def now(self) -> datetime:
        return datetime.now().replace(microsecond=0)
