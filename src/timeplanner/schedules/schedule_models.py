# src/timeplanner/schedules/schedule_models.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from enum import StrEnum


class ExecutionStatus(StrEnum):
    """Derived state of a task relative to the current time."""

    PLANNED = "planned"
    RUNNING = "running"
    COMPLETED = "completed"

    @classmethod
    def from_db(cls, raw: str | None) -> ExecutionStatus:
        if not raw:
            return cls.PLANNED
        try:
            return cls(raw)
        except ValueError:
            return cls.PLANNED


@dataclass(slots=True, frozen=True)
class TimeRange:
    """Half-open interval [start, end) of local wall-clock instants."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(f"TimeRange start must be before end ({self.start} >= {self.end})")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def overlaps(self, other: TimeRange) -> bool:
        return self.start < other.end and other.start < self.end

    def shifted(self, delta: timedelta) -> TimeRange:
        return TimeRange(self.start + delta, self.end + delta)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """00:00 and 24:00 (= next day 00:00) of the given day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


@dataclass(slots=True, frozen=True)
class TimeTask:
    key: int
    date: date
    time_range: TimeRange
    category_id: int

    sub_category_id: int | None = None
    is_completed: bool = False
    is_important: bool = False
    is_enable_notification: bool = True
    note: str | None = None

    execution_status: ExecutionStatus = ExecutionStatus.PLANNED

    @property
    def duration(self) -> timedelta:
        return self.time_range.duration

    def shifted(self, delta: timedelta) -> TimeTask:
        return replace(self, time_range=self.time_range.shifted(delta))


@dataclass(slots=True, frozen=True)
class Schedule:
    """
    All time tasks of one calendar day.

    Tasks are kept ordered by start time and must be unique by key.
    """

    date: date
    time_tasks: tuple[TimeTask, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.time_tasks, key=lambda t: (t.time_range.start, t.key)))
        keys = [t.key for t in ordered]
        if len(set(keys)) != len(keys):
            raise ValueError(f"Duplicate time task keys in schedule {self.date}")
        object.__setattr__(self, "time_tasks", ordered)

    @property
    def has_incomplete(self) -> bool:
        return any(t.execution_status != ExecutionStatus.COMPLETED for t in self.time_tasks)

    @property
    def is_completed(self) -> bool:
        return bool(self.time_tasks) and not self.has_incomplete

    def find_task(self, key: int) -> TimeTask | None:
        for task in self.time_tasks:
            if task.key == key:
                return task
        return None

    def with_tasks(self, tasks: list[TimeTask] | tuple[TimeTask, ...]) -> Schedule:
        return Schedule(date=self.date, time_tasks=tuple(tasks))

    def replace_tasks(self, updated: list[TimeTask]) -> Schedule:
        """Swap in updated versions of existing tasks (matched by key)."""
        by_key = {t.key: t for t in updated}
        return self.with_tasks([by_key.get(t.key, t) for t in self.time_tasks])


def find_overlap(tasks: list[TimeTask] | tuple[TimeTask, ...]) -> tuple[TimeTask, TimeTask] | None:
    """Return the first pair of overlapping tasks (by start order), if any."""
    ordered = sorted(tasks, key=lambda t: t.time_range.start)
    for prev, nxt in zip(ordered, ordered[1:]):
        if prev.time_range.overlaps(nxt.time_range):
            return prev, nxt
    return None
