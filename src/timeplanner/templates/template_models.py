# src/timeplanner/templates/template_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from ..schedules.schedule_models import ExecutionStatus, TimeRange, TimeTask


@dataclass(slots=True, frozen=True)
class Template:
    """
    Reusable, date-less task blueprint.

    repeat_days holds weekday numbers (Monday=0). A template repeating on a weekday is
    offered as "planned" for dates of that weekday that have no schedule yet.
    """

    id: int
    start_time: time
    end_time: time
    category_id: int

    sub_category_id: int | None = None
    is_important: bool = False
    is_enable_notification: bool = True
    repeat_days: tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.start_time >= self.end_time:
            raise ValueError(f"Template start must be before end ({self.start_time} >= {self.end_time})")
        days = tuple(sorted({int(d) for d in self.repeat_days}))
        if any(d < 0 or d > 6 for d in days):
            raise ValueError(f"repeat_days must be weekday numbers 0..6, got {self.repeat_days}")
        object.__setattr__(self, "repeat_days", days)

    @property
    def duration(self) -> timedelta:
        anchor = date.min
        return datetime.combine(anchor, self.end_time) - datetime.combine(anchor, self.start_time)

    def repeats_on(self, day: date) -> bool:
        return day.weekday() in self.repeat_days


def generate_task_key() -> int:
    """Fresh positive 63-bit identity (fits an SQLite INTEGER)."""
    return (uuid.uuid4().int & ((1 << 63) - 1)) or 1


def convert_to_time_task(template: Template, day: date, *, key: int | None = None) -> TimeTask:
    """Bind a template to a concrete date as a new PLANNED task."""
    return TimeTask(
        key=generate_task_key() if key is None else key,
        date=day,
        time_range=TimeRange(
            datetime.combine(day, template.start_time),
            datetime.combine(day, template.end_time),
        ),
        category_id=template.category_id,
        sub_category_id=template.sub_category_id,
        is_completed=False,
        is_important=template.is_important,
        is_enable_notification=template.is_enable_notification,
        execution_status=ExecutionStatus.PLANNED,
    )
