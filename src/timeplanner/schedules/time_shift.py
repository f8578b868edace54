# src/timeplanner/schedules/time_shift.py

from __future__ import annotations

"""
Time shift of a task inside its day.

Shifting keeps the duration, pushes every neighbour the moved block reaches in the direction
of travel by the same delta (cascading), and is all-or-nothing: if any shifted task would leave
[00:00, 24:00] of the day, nothing is changed.
"""

import logging
from datetime import timedelta

from ..core.ports import ScheduleRepo
from ..core.result import NotFoundFailure, Result, ShiftOutOfBoundsFailure, wrap
from .schedule_models import TimeTask, day_bounds

logger = logging.getLogger(__name__)


def _check_bounds(task: TimeTask) -> None:
    day_start, day_end = day_bounds(task.date)
    rng = task.time_range
    if rng.start < day_start or rng.end > day_end:
        raise ShiftOutOfBoundsFailure(
            f"Task {task.key} would move to {rng.start:%Y-%m-%d %H:%M}-{rng.end:%Y-%m-%d %H:%M}, "
            f"outside of {task.date.isoformat()}"
        )


def shift_time_tasks(tasks: list[TimeTask] | tuple[TimeTask, ...], key: int, delta: timedelta) -> list[TimeTask]:
    """
    Shift task `key` by `delta` and cascade onto overlapping neighbours.

    Returns the shifted tasks (the target first, then neighbours in cascade order).
    Raises NotFoundFailure / ShiftOutOfBoundsFailure.
    """
    ordered = sorted(tasks, key=lambda t: t.time_range.start)
    index = next((i for i, t in enumerate(ordered) if t.key == key), None)
    if index is None:
        raise NotFoundFailure(f"Time task {key} not found")
    if not delta:
        return []

    moved = ordered[index].shifted(delta)
    _check_bounds(moved)
    affected = [moved]

    later = delta > timedelta(0)
    if later:
        neighbours = ordered[index + 1 :]
    else:
        neighbours = list(reversed(ordered[:index]))

    # Reach of the moved block in the direction of travel. A neighbour the target
    # jumps over lies inside the reach and is pushed too.
    reach = moved.time_range.end if later else moved.time_range.start
    for neighbour in neighbours:
        rng = neighbour.time_range
        if (later and rng.start >= reach) or (not later and rng.end <= reach):
            break
        shifted = neighbour.shifted(delta)
        _check_bounds(shifted)
        affected.append(shifted)
        reach = max(reach, shifted.time_range.end) if later else min(reach, shifted.time_range.start)

    return affected


class TimeShiftInteractor:
    """Shift commands over the schedule repository (one update per accepted shift)."""

    def __init__(self, schedule_repo: ScheduleRepo) -> None:
        self._repo = schedule_repo

    def shift_up(self, task: TimeTask, minutes: int) -> Result[list[TimeTask]]:
        """Move the task later by `minutes`."""
        return self._shift(task, timedelta(minutes=self._positive(minutes)))

    def shift_down(self, task: TimeTask, minutes: int) -> Result[list[TimeTask]]:
        """Move the task earlier by `minutes`."""
        return self._shift(task, -timedelta(minutes=self._positive(minutes)))

    @staticmethod
    def _positive(minutes: int) -> int:
        value = int(minutes)
        if value <= 0:
            raise ValueError(f"shift minutes must be positive, got {minutes}")
        return value

    def _shift(self, task: TimeTask, delta: timedelta) -> Result[list[TimeTask]]:
        def call() -> list[TimeTask]:
            schedule = self._repo.fetch_schedule_by_date(task.date)
            if schedule is None:
                raise NotFoundFailure(f"Schedule {task.date.isoformat()} not found")

            affected = shift_time_tasks(schedule.time_tasks, task.key, delta)
            self._repo.update_schedule(schedule.replace_tasks(affected))
            logger.info(
                "Shifted task %s by %s min (%d task(s) affected)",
                task.key,
                int(delta.total_seconds() // 60),
                len(affected),
            )
            return affected

        return wrap(call)
