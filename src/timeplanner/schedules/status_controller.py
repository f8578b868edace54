# src/timeplanner/schedules/status_controller.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from .schedule_models import ExecutionStatus, Schedule, TimeTask


def compute_status(task: TimeTask, now: datetime) -> ExecutionStatus:
    if task.is_completed:
        return ExecutionStatus.COMPLETED
    if now < task.time_range.start:
        return ExecutionStatus.PLANNED
    if now < task.time_range.end:
        return ExecutionStatus.RUNNING
    return ExecutionStatus.COMPLETED


class TimeTaskStatusController:
    """
    Recomputes execution status from wall-clock time.

    Pure: returns new values and never touches storage. The same object is returned
    when the status is already correct, so snapshot comparison stays cheap.
    """

    def update_status(self, task: TimeTask, now: datetime) -> TimeTask:
        status = compute_status(task, now)
        if status == task.execution_status:
            return task
        return replace(task, execution_status=status)

    def refresh_schedule(self, schedule: Schedule, now: datetime) -> Schedule:
        tasks = [self.update_status(t, now) for t in schedule.time_tasks]
        if all(new is old for new, old in zip(tasks, schedule.time_tasks)):
            return schedule
        return schedule.with_tasks(tasks)
