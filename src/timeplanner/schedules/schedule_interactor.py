# src/timeplanner/schedules/schedule_interactor.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from ..core.ports import ScheduleRepo, TemplateRepo
from ..core.result import NotFoundFailure, OverlapFailure, Result, wrap
from ..templates.template_models import Template
from .schedule_models import Schedule, TimeTask, find_overlap

logger = logging.getLogger(__name__)


class ScheduleInteractor:
    """Result-returning facade over the schedule and template repositories."""

    def __init__(self, schedule_repo: ScheduleRepo, template_repo: TemplateRepo) -> None:
        self._schedules = schedule_repo
        self._templates = template_repo

    def fetch_schedule_by_date(self, day: date) -> Result[Schedule | None]:
        return wrap(lambda: self._schedules.fetch_schedule_by_date(day))

    def fetch_planned_templates(self, day: date) -> Result[list[Template]]:
        """Templates that repeat on the weekday of `day`."""
        return wrap(lambda: [t for t in self._templates.fetch_all_templates() if t.repeats_on(day)])

    def create_schedule(self, day: date, tasks: list[TimeTask]) -> Result[Schedule]:
        def call() -> Schedule:
            overlap = find_overlap(tasks)
            if overlap is not None:
                a, b = overlap
                raise OverlapFailure(
                    f"{a.time_range.start:%H:%M}-{a.time_range.end:%H:%M} overlaps "
                    f"{b.time_range.start:%H:%M}-{b.time_range.end:%H:%M}"
                )
            schedule = self._schedules.create_schedule(day, tasks)
            logger.info("Schedule %s created with %d task(s)", day.isoformat(), len(tasks))
            return schedule

        return wrap(call)

    def update_schedule(self, schedule: Schedule) -> Result[None]:
        return wrap(lambda: self._schedules.update_schedule(schedule))

    def change_task_done_state(self, day: date, key: int) -> Result[TimeTask]:
        """Flip is_completed of one task and persist the schedule."""

        def call() -> TimeTask:
            schedule = self._schedules.fetch_schedule_by_date(day)
            if schedule is None:
                raise NotFoundFailure(f"Schedule {day.isoformat()} not found")
            task = schedule.find_task(key)
            if task is None:
                raise NotFoundFailure(f"Time task {key} not found in {day.isoformat()}")

            updated = replace(task, is_completed=not task.is_completed)
            self._schedules.update_schedule(schedule.replace_tasks([updated]))
            logger.info("Task %s is_completed=%s", key, updated.is_completed)
            return updated

        return wrap(call)
