# src/timeplanner/schedules/schedule_work.py

from __future__ import annotations

"""
Schedule work processor.

Maps schedule commands to data operations and view updates. Every command produces an
async stream of WorkResult:
- ActionResult(HomeAction) -> reduced into HomeViewState by the screen model
- EffectResult(ShowError)  -> shown to the user, state left unchanged
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import date

from ..core.ports import DateProvider, NotificationScheduler
from ..core.work import ActionResult, EffectResult, ShowError, WorkResult
from ..notifications.alarms import add_notifications
from ..templates.template_models import Template, convert_to_time_task
from .home_contract import SetEmptySchedule
from .refresh_loop import run_refresh_loop
from .schedule_interactor import ScheduleInteractor
from .schedule_models import TimeTask
from .time_shift import TimeShiftInteractor

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LoadScheduleByDate:
    date: date


@dataclass(slots=True, frozen=True)
class CreateSchedule:
    date: date
    planned_templates: tuple[Template, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class ChangeTaskDoneState:
    date: date
    key: int


@dataclass(slots=True, frozen=True)
class TimeTaskShiftUp:
    time_task: TimeTask


@dataclass(slots=True, frozen=True)
class TimeTaskShiftDown:
    time_task: TimeTask


ScheduleWorkCommand = LoadScheduleByDate | CreateSchedule | ChangeTaskDoneState | TimeTaskShiftUp | TimeTaskShiftDown

MUTATING_COMMANDS = (CreateSchedule, ChangeTaskDoneState, TimeTaskShiftUp, TimeTaskShiftDown)


class _Channel:
    """Bridges the callback-style refresh loop into an async iterator."""

    def __init__(self) -> None:
        self.queue: asyncio.Queue[WorkResult | None] = asyncio.Queue()

    def emit(self, result: WorkResult) -> None:
        self.queue.put_nowait(result)


class ScheduleWorkProcessor:
    def __init__(
            self,
            *,
            schedule_interactor: ScheduleInteractor,
            time_shift_interactor: TimeShiftInteractor,
            notification_scheduler: NotificationScheduler,
            date_provider: DateProvider,
            refresh_interval_seconds: float = 1.0,
            shift_minutes: int = 15,
    ) -> None:
        self._schedules = schedule_interactor
        self._time_shift = time_shift_interactor
        self._alarms = notification_scheduler
        self._dates = date_provider
        self._interval = float(refresh_interval_seconds)
        self._shift_minutes = int(shift_minutes)

    def work(self, command: ScheduleWorkCommand) -> AsyncIterator[WorkResult]:
        match command:
            case LoadScheduleByDate(date=day):
                return self._load_schedule_by_date(day)
            case CreateSchedule(date=day, planned_templates=templates):
                return self._create_schedule(day, list(templates))
            case ChangeTaskDoneState(date=day, key=key):
                return self._change_task_done_state(day, key)
            case TimeTaskShiftUp(time_task=task):
                return self._shift(task, up=True)
            case TimeTaskShiftDown(time_task=task):
                return self._shift(task, up=False)
        raise TypeError(f"Unknown schedule command: {command!r}")

    async def _load_schedule_by_date(self, day: date) -> AsyncIterator[WorkResult]:
        found = self._schedules.fetch_schedule_by_date(day)
        if not found.ok:
            yield EffectResult(ShowError(found.failure))  # type: ignore[arg-type]
            return

        schedule = found.value
        if schedule is None:
            planned = self._schedules.fetch_planned_templates(day)
            if not planned.ok:
                yield EffectResult(ShowError(planned.failure))  # type: ignore[arg-type]
                return
            yield ActionResult(SetEmptySchedule(day, tuple(planned.value or ())))
            return

        channel = _Channel()
        loop_task = asyncio.create_task(
            run_refresh_loop(
                schedule,
                interactor=self._schedules,
                date_provider=self._dates,
                emit=channel.emit,
                interval_seconds=self._interval,
            )
        )
        loop_task.add_done_callback(lambda _t: channel.queue.put_nowait(None))
        try:
            while True:
                item = await channel.queue.get()
                if item is None:
                    break
                yield item
            # Surface unexpected crashes of the loop to the caller.
            loop_task.result()
        finally:
            if not loop_task.done():
                loop_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await loop_task

    async def _create_schedule(self, day: date, templates: list[Template]) -> AsyncIterator[WorkResult]:
        tasks = [convert_to_time_task(t, day) for t in templates]
        created = self._schedules.create_schedule(day, tasks)
        if not created.ok:
            yield EffectResult(ShowError(created.failure))  # type: ignore[arg-type]
            return
        requested = add_notifications(self._alarms, tasks, self._dates.now())
        logger.debug("Schedule %s: %d alarm(s) requested", day.isoformat(), requested)

    async def _change_task_done_state(self, day: date, key: int) -> AsyncIterator[WorkResult]:
        result = self._schedules.change_task_done_state(day, key)
        if not result.ok:
            yield EffectResult(ShowError(result.failure))  # type: ignore[arg-type]

    async def _shift(self, task: TimeTask, *, up: bool) -> AsyncIterator[WorkResult]:
        if up:
            result = self._time_shift.shift_up(task, self._shift_minutes)
        else:
            result = self._time_shift.shift_down(task, self._shift_minutes)
        if not result.ok:
            yield EffectResult(ShowError(result.failure))  # type: ignore[arg-type]
