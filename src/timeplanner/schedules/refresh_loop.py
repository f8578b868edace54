# src/timeplanner/schedules/refresh_loop.py

from __future__ import annotations

"""
Schedule refresh loop.

A small polling loop that, for one loaded schedule:
- recomputes every task's execution status against the current time,
- emits the schedule as new view state whenever a status changed (and on the first tick),
- persists the refreshed schedule while at least one task is still incomplete,
- stops once every task is COMPLETED.

Persistence failures are reported as ShowError effects and retried on the next tick with
the latest state; they never stop the loop. To stop early, cancel the coroutine/task.
"""

import asyncio
import logging
from collections.abc import Callable

from ..core.ports import DateProvider
from ..core.work import ActionResult, EffectResult, ShowError, WorkResult
from .home_contract import UpdateSchedule
from .schedule_interactor import ScheduleInteractor
from .schedule_models import Schedule
from .status_controller import TimeTaskStatusController

logger = logging.getLogger(__name__)

Emit = Callable[[WorkResult], None]


async def run_refresh_loop(
        schedule: Schedule,
        *,
        interactor: ScheduleInteractor,
        date_provider: DateProvider,
        emit: Emit,
        interval_seconds: float = 1.0,
        status_controller: TimeTaskStatusController | None = None,
) -> Schedule:
    """
    Refresh `schedule` until all of its tasks are completed.

    Every tick:
    - refresh statuses with date_provider.now()
    - changed (or first tick) -> emit UpdateSchedule, mark dirty
    - dirty and something still incomplete -> persist (retry next tick on failure)
    - nothing incomplete -> return the final snapshot
    """
    controller = status_controller or TimeTaskStatusController()
    sleep_s = max(0.0, float(interval_seconds))

    previous: Schedule | None = None
    dirty = False

    while True:
        current = controller.refresh_schedule(previous or schedule, date_provider.now())

        if previous is None or current.time_tasks != previous.time_tasks:
            emit(ActionResult(UpdateSchedule(current)))
            dirty = True
        previous = current

        if dirty:
            if current.has_incomplete:
                result = interactor.update_schedule(current)
                if result.ok:
                    dirty = False
                else:
                    logger.warning(
                        "Schedule %s refresh persist failed; retrying next tick: %s",
                        current.date.isoformat(),
                        result.failure,
                    )
                    emit(EffectResult(ShowError(result.failure)))  # type: ignore[arg-type]
            else:
                dirty = False

        if not current.has_incomplete:
            logger.debug("Schedule %s settled; refresh loop finished.", current.date.isoformat())
            return current

        await asyncio.sleep(sleep_s)
