# src/timeplanner/notifications/alarms.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from ..core.ports import NotificationScheduler
from ..schedules.schedule_models import TimeTask

logger = logging.getLogger(__name__)


def should_notify(task: TimeTask, now: datetime) -> bool:
    """Only persisted tasks with notifications on and a start still in the future."""
    return task.is_enable_notification and task.key != 0 and task.time_range.start > now


def add_notifications(scheduler: NotificationScheduler, tasks: Iterable[TimeTask], now: datetime) -> int:
    """Ask the scheduler for one alarm per eligible task. Returns how many were requested."""
    count = 0
    for task in tasks:
        if not should_notify(task, now):
            continue
        try:
            scheduler.schedule_alarm(task)
            count += 1
        except Exception:
            # Fire-and-forget: one failed alarm must not break schedule creation.
            logger.exception("schedule_alarm failed key=%s", task.key)
    return count


@dataclass(slots=True, frozen=True)
class AlarmRequest:
    key: int
    fire_at: datetime


@dataclass(slots=True)
class LoggingAlarmScheduler:
    """
    NotificationScheduler that only records and logs requests.

    Real delivery (OS alarms, push) lives outside of this package.
    """

    requests: list[AlarmRequest] = field(default_factory=list)

    def schedule_alarm(self, task: TimeTask) -> None:
        request = AlarmRequest(key=task.key, fire_at=task.time_range.start)
        self.requests.append(request)
        logger.info("Alarm scheduled key=%s at=%s", request.key, request.fire_at.isoformat(timespec="minutes"))
