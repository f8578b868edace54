# src/timeplanner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete stores, interactors and processors into AppState.
"""

from __future__ import annotations

import logging

from ..categories.category_interactor import CategoriesInteractor
from ..categories.category_store import CategoryStore
from ..config import get_settings
from ..core.clock import SystemDateProvider
from ..core.ports import DateProvider, NotificationScheduler
from ..core.state import AppState
from ..notifications.alarms import LoggingAlarmScheduler
from ..schedules.schedule_interactor import ScheduleInteractor
from ..schedules.schedule_store import ScheduleStore
from ..schedules.schedule_work import ScheduleWorkProcessor
from ..schedules.time_shift import TimeShiftInteractor
from ..settings.theme_store import ThemeSettingsStore
from ..templates.template_interactor import TemplatesInteractor
from ..templates.template_sorting import TemplatesSortedType
from ..templates.template_store import TemplateStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.planner_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.settings_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
        *,
        settings=None,
        date_provider: DateProvider | None = None,
        notification_scheduler: NotificationScheduler | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the clock / alarm boundary) injectable makes the app easier
    to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    dates = date_provider or SystemDateProvider()
    alarms = notification_scheduler or LoggingAlarmScheduler()

    schedule_store = ScheduleStore(settings.planner_db_path)
    template_store = TemplateStore(settings.planner_db_path)
    category_store = CategoryStore(settings.planner_db_path)
    theme_store = ThemeSettingsStore(settings.settings_db_path)

    schedules = ScheduleInteractor(schedule_store, template_store)
    time_shift = TimeShiftInteractor(schedule_store)

    processor = ScheduleWorkProcessor(
        schedule_interactor=schedules,
        time_shift_interactor=time_shift,
        notification_scheduler=alarms,
        date_provider=dates,
        refresh_interval_seconds=settings.refresh_interval_seconds,
        shift_minutes=settings.shift_minutes,
    )

    state = AppState(
        settings=settings,
        date_provider=dates,
        notification_scheduler=alarms,
        theme_store=theme_store,
        schedules=schedules,
        time_shift=time_shift,
        templates=TemplatesInteractor(template_store),
        categories=CategoriesInteractor(category_store),
        schedule_processor=processor,
        theme=theme_store.fetch_settings(),
        templates_sort=TemplatesSortedType.parse(getattr(settings, "default_templates_sort", None)),
    )
    logger.debug("AppState created data_dir=%s", settings.data_dir)
    return state
