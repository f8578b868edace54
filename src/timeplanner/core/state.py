# src/timeplanner/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..categories.category_interactor import CategoriesInteractor
from ..schedules.schedule_interactor import ScheduleInteractor
from ..schedules.schedule_work import ScheduleWorkProcessor
from ..schedules.time_shift import TimeShiftInteractor
from ..settings.theme_store import ThemeSettings
from ..templates.template_interactor import TemplatesInteractor
from ..templates.template_sorting import TemplatesSortedType
from .ports import DateProvider, NotificationScheduler, ThemeSettingsRepo


@dataclass
class AppState:
    """
    Runtime container passed to connectors and commands.

    Keep it boring: stores + interactors + a few mutable UI preferences.
    Concrete construction happens in cli/bootstrap.py (composition root).
    """

    settings: Any

    date_provider: DateProvider
    notification_scheduler: NotificationScheduler
    theme_store: ThemeSettingsRepo

    schedules: ScheduleInteractor
    time_shift: TimeShiftInteractor
    templates: TemplatesInteractor
    categories: CategoriesInteractor
    schedule_processor: ScheduleWorkProcessor

    theme: ThemeSettings = field(default_factory=ThemeSettings)
    templates_sort: TemplatesSortedType = TemplatesSortedType.DATE

    # Home screen model (lives on the background event loop; see connectors/background_runner.py).
    home: Any | None = None
    runner: Any | None = None

    lock: threading.RLock = field(default_factory=threading.RLock)
