# src/timeplanner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and notification delivery swappable and makes testing easier.
"""

from datetime import date, datetime
from typing import Any, Protocol


class DateProvider(Protocol):
    """The only time source of the core."""

    def now(self) -> datetime: ...


class NotificationScheduler(Protocol):
    """
    Alarm boundary: the core asks for "remind about task X at its start".

    Fire-and-forget; delivery is up to the implementation.
    """

    def schedule_alarm(self, task: Any) -> None: ...


class ScheduleRepo(Protocol):
    def fetch_schedule_by_date(self, day: date) -> Any | None: ...  # Schedule
    def create_schedule(self, day: date, tasks: list[Any]) -> Any: ...  # -> Schedule
    def update_schedule(self, schedule: Any) -> None: ...
    def delete_schedule(self, day: date) -> None: ...


class TemplateRepo(Protocol):
    def add_template(self, template: Any) -> int: ...
    def fetch_template_by_id(self, template_id: int) -> Any | None: ...
    def fetch_all_templates(self) -> list[Any]: ...
    def update_template(self, template: Any) -> None: ...
    def delete_template_by_id(self, template_id: int) -> None: ...
    def delete_all_templates(self) -> None: ...


class CategoryRepo(Protocol):
    def fetch_categories(self) -> list[Any]: ...  # list[Categories]
    def fetch_main_category(self, category_id: int) -> Any | None: ...
    def add_main_category(self, name: str) -> int: ...
    def update_main_category(self, category: Any) -> None: ...
    def delete_main_category(self, category_id: int) -> None: ...
    def add_sub_category(self, main_category_id: int, name: str) -> int: ...
    def delete_sub_category(self, sub_category_id: int) -> None: ...


class ThemeSettingsRepo(Protocol):
    def fetch_settings(self) -> Any: ...  # ThemeSettings
    def update_settings(self, settings: Any) -> None: ...
