# src/timeplanner/schedules/home_contract.py

from __future__ import annotations

"""
Home (day schedule) screen contract: view state, actions and the reducer.
"""

from dataclasses import dataclass, field, replace
from datetime import date

from ..templates.template_models import Template
from .schedule_models import Schedule


@dataclass(slots=True, frozen=True)
class HomeViewState:
    date: date | None = None
    schedule: Schedule | None = None
    planned_templates: tuple[Template, ...] = field(default_factory=tuple)
    last_error: str | None = None


@dataclass(slots=True, frozen=True)
class SetEmptySchedule:
    """The date has no schedule yet; offer the templates repeating on it."""

    date: date
    planned_templates: tuple[Template, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class UpdateSchedule:
    schedule: Schedule


HomeAction = SetEmptySchedule | UpdateSchedule


def reduce(state: HomeViewState, action: HomeAction) -> HomeViewState:
    match action:
        case SetEmptySchedule(date=day, planned_templates=templates):
            return HomeViewState(date=day, schedule=None, planned_templates=tuple(templates))
        case UpdateSchedule(schedule=schedule):
            return replace(state, date=schedule.date, schedule=schedule, planned_templates=(), last_error=None)
    raise TypeError(f"Unknown home action: {action!r}")
