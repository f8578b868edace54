# src/timeplanner/core/work.py

from __future__ import annotations

"""
Work results produced by work processors.

A processor maps a command to a stream of results:
- ActionResult: a state update for the screen model reducer
- EffectResult: a one-shot side effect for the view (e.g. show an error)
"""

from dataclasses import dataclass
from typing import Any, Union

from .result import PlannerFailure


@dataclass(slots=True, frozen=True)
class ActionResult:
    action: Any


@dataclass(slots=True, frozen=True)
class EffectResult:
    effect: Any


WorkResult = Union[ActionResult, EffectResult]


@dataclass(slots=True, frozen=True)
class ShowError:
    """Shared effect: surface a failure to the user."""

    failure: PlannerFailure

    @property
    def message(self) -> str:
        text = str(self.failure).strip()
        name = type(self.failure).__name__
        return f"{name}: {text}" if text else name
