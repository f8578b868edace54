# src/timeplanner/core/result.py

from __future__ import annotations

"""
Failure taxonomy and the Result type used by interactors.

Interactors never let storage errors escape: they return a Result that is either a value
or a typed PlannerFailure. Programming errors (ValueError, TypeError, ...) still propagate.
"""

import logging
import sqlite3
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PlannerFailure(Exception):
    """Base class for failures surfaced to the user as an error notification."""


class NotFoundFailure(PlannerFailure):
    """A schedule, task, template or category does not exist."""


class ShiftOutOfBoundsFailure(PlannerFailure):
    """A time shift would move a task outside of its owning day."""


class PersistenceFailure(PlannerFailure):
    """Repository I/O error."""


class OverlapFailure(PlannerFailure):
    """Time ranges of one schedule would overlap."""


@dataclass(slots=True, frozen=True)
class Result(Generic[T]):
    value: T | None = None
    failure: PlannerFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def fail(cls, failure: PlannerFailure) -> Result[T]:
        return cls(failure=failure)

    def unwrap(self) -> T | None:
        """Return the value or raise the carried failure."""
        if self.failure is not None:
            raise self.failure
        return self.value


def wrap(call: Callable[[], T]) -> Result[T]:
    """
    Run `call` and fold its outcome into a Result.

    - PlannerFailure  -> failed result (as is)
    - sqlite3.Error / OSError -> PersistenceFailure
    """
    try:
        return Result.success(call())
    except PlannerFailure as failure:
        logger.info("Operation failed: %s: %s", type(failure).__name__, failure)
        return Result.fail(failure)
    except (sqlite3.Error, OSError) as e:
        logger.exception("Storage operation failed")
        failure = PersistenceFailure(str(e) or type(e).__name__)
        failure.__cause__ = e
        return Result.fail(failure)
