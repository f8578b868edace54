# tests/test_schedule_models.py

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

import pytest

from timeplanner.schedules.schedule_models import (
    ExecutionStatus,
    Schedule,
    TimeRange,
    find_overlap,
)

from .fakes import DAY, at, make_task


def test_time_range_rejects_empty_or_inverted() -> None:
    with pytest.raises(ValueError):
        TimeRange(at("10:00"), at("10:00"))
    with pytest.raises(ValueError):
        TimeRange(at("10:00"), at("09:00"))


def test_time_range_queries_are_half_open() -> None:
    a = TimeRange(at("09:00"), at("10:00"))
    b = TimeRange(at("10:00"), at("11:00"))
    c = TimeRange(at("09:30"), at("10:30"))

    assert a.duration == timedelta(hours=1)
    assert a.contains(at("09:00"))
    assert not a.contains(at("10:00"))
    assert not a.overlaps(b)
    assert a.overlaps(c) and c.overlaps(b)
    assert a.shifted(timedelta(minutes=15)) == TimeRange(at("09:15"), at("10:15"))


def test_schedule_orders_tasks_and_rejects_duplicate_keys() -> None:
    late = make_task(1, "12:00", "13:00")
    early = make_task(2, "08:00", "09:00")

    schedule = Schedule(date=DAY, time_tasks=(late, early))
    assert [t.key for t in schedule.time_tasks] == [2, 1]
    assert schedule.find_task(1) == late
    assert schedule.find_task(99) is None

    with pytest.raises(ValueError):
        Schedule(date=DAY, time_tasks=(late, make_task(1, "14:00", "15:00")))


def test_schedule_completion_is_derived_from_statuses() -> None:
    done = make_task(1, "08:00", "09:00", execution_status=ExecutionStatus.COMPLETED)
    running = make_task(2, "09:00", "10:00", execution_status=ExecutionStatus.RUNNING)

    assert not Schedule(date=DAY).is_completed
    assert not Schedule(date=DAY).has_incomplete

    mixed = Schedule(date=DAY, time_tasks=(done, running))
    assert mixed.has_incomplete and not mixed.is_completed

    settled = mixed.replace_tasks([replace(running, execution_status=ExecutionStatus.COMPLETED)])
    assert settled.is_completed and not settled.has_incomplete


def test_find_overlap_reports_first_conflict() -> None:
    a = make_task(1, "09:00", "10:00")
    b = make_task(2, "10:00", "11:00")
    c = make_task(3, "10:30", "12:00")

    assert find_overlap([a, b]) is None
    assert find_overlap([c, a, b]) == (b, c)


def test_execution_status_from_db_is_tolerant() -> None:
    assert ExecutionStatus.from_db("running") is ExecutionStatus.RUNNING
    assert ExecutionStatus.from_db(None) is ExecutionStatus.PLANNED
    assert ExecutionStatus.from_db("weird") is ExecutionStatus.PLANNED
