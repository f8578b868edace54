# tests/test_refresh_loop.py

from __future__ import annotations

import asyncio

import pytest

from timeplanner.core.result import PersistenceFailure
from timeplanner.core.work import ActionResult, EffectResult, ShowError
from timeplanner.schedules.home_contract import UpdateSchedule
from timeplanner.schedules.refresh_loop import run_refresh_loop
from timeplanner.schedules.schedule_interactor import ScheduleInteractor
from timeplanner.schedules.schedule_models import ExecutionStatus, Schedule

from .fakes import DAY, FakeDateProvider, InMemoryScheduleRepo, InMemoryTemplateRepo, at, make_task


def _statuses(schedule: Schedule) -> list[ExecutionStatus]:
    return [t.execution_status for t in schedule.time_tasks]


def _interactor(repo: InMemoryScheduleRepo) -> ScheduleInteractor:
    return ScheduleInteractor(repo, InMemoryTemplateRepo())


@pytest.mark.asyncio
async def test_loop_emits_changes_persists_incomplete_and_stops_when_settled() -> None:
    schedule = Schedule(date=DAY, time_tasks=(make_task(1, "09:00", "10:00"), make_task(2, "10:00", "11:00")))
    repo = InMemoryScheduleRepo(schedule)
    clock = FakeDateProvider(at("09:30"), at("10:00"), at("10:30"), at("11:00"))
    emitted = []

    final = await asyncio.wait_for(
        run_refresh_loop(
            schedule,
            interactor=_interactor(repo),
            date_provider=clock,
            emit=emitted.append,
            interval_seconds=0,
        ),
        timeout=2.0,
    )

    updates = [r.action.schedule for r in emitted if isinstance(r, ActionResult)]
    assert [_statuses(s) for s in updates] == [
        [ExecutionStatus.RUNNING, ExecutionStatus.PLANNED],
        [ExecutionStatus.COMPLETED, ExecutionStatus.RUNNING],
        [ExecutionStatus.COMPLETED, ExecutionStatus.COMPLETED],
    ]
    # the 10:30 tick changed nothing, the 11:00 tick left nothing incomplete
    assert len(repo.updates) == 2
    assert final.is_completed
    assert clock.calls == 4


@pytest.mark.asyncio
async def test_settled_schedule_is_emitted_once_and_never_persisted() -> None:
    schedule = Schedule(date=DAY, time_tasks=(make_task(1, "09:00", "10:00", is_completed=True),))
    repo = InMemoryScheduleRepo(schedule)
    emitted = []

    await asyncio.wait_for(
        run_refresh_loop(
            schedule,
            interactor=_interactor(repo),
            date_provider=FakeDateProvider(at("09:30")),
            emit=emitted.append,
            interval_seconds=0,
        ),
        timeout=2.0,
    )

    assert len(emitted) == 1
    assert isinstance(emitted[0].action, UpdateSchedule)
    assert repo.update_attempts == []


@pytest.mark.asyncio
async def test_persistence_failure_is_reported_and_retried_next_tick() -> None:
    schedule = Schedule(date=DAY, time_tasks=(make_task(1, "09:00", "10:00"),))
    repo = InMemoryScheduleRepo(schedule, fail_updates=1)
    clock = FakeDateProvider(at("09:30"), at("09:30"), at("10:00"))
    emitted = []

    await asyncio.wait_for(
        run_refresh_loop(
            schedule,
            interactor=_interactor(repo),
            date_provider=clock,
            emit=emitted.append,
            interval_seconds=0,
        ),
        timeout=2.0,
    )

    effects = [r.effect for r in emitted if isinstance(r, EffectResult)]
    assert len(effects) == 1
    assert isinstance(effects[0], ShowError)
    assert isinstance(effects[0].failure, PersistenceFailure)

    assert len(repo.update_attempts) == 2
    assert _statuses(repo.schedules[DAY]) == [ExecutionStatus.RUNNING]


@pytest.mark.asyncio
async def test_loop_runs_until_cancelled_while_tasks_remain() -> None:
    schedule = Schedule(date=DAY, time_tasks=(make_task(1, "09:00", "10:00"),))
    repo = InMemoryScheduleRepo(schedule)
    emitted = []

    runner = asyncio.create_task(
        run_refresh_loop(
            schedule,
            interactor=_interactor(repo),
            date_provider=FakeDateProvider(at("09:30")),
            emit=emitted.append,
            interval_seconds=0.01,
        )
    )

    await asyncio.sleep(0.05)
    assert not runner.done()
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    # one emission and one write: nothing changed after the first tick
    assert len(emitted) == 1
    assert len(repo.updates) == 1
