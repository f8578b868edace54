# tests/test_schedule_work.py

from __future__ import annotations

from datetime import time

import pytest

from timeplanner.core.result import NotFoundFailure, OverlapFailure, ShiftOutOfBoundsFailure
from timeplanner.core.work import ActionResult, EffectResult, ShowError
from timeplanner.schedules.home_contract import SetEmptySchedule, UpdateSchedule
from timeplanner.schedules.schedule_models import ExecutionStatus
from timeplanner.schedules.schedule_work import (
    ChangeTaskDoneState,
    CreateSchedule,
    LoadScheduleByDate,
    TimeTaskShiftDown,
    TimeTaskShiftUp,
)
from timeplanner.templates.template_models import Template

from .fakes import DAY, at


def template(start: str, end: str, **kwargs) -> Template:
    return Template(
        id=kwargs.pop("id", 0),
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        category_id=kwargs.pop("category_id", 1),
        **kwargs,
    )


async def collect(stream) -> list:
    return [item async for item in stream]


async def create(state, *templates: Template) -> list:
    return await collect(state.schedule_processor.work(CreateSchedule(DAY, tuple(templates))))


def stored(state):
    return state.schedules.fetch_schedule_by_date(DAY).unwrap()


@pytest.mark.asyncio
async def test_load_without_schedule_offers_templates_repeating_on_weekday(state) -> None:
    state.templates.add_template(template("09:00", "10:00", repeat_days=(0, 2)))
    state.templates.add_template(template("11:00", "12:00", repeat_days=(1,)))
    state.templates.add_template(template("13:00", "14:00"))

    results = await collect(state.schedule_processor.work(LoadScheduleByDate(DAY)))

    assert len(results) == 1
    action = results[0].action
    assert isinstance(action, SetEmptySchedule)
    assert action.date == DAY
    assert [t.start_time for t in action.planned_templates] == [time(9, 0)]


@pytest.mark.asyncio
async def test_load_streams_refreshed_schedule_until_settled(state, clock) -> None:
    assert await create(state, template("09:00", "10:00"), template("10:00", "11:00")) == []
    clock.set(at("12:00"))

    results = await collect(state.schedule_processor.work(LoadScheduleByDate(DAY)))

    assert len(results) == 1
    assert isinstance(results[0], ActionResult)
    action = results[0].action
    assert isinstance(action, UpdateSchedule)
    assert action.schedule.is_completed
    assert [t.execution_status for t in action.schedule.time_tasks] == [ExecutionStatus.COMPLETED] * 2


@pytest.mark.asyncio
async def test_create_instantiates_templates_and_requests_future_alarms(state, alarms) -> None:
    # the clock stands at 08:00
    await create(
        state,
        template("07:00", "07:30"),
        template("09:00", "10:00", is_important=True),
        template("11:00", "12:00", is_enable_notification=False),
    )

    schedule = stored(state)
    assert [(t.time_range.start, t.time_range.end) for t in schedule.time_tasks] == [
        (at("07:00"), at("07:30")),
        (at("09:00"), at("10:00")),
        (at("11:00"), at("12:00")),
    ]
    assert all(t.execution_status == ExecutionStatus.PLANNED and not t.is_completed for t in schedule.time_tasks)
    assert schedule.time_tasks[1].is_important
    assert len({t.key for t in schedule.time_tasks}) == 3

    assert [t.time_range.start for t in alarms.scheduled] == [at("09:00")]


@pytest.mark.asyncio
async def test_create_rejects_overlapping_templates(state) -> None:
    results = await create(state, template("09:00", "10:00"), template("09:30", "10:30"))

    assert len(results) == 1
    assert isinstance(results[0], EffectResult)
    assert isinstance(results[0].effect.failure, OverlapFailure)
    assert stored(state) is None


@pytest.mark.asyncio
async def test_change_done_state_toggles_task(state) -> None:
    await create(state, template("09:00", "10:00"))
    key = stored(state).time_tasks[0].key

    assert await collect(state.schedule_processor.work(ChangeTaskDoneState(DAY, key))) == []
    assert stored(state).time_tasks[0].is_completed

    await collect(state.schedule_processor.work(ChangeTaskDoneState(DAY, key)))
    assert not stored(state).time_tasks[0].is_completed


@pytest.mark.asyncio
async def test_change_done_state_of_unknown_task_shows_error(state) -> None:
    await create(state, template("09:00", "10:00"))

    results = await collect(state.schedule_processor.work(ChangeTaskDoneState(DAY, 12345)))

    assert len(results) == 1
    effect = results[0].effect
    assert isinstance(effect, ShowError)
    assert isinstance(effect.failure, NotFoundFailure)
    assert effect.message.startswith("NotFoundFailure")


@pytest.mark.asyncio
async def test_shift_commands_use_configured_step(state) -> None:
    await create(state, template("09:00", "10:00"), template("10:05", "11:00"))
    first = stored(state).time_tasks[0]

    assert await collect(state.schedule_processor.work(TimeTaskShiftUp(first))) == []
    assert [t.time_range.start for t in stored(state).time_tasks] == [at("09:15"), at("10:20")]

    first = stored(state).time_tasks[0]
    await collect(state.schedule_processor.work(TimeTaskShiftDown(first)))
    assert [t.time_range.start for t in stored(state).time_tasks] == [at("09:00"), at("10:20")]


@pytest.mark.asyncio
async def test_shift_out_of_day_shows_error_and_keeps_schedule(state) -> None:
    await create(state, template("23:00", "23:50"))
    before = stored(state)

    results = await collect(state.schedule_processor.work(TimeTaskShiftUp(before.time_tasks[0])))

    assert isinstance(results[0].effect.failure, ShiftOutOfBoundsFailure)
    assert stored(state) == before
