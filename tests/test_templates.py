# tests/test_templates.py

from __future__ import annotations

from datetime import time

import pytest

from timeplanner.core.result import NotFoundFailure
from timeplanner.core.work import ActionResult, EffectResult
from timeplanner.schedules.schedule_models import ExecutionStatus
from timeplanner.templates.template_models import Template, convert_to_time_task, generate_task_key
from timeplanner.templates.template_sorting import TemplatesSortedType, sort_templates
from timeplanner.templates.template_work import (
    AddTemplate,
    DeleteTemplate,
    EditTemplate,
    LoadTemplates,
    TemplatesWorkProcessor,
    UpdateTemplates,
)

from .fakes import DAY, at


def tpl(id: int, start: str, end: str, category_id: int = 1, **kwargs) -> Template:
    return Template(
        id=id,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        category_id=category_id,
        **kwargs,
    )


def test_template_binds_to_date_as_planned_task() -> None:
    template = tpl(7, "09:00", "10:30", category_id=3, sub_category_id=4, is_important=True)

    task = convert_to_time_task(template, DAY, key=99)

    assert task.key == 99
    assert task.date == DAY
    assert task.time_range.start == at("09:00")
    assert task.time_range.end == at("10:30")
    assert task.duration == template.duration
    assert (task.category_id, task.sub_category_id) == (3, 4)
    assert task.is_important and task.is_enable_notification
    assert not task.is_completed
    assert task.execution_status == ExecutionStatus.PLANNED


def test_generated_keys_are_positive_and_distinct() -> None:
    keys = {generate_task_key() for _ in range(100)}
    assert len(keys) == 100
    assert all(0 < k < 2**63 for k in keys)


def test_template_validation() -> None:
    with pytest.raises(ValueError):
        tpl(1, "10:00", "10:00")
    with pytest.raises(ValueError):
        tpl(1, "09:00", "10:00", repeat_days=(7,))

    assert tpl(1, "09:00", "10:00", repeat_days=(4, 0, 4)).repeat_days == (0, 4)


def test_repeats_on_weekday() -> None:
    template = tpl(1, "09:00", "10:00", repeat_days=(0,))
    assert template.repeats_on(DAY)
    assert not template.repeats_on(DAY.replace(day=DAY.day + 1))


def test_sorting_is_stable_and_keeps_input() -> None:
    a = tpl(1, "10:00", "10:30", category_id=2)
    b = tpl(2, "09:00", "09:30", category_id=1)
    c = tpl(3, "08:00", "09:00", category_id=2)
    items = [a, b, c]

    assert sort_templates(items, TemplatesSortedType.DATE) == [c, b, a]
    assert sort_templates(items, TemplatesSortedType.CATEGORIES) == [b, a, c]
    assert sort_templates(items, TemplatesSortedType.DURATION) == [a, b, c]
    assert items == [a, b, c]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("date", TemplatesSortedType.DATE),
        ("Category", TemplatesSortedType.CATEGORIES),
        ("categories", TemplatesSortedType.CATEGORIES),
        ("duration", TemplatesSortedType.DURATION),
        ("bogus", TemplatesSortedType.DATE),
        (None, TemplatesSortedType.DATE),
    ],
)
def test_sort_type_parse(raw, expected) -> None:
    assert TemplatesSortedType.parse(raw) == expected


def test_work_processor_add_and_delete(state) -> None:
    processor = TemplatesWorkProcessor(state.templates)

    processor.work(AddTemplate(tpl(0, "10:00", "11:00"), TemplatesSortedType.DATE))
    result = processor.work(AddTemplate(tpl(0, "08:00", "08:30", category_id=5), TemplatesSortedType.DATE))

    assert isinstance(result, ActionResult)
    assert isinstance(result.action, UpdateTemplates)
    assert [t.start_time for t in result.action.templates] == [time(8, 0), time(10, 0)]

    doomed = result.action.templates[0].id
    result = processor.work(DeleteTemplate(doomed, TemplatesSortedType.DATE))
    assert [t.start_time for t in result.action.templates] == [time(10, 0)]

    loaded = processor.work(LoadTemplates(TemplatesSortedType.DURATION))
    assert len(loaded.action.templates) == 1


def test_work_processor_reports_missing_template(state) -> None:
    result = TemplatesWorkProcessor(state.templates).work(DeleteTemplate(404, TemplatesSortedType.DATE))

    assert isinstance(result, EffectResult)
    assert isinstance(result.effect.failure, NotFoundFailure)


def test_work_processor_edit_updates_stored_template(state) -> None:
    processor = TemplatesWorkProcessor(state.templates)
    added = processor.work(AddTemplate(tpl(0, "10:00", "11:00"), TemplatesSortedType.DATE))
    template_id = added.action.templates[0].id

    result = processor.work(
        EditTemplate(tpl(template_id, "07:30", "08:00", category_id=4, repeat_days=(1,)), TemplatesSortedType.DATE)
    )

    (edited,) = result.action.templates
    assert edited.id == template_id
    assert (edited.start_time, edited.end_time) == (time(7, 30), time(8, 0))
    assert edited.category_id == 4
    assert edited.repeat_days == (1,)


def test_work_processor_edit_of_missing_template_shows_error(state) -> None:
    result = TemplatesWorkProcessor(state.templates).work(
        EditTemplate(tpl(404, "07:30", "08:00"), TemplatesSortedType.DATE)
    )

    assert isinstance(result, EffectResult)
    assert isinstance(result.effect.failure, NotFoundFailure)
