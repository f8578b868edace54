# src/timeplanner/templates/template_work.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.work import ActionResult, EffectResult, ShowError, WorkResult
from .template_interactor import TemplatesInteractor
from .template_models import Template
from .template_sorting import TemplatesSortedType, sort_templates

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LoadTemplates:
    sorted_type: TemplatesSortedType


@dataclass(slots=True, frozen=True)
class AddTemplate:
    template: Template
    sorted_type: TemplatesSortedType


@dataclass(slots=True, frozen=True)
class EditTemplate:
    template: Template
    sorted_type: TemplatesSortedType


@dataclass(slots=True, frozen=True)
class DeleteTemplate:
    id: int
    sorted_type: TemplatesSortedType


TemplatesWorkCommand = LoadTemplates | AddTemplate | EditTemplate | DeleteTemplate


@dataclass(slots=True, frozen=True)
class UpdateTemplates:
    templates: list[Template]


class TemplatesWorkProcessor:
    """One command -> one result (templates list or an error)."""

    def __init__(self, templates_interactor: TemplatesInteractor) -> None:
        self._templates = templates_interactor

    def work(self, command: TemplatesWorkCommand) -> WorkResult:
        match command:
            case LoadTemplates(sorted_type=sorted_type):
                return self._load_templates(sorted_type)
            case AddTemplate(template=template, sorted_type=sorted_type):
                added = self._templates.add_template(template)
                if not added.ok:
                    return EffectResult(ShowError(added.failure))  # type: ignore[arg-type]
                return self._load_templates(sorted_type)
            case EditTemplate(template=template, sorted_type=sorted_type):
                updated = self._templates.update_template(template)
                if not updated.ok:
                    return EffectResult(ShowError(updated.failure))  # type: ignore[arg-type]
                return self._load_templates(sorted_type)
            case DeleteTemplate(id=template_id, sorted_type=sorted_type):
                deleted = self._templates.delete_template(template_id)
                if not deleted.ok:
                    return EffectResult(ShowError(deleted.failure))  # type: ignore[arg-type]
                return self._load_templates(sorted_type)
        raise TypeError(f"Unknown templates command: {command!r}")

    def _load_templates(self, sorted_type: TemplatesSortedType) -> WorkResult:
        templates = self._templates.fetch_templates()
        if not templates.ok:
            return EffectResult(ShowError(templates.failure))  # type: ignore[arg-type]
        return ActionResult(UpdateTemplates(sort_templates(templates.value or [], sorted_type)))
