# src/timeplanner/templates/template_interactor.py

from __future__ import annotations

import logging

from ..core.ports import TemplateRepo
from ..core.result import NotFoundFailure, Result, wrap
from .template_models import Template

logger = logging.getLogger(__name__)


class TemplatesInteractor:
    def __init__(self, template_repo: TemplateRepo) -> None:
        self._repo = template_repo

    def fetch_templates(self) -> Result[list[Template]]:
        return wrap(self._repo.fetch_all_templates)

    def add_template(self, template: Template) -> Result[int]:
        return wrap(lambda: self._repo.add_template(template))

    def update_template(self, template: Template) -> Result[None]:
        def call() -> None:
            if self._repo.fetch_template_by_id(template.id) is None:
                raise NotFoundFailure(f"Template {template.id} not found")
            self._repo.update_template(template)

        return wrap(call)

    def delete_template(self, template_id: int) -> Result[None]:
        def call() -> None:
            if self._repo.fetch_template_by_id(template_id) is None:
                raise NotFoundFailure(f"Template {template_id} not found")
            self._repo.delete_template_by_id(template_id)
            logger.info("Template %s deleted", template_id)

        return wrap(call)
