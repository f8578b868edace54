# src/timeplanner/templates/template_sorting.py

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from .template_models import Template


class TemplatesSortedType(StrEnum):
    DATE = "date"
    CATEGORIES = "category"
    DURATION = "duration"

    @classmethod
    def parse(cls, raw: str | None, default: TemplatesSortedType | None = None) -> TemplatesSortedType:
        fallback = default or cls.DATE
        if not raw:
            return fallback
        value = raw.strip().lower()
        if value in ("categories", "cat"):
            value = cls.CATEGORIES.value
        try:
            return cls(value)
        except ValueError:
            return fallback


def sort_templates(templates: Iterable[Template], sorted_type: TemplatesSortedType) -> list[Template]:
    """Stable sort for display; ties keep the input order."""
    match sorted_type:
        case TemplatesSortedType.DATE:
            return sorted(templates, key=lambda t: t.start_time)
        case TemplatesSortedType.CATEGORIES:
            return sorted(templates, key=lambda t: t.category_id)
        case TemplatesSortedType.DURATION:
            return sorted(templates, key=lambda t: t.duration)
    raise ValueError(f"Unsupported sort type: {sorted_type!r}")
