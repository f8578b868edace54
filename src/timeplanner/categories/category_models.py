# src/timeplanner/categories/category_models.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class MainCategory:
    id: int
    name: str


@dataclass(slots=True, frozen=True)
class SubCategory:
    id: int
    main_category_id: int
    name: str


@dataclass(slots=True, frozen=True)
class Categories:
    main_category: MainCategory
    sub_categories: list[SubCategory] = field(default_factory=list)
