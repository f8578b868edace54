# src/timeplanner/categories/category_interactor.py

from __future__ import annotations

from ..core.ports import CategoryRepo
from ..core.result import NotFoundFailure, Result, wrap
from .category_models import Categories, MainCategory


class CategoriesInteractor:
    def __init__(self, category_repo: CategoryRepo) -> None:
        self._repo = category_repo

    def fetch_categories(self) -> Result[list[Categories]]:
        return wrap(self._repo.fetch_categories)

    def add_main_category(self, name: str) -> Result[int]:
        return wrap(lambda: self._repo.add_main_category(name))

    def update_main_category(self, category: MainCategory) -> Result[None]:
        def call() -> None:
            self._require_main(category.id)
            self._repo.update_main_category(category)

        return wrap(call)

    def delete_main_category(self, category_id: int) -> Result[None]:
        def call() -> None:
            self._require_main(category_id)
            self._repo.delete_main_category(category_id)

        return wrap(call)

    def add_sub_category(self, main_category_id: int, name: str) -> Result[int]:
        def call() -> int:
            self._require_main(main_category_id)
            return self._repo.add_sub_category(main_category_id, name)

        return wrap(call)

    def delete_sub_category(self, sub_category_id: int) -> Result[None]:
        def call() -> None:
            known = {s.id for c in self._repo.fetch_categories() for s in c.sub_categories}
            if sub_category_id not in known:
                raise NotFoundFailure(f"Sub-category {sub_category_id} not found")
            self._repo.delete_sub_category(sub_category_id)

        return wrap(call)

    def _require_main(self, category_id: int) -> None:
        if self._repo.fetch_main_category(category_id) is None:
            raise NotFoundFailure(f"Category {category_id} not found")
