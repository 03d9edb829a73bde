from __future__ import annotations

import logging
from collections.abc import Iterable

from taskfilter.domain.entities import SavedView, TaskRecord
from taskfilter.domain.errors import FilterValidationError
from taskfilter.domain.filters import FilterGroup
from taskfilter.infra.repository import SavedViewRepository
from taskfilter.services.filter_service import FilterService
from taskfilter.services.tree import deep_clone, regenerate_ids

logger = logging.getLogger(__name__)


class ViewService:
    def __init__(self, repo: SavedViewRepository, filters: FilterService | None = None) -> None:
        self._repo = repo
        self._filters = filters or FilterService()

    def list_views(self) -> list[SavedView]:
        return self._repo.list_views()

    def get_view(self, view_id: int) -> SavedView | None:
        return self._repo.get_view(view_id)

    def get_by_name(self, name: str) -> SavedView | None:
        return self._repo.get_by_name(name)

    def save_view(self, name: str, query: FilterGroup) -> SavedView:
        name = name.strip()
        if not name:
            raise FilterValidationError("Saved view needs a name")
        if not isinstance(query, FilterGroup):
            raise FilterValidationError("Saved view query must be a group", "type")
        self._filters.validate(query, strict=True)
        view = self._repo.save_view(name, deep_clone(query))
        logger.info("Saved view %s (%s)", view.name, view.id)
        return view

    def duplicate_view(self, view_id: int, new_name: str) -> SavedView | None:
        view = self._repo.get_view(view_id)
        if not view:
            return None
        return self.save_view(new_name, regenerate_ids(view.query))

    def delete_view(self, view_id: int) -> bool:
        return self._repo.delete_view(view_id)

    def run_view(self, name: str, tasks: Iterable[TaskRecord]) -> list[TaskRecord]:
        view = self._repo.get_by_name(name)
        if not view:
            raise FilterValidationError(f"No saved view named {name!r}")
        return self._filters.filter_tasks(view.query, tasks)
