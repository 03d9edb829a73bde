from __future__ import annotations

from typing import Optional

from sqlalchemy import select

from taskfilter.domain.entities import SavedView
from taskfilter.domain.errors import FilterValidationError
from taskfilter.domain.filters import FilterGroup, deserialize_query, serialize_query

from .db import SessionLocal
from .models import SavedViewModel


def _to_entity(model: SavedViewModel) -> SavedView:
    query = deserialize_query(model.query)
    if not isinstance(query, FilterGroup):
        raise FilterValidationError(
            f"Saved view {model.name!r} does not have a group at its root", "type"
        )
    return SavedView(
        id=model.id,
        name=model.name,
        query=query,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class SavedViewRepository:
    """Stores filter trees as JSON text.

    Queries are serialized on write and rebuilt on read, so no two views
    (or a view and its caller) ever share node objects.
    """

    def __init__(self, session_factory=SessionLocal) -> None:
        self._session_factory = session_factory

    def list_views(self) -> list[SavedView]:
        with self._session_factory() as session:
            stmt = select(SavedViewModel).order_by(SavedViewModel.name.asc())
            return [_to_entity(view) for view in session.scalars(stmt)]

    def get_view(self, view_id: int) -> Optional[SavedView]:
        with self._session_factory() as session:
            view = session.get(SavedViewModel, view_id)
            return _to_entity(view) if view else None

    def get_by_name(self, name: str) -> Optional[SavedView]:
        with self._session_factory() as session:
            view = session.scalar(select(SavedViewModel).where(SavedViewModel.name == name))
            return _to_entity(view) if view else None

    def save_view(self, name: str, query: FilterGroup) -> SavedView:
        payload = serialize_query(query)
        with self._session_factory() as session:
            view = session.scalar(select(SavedViewModel).where(SavedViewModel.name == name))
            if view is None:
                view = SavedViewModel(name=name, query=payload)
                session.add(view)
            else:
                view.query = payload
            session.commit()
            session.refresh(view)
            return _to_entity(view)

    def delete_view(self, view_id: int) -> bool:
        with self._session_factory() as session:
            view = session.get(SavedViewModel, view_id)
            if not view:
                return False
            session.delete(view)
            session.commit()
            return True
