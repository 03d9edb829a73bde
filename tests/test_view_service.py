from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskfilter.domain.entities import TaskRecord
from taskfilter.domain.errors import FilterValidationError
from taskfilter.domain.filters import FilterCondition, FilterGroup
from taskfilter.infra.db import init_db
from taskfilter.infra.repository import SavedViewRepository
from taskfilter.services.view_service import ViewService


@pytest.fixture()
def service() -> ViewService:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    session_factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    return ViewService(SavedViewRepository(session_factory))


def _query(value: str = "open") -> FilterGroup:
    return FilterGroup(
        id="root",
        children=(FilterCondition(id="c1", property="status", operator="is", value=value),),
    )


def test_save_and_load_view(service: ViewService) -> None:
    query = _query()
    saved = service.save_view("Open tasks", query)
    assert saved.id is not None
    assert saved.query == query
    assert saved.query is not query

    loaded = service.get_view(saved.id)
    assert loaded.query == query
    assert [view.name for view in service.list_views()] == ["Open tasks"]


def test_saving_same_name_replaces_query(service: ViewService) -> None:
    first = service.save_view("Mine", _query("open"))
    second = service.save_view("Mine", _query("done"))
    assert second.id == first.id
    assert service.get_by_name("Mine").query.children[0].value == "done"


def test_saved_views_never_alias(service: ViewService) -> None:
    service.save_view("One", _query())
    service.save_view("Two", _query())
    one = service.get_by_name("One")
    two = service.get_by_name("Two")
    assert one.query == two.query
    assert one.query is not two.query
    assert one.query.children[0] is not two.query.children[0]


def test_save_rejects_incomplete_queries(service: ViewService) -> None:
    with pytest.raises(FilterValidationError) as info:
        service.save_view("Draft", _query(""))
    assert info.value.field == "value"
    with pytest.raises(FilterValidationError):
        service.save_view("   ", _query())
    assert service.list_views() == []


def test_duplicate_view_gets_fresh_ids(service: ViewService) -> None:
    original = service.save_view("Original", _query())
    copy = service.duplicate_view(original.id, "Copy")
    assert copy.id != original.id
    assert copy.query.id != original.query.id
    assert copy.query.children[0].value == "open"
    assert service.duplicate_view(9999, "Nope") is None


def test_run_and_delete_view(service: ViewService) -> None:
    view = service.save_view("Open", _query())
    tasks = [TaskRecord(path="a.md", status="open"), TaskRecord(path="b.md", status="done")]
    assert [task.path for task in service.run_view("Open", tasks)] == ["a.md"]

    assert service.delete_view(view.id)
    assert not service.delete_view(view.id)
    with pytest.raises(FilterValidationError):
        service.run_view("Open", tasks)
