from __future__ import annotations

import logging

import pytest

from taskfilter.domain.entities import TaskRecord
from taskfilter.domain.enums import EvaluationErrorKind
from taskfilter.domain.errors import FilterEvaluationError
from taskfilter.domain.filters import FilterCondition, FilterGroup
from taskfilter.services import filter_service
from taskfilter.services.extractor import PropertyExtractor
from taskfilter.services.filter_service import FilterService
from taskfilter.services.status import StatusManager


def _cond(node_id: str, prop: str, operator: str, value=None) -> FilterCondition:
    return FilterCondition(id=node_id, property=prop, operator=operator, value=value)


TASKS = [
    TaskRecord(title="A", path="a.md", status="open", tags=("urgent",)),
    TaskRecord(title="B", path="b.md", status="open", tags=("home",)),
    TaskRecord(title="C", path="c.md", status="done", tags=("home",)),
]


def test_open_and_not_urgent() -> None:
    query = FilterGroup(
        id="root",
        conjunction="and",
        children=(
            _cond("c1", "status", "is", "open"),
            _cond("c2", "tags", "contains", "-urgent"),
        ),
    )
    matched = FilterService().filter_tasks(query, TASKS)
    assert [task.path for task in matched] == ["b.md"]


def test_empty_groups_follow_all_and_any() -> None:
    service = FilterService()
    task = TASKS[0]
    assert service.evaluate(FilterGroup(id="g", conjunction="and"), task) is True
    assert service.evaluate(FilterGroup(id="g", conjunction="or"), task) is False


def test_or_group_with_nested_and() -> None:
    query = FilterGroup(
        id="root",
        conjunction="or",
        children=(
            _cond("c1", "status", "is", "done"),
            FilterGroup(
                id="inner",
                conjunction="and",
                children=(
                    _cond("c2", "tags", "contains", "urgent"),
                    _cond("c3", "title", "contains", "a"),
                ),
            ),
        ),
    )
    matched = FilterService().filter_tasks(query, TASKS)
    assert [task.path for task in matched] == ["a.md", "c.md"]


def test_incomplete_conditions_are_skipped() -> None:
    query = FilterGroup(
        id="root",
        children=(
            _cond("c1", "status", "is", "open"),
            _cond("draft", "", "is"),
            _cond("no-value", "title", "contains", ""),
        ),
    )
    assert len(FilterService().filter_tasks(query, TASKS)) == 2


def test_or_group_with_only_incomplete_children_matches_nothing() -> None:
    query = FilterGroup(id="root", conjunction="or", children=(_cond("draft", "", "is"),))
    assert FilterService().filter_tasks(query, TASKS) == []


def test_completion_uses_injected_resolver() -> None:
    statuses = StatusManager.from_completed_values(["done"])
    service = FilterService(PropertyExtractor(status_resolver=statuses.is_task_completed))
    query = FilterGroup(id="root", children=(_cond("c1", "status.isCompleted", "is-checked"),))
    assert [task.path for task in service.filter_tasks(query, TASKS)] == ["c.md"]


def test_completion_without_resolver_is_never_checked() -> None:
    query = FilterGroup(id="root", children=(_cond("c1", "status.isCompleted", "is-checked"),))
    assert FilterService().filter_tasks(query, TASKS) == []


def test_evaluation_does_not_mutate_inputs() -> None:
    query = FilterGroup(id="root", children=(_cond("c1", "tags", "contains", ("home",)),))
    snapshot = (query, list(TASKS))
    FilterService().filter_tasks(query, TASKS)
    assert (query, TASKS) == snapshot


def test_unknown_operator_is_raised_with_node_id() -> None:
    condition = _cond("c1", "status", "is-sort-of", "open")
    with pytest.raises(FilterEvaluationError) as info:
        FilterService(on_error="raise").evaluate(condition, TASKS[0])
    assert info.value.kind is EvaluationErrorKind.UNKNOWN_OPERATOR
    assert info.value.node_id == "c1"


def test_exclude_policy_logs_and_drops_the_record(caplog) -> None:
    condition = _cond("c1", "colour", "is", "red")
    service = FilterService(on_error="exclude")
    with caplog.at_level(logging.WARNING, logger="taskfilter.services.filter_service"):
        assert service.evaluate(condition, TASKS[0]) is False
    assert "c1" in caplog.text


@pytest.mark.parametrize(
    ("condition", "kind"),
    [
        (_cond("c1", "colour", "is", "red"), EvaluationErrorKind.UNKNOWN_PROPERTY),
        (_cond("c1", "status", "is-sort-of", "open"), EvaluationErrorKind.UNKNOWN_OPERATOR),
    ],
)
def test_invalid_condition_inside_group_is_raised(condition, kind) -> None:
    query = FilterGroup(
        id="root",
        children=(_cond("c0", "status", "is", "open"), condition),
    )
    with pytest.raises(FilterEvaluationError) as info:
        FilterService(on_error="raise").filter_tasks(query, TASKS)
    assert info.value.kind is kind
    assert info.value.node_id == "c1"


@pytest.mark.parametrize(
    "condition",
    [
        _cond("c1", "colour", "is", "red"),
        _cond("c1", "status", "is-sort-of", "open"),
    ],
)
def test_invalid_condition_inside_group_is_excluded(condition, caplog) -> None:
    query = FilterGroup(id="root", conjunction="or", children=(condition,))
    with caplog.at_level(logging.WARNING, logger="taskfilter.services.filter_service"):
        assert FilterService(on_error="exclude").filter_tasks(query, TASKS) == []
    assert "c1" in caplog.text


def test_invalid_condition_in_nested_group_is_not_skipped() -> None:
    query = FilterGroup(
        id="root",
        conjunction="or",
        children=(
            _cond("draft", "", "is"),
            FilterGroup(id="inner", children=(_cond("c1", "colour", "is", "red"),)),
        ),
    )
    with pytest.raises(FilterEvaluationError) as info:
        FilterService(on_error="raise").evaluate(query, TASKS[0])
    assert info.value.node_id == "c1"


def test_rejects_unknown_error_policy() -> None:
    with pytest.raises(ValueError):
        FilterService(on_error="ignore")


def test_date_and_numeric_conditions_end_to_end() -> None:
    tasks = [
        TaskRecord(path="late.md", due="2025-01-09T18:00", time_estimate=90),
        TaskRecord(path="ontime.md", due="2025-01-10", time_estimate=15),
        TaskRecord(path="broken.md", due="next-ish", time_estimate=None),
    ]
    query = FilterGroup(
        id="root",
        children=(
            _cond("c1", "due", "is-on-or-before", "2025-01-10"),
            _cond("c2", "timeEstimate", "is-greater-than", 30),
        ),
    )
    assert [task.path for task in FilterService().filter_tasks(query, tasks)] == ["late.md"]


def test_in_progress_conditions_are_found_once_per_call(monkeypatch) -> None:
    seen: list[str] = []
    original = filter_service.is_in_progress

    def counting(condition: FilterCondition) -> bool:
        seen.append(condition.id)
        return original(condition)

    monkeypatch.setattr(filter_service, "is_in_progress", counting)
    query = FilterGroup(
        id="root",
        children=(_cond("c1", "status", "is", "open"), _cond("draft", "", "is")),
    )
    assert len(FilterService().filter_tasks(query, TASKS)) == 2
    assert sorted(seen) == ["c1", "draft"]
