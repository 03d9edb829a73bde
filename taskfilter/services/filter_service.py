from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace

from taskfilter.config import EVALUATION_ERROR_POLICIES, SETTINGS
from taskfilter.domain.entities import TaskRecord
from taskfilter.domain.enums import Conjunction
from taskfilter.domain.errors import FilterEvaluationError
from taskfilter.domain.filters import FilterCondition, FilterGroup, FilterNode
from taskfilter.services.extractor import PropertyExtractor
from taskfilter.services.operators import apply_operator
from taskfilter.services.validation import is_in_progress, validate_node

logger = logging.getLogger(__name__)


class FilterService:
    """Evaluates filter trees against task records.

    Conditions still being filled in (an unselected property, a missing
    value) are dropped from the tree once per call, so trees still being
    edited can be previewed. Every other condition is evaluated, and an
    unknown property or operator goes through the error policy. Once the
    unfinished conditions are dropped, an ``and`` group with no children
    matches every record and an ``or`` group with no children matches none.
    """

    def __init__(
        self,
        extractor: PropertyExtractor | None = None,
        on_error: str | None = None,
    ) -> None:
        policy = on_error or SETTINGS.evaluation_errors
        if policy not in EVALUATION_ERROR_POLICIES:
            raise ValueError(
                f"on_error must be one of {', '.join(EVALUATION_ERROR_POLICIES)}, got {policy!r}"
            )
        self._extractor = extractor or PropertyExtractor()
        self._on_error = policy

    def validate(self, query: FilterNode, strict: bool = True) -> None:
        validate_node(query, strict)

    def filter_tasks(self, query: FilterNode, tasks: Iterable[TaskRecord]) -> list[TaskRecord]:
        runnable = self._drop_in_progress(query)
        matched = [task for task in tasks if self._evaluate(runnable, task)]
        logger.debug("Filter %s matched %d task(s)", query.id, len(matched))
        return matched

    def evaluate(self, node: FilterNode, task: TaskRecord) -> bool:
        return self._evaluate(self._drop_in_progress(node), task)

    def _drop_in_progress(self, node: FilterNode) -> FilterNode:
        if not isinstance(node, FilterGroup):
            return node
        children = tuple(
            self._drop_in_progress(child)
            for child in node.children
            if not (isinstance(child, FilterCondition) and is_in_progress(child))
        )
        return replace(node, children=children)

    def _evaluate(self, node: FilterNode, task: TaskRecord) -> bool:
        if isinstance(node, FilterCondition):
            return self._evaluate_condition(node, task)
        results = (self._evaluate(child, task) for child in node.children)
        if node.conjunction == Conjunction.OR:
            return any(results)
        return all(results)

    def _evaluate_condition(self, condition: FilterCondition, task: TaskRecord) -> bool:
        try:
            task_value = self._extractor.get_value(task, condition.property, condition.id)
            return apply_operator(
                task_value,
                condition.operator,
                condition.value,
                condition.property,
                condition.id,
            )
        except FilterEvaluationError as exc:
            error = exc.with_node(condition.id)
            if self._on_error == "raise":
                if error is exc:
                    raise
                raise error from exc
            logger.warning(
                "Excluding task %s: condition %s failed: %s",
                task.path or task.title,
                error.node_id,
                error.message,
            )
            return False
