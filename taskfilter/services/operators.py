"""Comparison routines behind each filter operator.

Every routine takes the task-side value first and the condition-side value
second. Date and number coercion failures make the comparison ``False``
rather than raising, so one malformed record only drops itself.
"""
from __future__ import annotations

import math
import operator as op
import re
from collections.abc import Callable
from typing import Any

from taskfilter.domain.dates import (
    date_part,
    is_before_time_aware,
    is_natural_language_date,
    is_same_date_safe,
    resolve_natural_language_date,
)
from taskfilter.domain.enums import BuiltinProperty, EvaluationErrorKind, FilterOperator
from taskfilter.domain.errors import FilterEvaluationError
from taskfilter.domain.filters import TaskPropertyValue
from taskfilter.domain.properties import PropertyId, is_date_property
from taskfilter.domain.tags import matches_tag_conditions

_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")
_EMPTY_PLACEHOLDERS = ("", '""', "''")


def apply_operator(
    task_value: TaskPropertyValue,
    operator: FilterOperator | str,
    condition_value: TaskPropertyValue,
    property: str | PropertyId | None = None,
    node_id: str | None = None,
) -> bool:
    try:
        parsed = FilterOperator(operator)
    except ValueError:
        raise FilterEvaluationError(
            f"Unknown operator: {operator}",
            kind=EvaluationErrorKind.UNKNOWN_OPERATOR,
            node_id=node_id,
            property=None if property is None else str(property),
        ) from None

    try:
        return _OPERATORS[parsed](task_value, condition_value, property)
    except FilterEvaluationError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise FilterEvaluationError(
            f"Error applying operator '{parsed}': {exc}",
            kind=EvaluationErrorKind.OPERATOR_FAILED,
            node_id=node_id,
            property=None if property is None else str(property),
        ) from exc


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _strict_equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right


def is_equal(
    task_value: TaskPropertyValue,
    condition_value: TaskPropertyValue,
    property: str | PropertyId | None = None,
) -> bool:
    if (
        is_date_property(property)
        and isinstance(task_value, str)
        and isinstance(condition_value, str)
        and (task_value or is_natural_language_date(condition_value))
    ):
        return _is_equal_date(task_value, condition_value)

    if _is_array(task_value):
        if _is_array(condition_value):
            return any(_strict_equals(tv, cv) for tv in task_value for cv in condition_value)
        return any(_strict_equals(tv, condition_value) for tv in task_value)
    if _is_array(condition_value):
        return any(_strict_equals(task_value, cv) for cv in condition_value)
    return _strict_equals(task_value, condition_value)


def _is_equal_date(task_value: str, condition_value: str) -> bool:
    resolved = resolve_natural_language_date(condition_value)
    try:
        return is_same_date_safe(date_part(task_value), date_part(resolved))
    except ValueError:
        return False


def contains(
    task_value: TaskPropertyValue,
    condition_value: TaskPropertyValue,
    property: str | PropertyId | None = None,
) -> bool:
    is_tags = property == BuiltinProperty.TAGS

    if _is_array(task_value):
        task_strings = [tv for tv in task_value if isinstance(tv, str)]
        if _is_array(condition_value):
            condition_strings = [cv for cv in condition_value if isinstance(cv, str)]
            if is_tags:
                return matches_tag_conditions(task_strings, condition_strings)
            return any(
                cv.lower() in tv.lower() for cv in condition_strings for tv in task_strings
            )
        needle = condition_value if isinstance(condition_value, str) else _as_text(condition_value)
        if is_tags:
            return matches_tag_conditions(task_strings, [needle])
        return any(needle.lower() in tv.lower() for tv in task_strings)

    if isinstance(task_value, str):
        if _is_array(condition_value):
            condition_strings = [cv for cv in condition_value if isinstance(cv, str)]
            if is_tags:
                return matches_tag_conditions([task_value], condition_strings)
            return any(cv.lower() in task_value.lower() for cv in condition_strings)
        if not isinstance(condition_value, str):
            return False
        if is_tags:
            return matches_tag_conditions([task_value], [condition_value])
        return condition_value.lower() in task_value.lower()

    return False


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_blank(value: Any) -> bool:
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and (
        value == 0 or math.isnan(value)
    )


def _compare_dates(
    task_value: TaskPropertyValue,
    condition_value: TaskPropertyValue,
    before: bool,
    inclusive: bool,
) -> bool:
    if _is_blank(task_value) or _is_blank(condition_value):
        return False
    if not isinstance(task_value, str) or not isinstance(condition_value, str):
        return False
    resolved = resolve_natural_language_date(condition_value)
    try:
        if before:
            strictly = is_before_time_aware(task_value, resolved)
        else:
            strictly = is_before_time_aware(resolved, task_value)
        if strictly:
            return True
        return inclusive and is_same_date_safe(date_part(task_value), date_part(resolved))
    except ValueError:
        return False


def is_empty(value: TaskPropertyValue) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if _is_array(value):
        return all(
            isinstance(item, str) and item.strip() in _EMPTY_PLACEHOLDERS for item in value
        )
    return False


def to_number(value: Any) -> float:
    """Coerce like JavaScript's ``parseFloat``; unparseable values give NaN."""
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if _is_array(value):
        value = ",".join(_as_text(item) for item in value)
    if not isinstance(value, str):
        return math.nan
    match = _LEADING_FLOAT.match(value)
    if not match:
        return math.nan
    return float(match.group(1).replace("Infinity", "inf"))


def _numeric(compare: Callable[[float, float], bool]) -> Callable[..., bool]:
    def apply(task_value: TaskPropertyValue, condition_value: TaskPropertyValue, _prop=None) -> bool:
        task_number = to_number(task_value)
        condition_number = to_number(condition_value)
        if math.isnan(task_number) or math.isnan(condition_number):
            return False
        return compare(task_number, condition_number)

    return apply


_OPERATORS: dict[FilterOperator, Callable[..., bool]] = {
    FilterOperator.IS: is_equal,
    FilterOperator.IS_NOT: lambda tv, cv, prop: not is_equal(tv, cv, prop),
    FilterOperator.CONTAINS: contains,
    FilterOperator.DOES_NOT_CONTAIN: lambda tv, cv, prop: not contains(tv, cv, prop),
    FilterOperator.IS_BEFORE: lambda tv, cv, _prop: _compare_dates(tv, cv, True, False),
    FilterOperator.IS_AFTER: lambda tv, cv, _prop: _compare_dates(tv, cv, False, False),
    FilterOperator.IS_ON_OR_BEFORE: lambda tv, cv, _prop: _compare_dates(tv, cv, True, True),
    FilterOperator.IS_ON_OR_AFTER: lambda tv, cv, _prop: _compare_dates(tv, cv, False, True),
    FilterOperator.IS_EMPTY: lambda tv, _cv, _prop: is_empty(tv),
    FilterOperator.IS_NOT_EMPTY: lambda tv, _cv, _prop: not is_empty(tv),
    FilterOperator.IS_CHECKED: lambda tv, _cv, _prop: tv is True,
    FilterOperator.IS_NOT_CHECKED: lambda tv, _cv, _prop: tv is not True,
    FilterOperator.IS_GREATER_THAN: _numeric(op.gt),
    FilterOperator.IS_LESS_THAN: _numeric(op.lt),
    FilterOperator.IS_GREATER_THAN_OR_EQUAL: _numeric(op.ge),
    FilterOperator.IS_LESS_THAN_OR_EQUAL: _numeric(op.le),
}
