from __future__ import annotations

from typing import Any

from taskfilter.domain.enums import BuiltinProperty, Conjunction
from taskfilter.domain.errors import FilterValidationError
from taskfilter.domain.filters import FilterCondition, FilterGroup, FilterNode
from taskfilter.domain.properties import (
    operator_requires_value,
    parse_property,
    valid_operators,
)


def validate_node(node: Any, strict: bool = True) -> None:
    """Validate a filter node and its descendants.

    Strict mode is used before a tree is saved or executed. Lenient mode
    tolerates the in-progress nodes an editor produces: an unselected
    property and a missing value.
    """
    if not isinstance(node, (FilterCondition, FilterGroup)):
        raise FilterValidationError("Filter node must be a condition or a group", "type")

    if not isinstance(node.id, str) or not node.id:
        raise FilterValidationError(
            "Filter node must have a valid string ID",
            "id",
            str(node.id) if node.id is not None else "unknown",
        )

    if isinstance(node, FilterCondition):
        _validate_condition(node, strict)
    else:
        _validate_group(node, strict)


def _validate_condition(condition: FilterCondition, strict: bool) -> None:
    if not isinstance(condition.property, str):
        raise FilterValidationError(
            "Condition must have a valid property", "property", condition.id
        )

    if condition.property == BuiltinProperty.PLACEHOLDER:
        if strict:
            raise FilterValidationError("Property must be selected", "property", condition.id)
        return

    try:
        prop = parse_property(condition.property)
    except ValueError as exc:
        raise FilterValidationError(str(exc), "property", condition.id) from None

    if not isinstance(condition.operator, str) or not condition.operator:
        raise FilterValidationError(
            "Condition must have a valid operator", "operator", condition.id
        )

    if condition.operator not in valid_operators(prop):
        raise FilterValidationError(
            f"Operator '{condition.operator}' is not valid for property '{condition.property}'",
            "operator",
            condition.id,
        )

    if strict and operator_requires_value(condition.operator) and condition.value in (None, ""):
        raise FilterValidationError(
            f"Operator '{condition.operator}' requires a value", "value", condition.id
        )


def _validate_group(group: FilterGroup, strict: bool) -> None:
    if group.conjunction not in (Conjunction.AND, Conjunction.OR):
        raise FilterValidationError(
            "Group must have a valid conjunction (and/or)", "conjunction", group.id
        )

    if not isinstance(group.children, (list, tuple)):
        raise FilterValidationError("Group must have a children array", "children", group.id)

    for index, child in enumerate(group.children):
        try:
            validate_node(child, strict)
        except FilterValidationError as exc:
            raise FilterValidationError(
                f"Child {index}: {exc.message}", exc.field, group.id
            ) from exc


def is_complete(node: FilterNode) -> bool:
    try:
        validate_node(node, strict=True)
    except FilterValidationError:
        return False
    return True


def is_in_progress(condition: FilterCondition) -> bool:
    """A condition an editor is still filling in: no property yet, or no value.

    Conditions that are wrong rather than unfinished (unknown property or
    operator) are not in progress.
    """
    try:
        validate_node(condition, strict=False)
    except FilterValidationError:
        return False
    return not is_complete(condition)
