from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .enums import BuiltinProperty, FilterOperator, PropertyShape

USER_PROPERTY_PREFIX = "user:"


@dataclass(frozen=True)
class DynamicProperty:
    """A ``user:<field_id>`` property pointing at a user-defined field."""

    field_id: str

    def __str__(self) -> str:
        return f"{USER_PROPERTY_PREFIX}{self.field_id}"


PropertyId = Union[BuiltinProperty, DynamicProperty]

_EQUALITY = (FilterOperator.IS, FilterOperator.IS_NOT)
_CONTAINS = (FilterOperator.CONTAINS, FilterOperator.DOES_NOT_CONTAIN)
_EMPTINESS = (FilterOperator.IS_EMPTY, FilterOperator.IS_NOT_EMPTY)
_CHECKED = (FilterOperator.IS_CHECKED, FilterOperator.IS_NOT_CHECKED)
_DATE_ORDERING = (
    FilterOperator.IS_BEFORE,
    FilterOperator.IS_AFTER,
    FilterOperator.IS_ON_OR_BEFORE,
    FilterOperator.IS_ON_OR_AFTER,
)
_NUMERIC_ORDERING = (
    FilterOperator.IS_GREATER_THAN,
    FilterOperator.IS_LESS_THAN,
    FilterOperator.IS_GREATER_THAN_OR_EQUAL,
    FilterOperator.IS_LESS_THAN_OR_EQUAL,
)

SHAPE_OPERATORS: dict[PropertyShape, tuple[FilterOperator, ...]] = {
    PropertyShape.PLACEHOLDER: (),
    PropertyShape.TEXT: _EQUALITY + _CONTAINS + _EMPTINESS,
    PropertyShape.PATH: _CONTAINS + _EMPTINESS,
    PropertyShape.SELECT: _EQUALITY + _EMPTINESS,
    PropertyShape.LIST: _CONTAINS + _EMPTINESS,
    PropertyShape.DATE: _EQUALITY + _DATE_ORDERING + _EMPTINESS,
    PropertyShape.BOOLEAN: _CHECKED,
    PropertyShape.NUMBER: _EQUALITY + _NUMERIC_ORDERING,
    PropertyShape.RECURRENCE: _EMPTINESS,
    PropertyShape.COMPLETION: _CHECKED,
    PropertyShape.DYNAMIC: tuple(FilterOperator),
}

PROPERTY_SHAPES: dict[BuiltinProperty, PropertyShape] = {
    BuiltinProperty.PLACEHOLDER: PropertyShape.PLACEHOLDER,
    BuiltinProperty.TITLE: PropertyShape.TEXT,
    BuiltinProperty.PATH: PropertyShape.PATH,
    BuiltinProperty.STATUS: PropertyShape.SELECT,
    BuiltinProperty.PRIORITY: PropertyShape.SELECT,
    BuiltinProperty.TAGS: PropertyShape.LIST,
    BuiltinProperty.CONTEXTS: PropertyShape.LIST,
    BuiltinProperty.PROJECTS: PropertyShape.LIST,
    BuiltinProperty.BLOCKED_BY: PropertyShape.LIST,
    BuiltinProperty.BLOCKING: PropertyShape.LIST,
    BuiltinProperty.DUE: PropertyShape.DATE,
    BuiltinProperty.SCHEDULED: PropertyShape.DATE,
    BuiltinProperty.COMPLETED_DATE: PropertyShape.DATE,
    BuiltinProperty.DATE_CREATED: PropertyShape.DATE,
    BuiltinProperty.DATE_MODIFIED: PropertyShape.DATE,
    BuiltinProperty.ARCHIVED: PropertyShape.BOOLEAN,
    BuiltinProperty.TIME_ESTIMATE: PropertyShape.NUMBER,
    BuiltinProperty.RECURRENCE: PropertyShape.RECURRENCE,
    BuiltinProperty.STATUS_IS_COMPLETED: PropertyShape.COMPLETION,
    BuiltinProperty.DEPENDENCIES_IS_BLOCKED: PropertyShape.BOOLEAN,
    BuiltinProperty.DEPENDENCIES_IS_BLOCKING: PropertyShape.BOOLEAN,
}

VALUELESS_OPERATORS = frozenset(_EMPTINESS + _CHECKED)


def parse_property(raw: str | PropertyId) -> PropertyId:
    if isinstance(raw, (BuiltinProperty, DynamicProperty)):
        return raw
    if not isinstance(raw, str):
        raise ValueError(f"Property must be a string, got {type(raw).__name__}")
    if raw.startswith(USER_PROPERTY_PREFIX):
        field_id = raw[len(USER_PROPERTY_PREFIX):]
        if not field_id:
            raise ValueError("User property is missing a field id")
        return DynamicProperty(field_id)
    try:
        return BuiltinProperty(raw)
    except ValueError:
        raise ValueError(f"Unknown property: {raw}") from None


def property_shape(prop: PropertyId) -> PropertyShape:
    if isinstance(prop, DynamicProperty):
        return PropertyShape.DYNAMIC
    return PROPERTY_SHAPES[prop]


def valid_operators(prop: PropertyId) -> tuple[FilterOperator, ...]:
    return SHAPE_OPERATORS[property_shape(prop)]


def is_date_property(prop: str | PropertyId | None) -> bool:
    if prop is None:
        return False
    try:
        parsed = parse_property(prop)
    except ValueError:
        return False
    return isinstance(parsed, BuiltinProperty) and PROPERTY_SHAPES[parsed] is PropertyShape.DATE


def operator_requires_value(operator: FilterOperator | str) -> bool:
    return operator not in VALUELESS_OPERATORS
