from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any

from taskfilter.domain.entities import TaskRecord, UserField
from taskfilter.domain.enums import BuiltinProperty, EvaluationErrorKind, UserFieldType
from taskfilter.domain.errors import FilterEvaluationError
from taskfilter.domain.filters import TaskPropertyValue
from taskfilter.domain.properties import DynamicProperty, PropertyId, parse_property

logger = logging.getLogger(__name__)

StatusResolver = Callable[[TaskRecord], bool]

_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")

_BUILTIN_GETTERS: dict[BuiltinProperty, Callable[[TaskRecord], TaskPropertyValue]] = {
    BuiltinProperty.TITLE: lambda task: task.title,
    BuiltinProperty.PATH: lambda task: task.path,
    BuiltinProperty.STATUS: lambda task: task.status,
    BuiltinProperty.PRIORITY: lambda task: task.priority,
    BuiltinProperty.TAGS: lambda task: tuple(task.tags or ()),
    BuiltinProperty.CONTEXTS: lambda task: tuple(task.contexts or ()),
    BuiltinProperty.PROJECTS: lambda task: tuple(task.projects or ()),
    BuiltinProperty.BLOCKED_BY: lambda task: tuple(dep.uid for dep in task.blocked_by or ()),
    BuiltinProperty.BLOCKING: lambda task: tuple(task.blocking or ()),
    BuiltinProperty.DUE: lambda task: task.due,
    BuiltinProperty.SCHEDULED: lambda task: task.scheduled,
    BuiltinProperty.COMPLETED_DATE: lambda task: task.completed_date,
    BuiltinProperty.DATE_CREATED: lambda task: task.date_created,
    BuiltinProperty.DATE_MODIFIED: lambda task: task.date_modified,
    BuiltinProperty.ARCHIVED: lambda task: task.archived,
    BuiltinProperty.TIME_ESTIMATE: lambda task: task.time_estimate,
    BuiltinProperty.RECURRENCE: lambda task: task.recurrence,
    BuiltinProperty.DEPENDENCIES_IS_BLOCKED: lambda task: task.is_blocked is True,
    BuiltinProperty.DEPENDENCIES_IS_BLOCKING: lambda task: task.is_blocking is True,
}


class PropertyExtractor:
    """Reads filterable values off task records.

    ``status.isCompleted`` depends on status configuration. Pass a
    ``status_resolver`` (usually ``StatusManager.is_task_completed``) to
    resolve it here; without one the value is ``None`` and callers must
    resolve it before evaluation.
    """

    def __init__(
        self,
        status_resolver: StatusResolver | None = None,
        user_fields: Iterable[UserField] = (),
    ) -> None:
        self._status_resolver = status_resolver
        self._user_fields = tuple(user_fields)

    def get_value(
        self,
        task: TaskRecord,
        prop: str | PropertyId,
        node_id: str | None = None,
    ) -> TaskPropertyValue:
        try:
            parsed = parse_property(prop)
        except ValueError:
            parsed = None

        if isinstance(parsed, DynamicProperty):
            return self._user_field_value(task, parsed.field_id)
        if parsed is BuiltinProperty.STATUS_IS_COMPLETED:
            if self._status_resolver is None:
                return None
            return bool(self._status_resolver(task))
        if parsed in _BUILTIN_GETTERS:
            return _BUILTIN_GETTERS[parsed](task)

        raise FilterEvaluationError(
            f"Unknown property: {prop}",
            kind=EvaluationErrorKind.UNKNOWN_PROPERTY,
            node_id=node_id,
            property=str(prop),
        )

    def find_user_field(self, field_id: str) -> UserField | None:
        for field in self._user_fields:
            if field.id == field_id or field.key == field_id:
                return field
        return None

    def _user_field_value(self, task: TaskRecord, field_id: str) -> TaskPropertyValue:
        properties = task.custom_properties or {}
        field = self.find_user_field(field_id)
        if field is None:
            logger.debug("No user field definition for %s, reading raw property", field_id)
            return _coerce_untyped(properties.get(field_id))
        return coerce_user_value(properties.get(field.key), field.type)


def coerce_user_value(raw: Any, field_type: UserFieldType) -> TaskPropertyValue:
    if raw is None:
        return None
    if field_type is UserFieldType.NUMBER:
        if isinstance(raw, bool):
            return None
        if isinstance(raw, (int, float)):
            return float(raw)
        if isinstance(raw, str) and _NUMERIC.match(raw):
            return float(raw)
        return None
    if field_type is UserFieldType.BOOLEAN:
        return raw is True or (isinstance(raw, str) and raw.strip().lower() == "true")
    if field_type is UserFieldType.LIST:
        if isinstance(raw, (list, tuple)):
            return tuple(str(item) for item in raw if item is not None)
        return tuple(part.strip() for part in str(raw).split(",") if part.strip())
    return raw if isinstance(raw, str) else str(raw)


def _coerce_untyped(raw: Any) -> TaskPropertyValue:
    if isinstance(raw, (list, tuple)):
        return tuple(str(item) for item in raw if item is not None)
    if raw is None or isinstance(raw, (str, bool, int, float)):
        return raw
    return str(raw)
