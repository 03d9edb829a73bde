from __future__ import annotations

from enum import StrEnum


class FilterOperator(StrEnum):
    IS = "is"
    IS_NOT = "is-not"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does-not-contain"
    IS_BEFORE = "is-before"
    IS_AFTER = "is-after"
    IS_ON_OR_BEFORE = "is-on-or-before"
    IS_ON_OR_AFTER = "is-on-or-after"
    IS_EMPTY = "is-empty"
    IS_NOT_EMPTY = "is-not-empty"
    IS_CHECKED = "is-checked"
    IS_NOT_CHECKED = "is-not-checked"
    IS_GREATER_THAN = "is-greater-than"
    IS_LESS_THAN = "is-less-than"
    IS_GREATER_THAN_OR_EQUAL = "is-greater-than-or-equal"
    IS_LESS_THAN_OR_EQUAL = "is-less-than-or-equal"


class Conjunction(StrEnum):
    AND = "and"
    OR = "or"


class NodeType(StrEnum):
    CONDITION = "condition"
    GROUP = "group"


class BuiltinProperty(StrEnum):
    PLACEHOLDER = ""
    TITLE = "title"
    PATH = "path"
    STATUS = "status"
    PRIORITY = "priority"
    TAGS = "tags"
    CONTEXTS = "contexts"
    PROJECTS = "projects"
    BLOCKED_BY = "blockedBy"
    BLOCKING = "blocking"
    DUE = "due"
    SCHEDULED = "scheduled"
    COMPLETED_DATE = "completedDate"
    DATE_CREATED = "dateCreated"
    DATE_MODIFIED = "dateModified"
    ARCHIVED = "archived"
    TIME_ESTIMATE = "timeEstimate"
    RECURRENCE = "recurrence"
    STATUS_IS_COMPLETED = "status.isCompleted"
    DEPENDENCIES_IS_BLOCKED = "dependencies.isBlocked"
    DEPENDENCIES_IS_BLOCKING = "dependencies.isBlocking"


class PropertyShape(StrEnum):
    PLACEHOLDER = "placeholder"
    TEXT = "text"
    PATH = "path"
    SELECT = "select"
    LIST = "list"
    DATE = "date"
    BOOLEAN = "boolean"
    NUMBER = "number"
    RECURRENCE = "recurrence"
    COMPLETION = "completion"
    DYNAMIC = "dynamic"


class UserFieldType(StrEnum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    LIST = "list"


class EvaluationErrorKind(StrEnum):
    UNKNOWN_PROPERTY = "unknown_property"
    UNKNOWN_OPERATOR = "unknown_operator"
    OPERATOR_FAILED = "operator_failed"
