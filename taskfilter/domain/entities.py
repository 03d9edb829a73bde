from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .enums import UserFieldType
from .filters import FilterGroup


@dataclass(frozen=True)
class TaskDependency:
    uid: str
    reltype: str = "FINISHTOSTART"
    gap: str | None = None


@dataclass(frozen=True)
class TaskRecord:
    title: str = ""
    path: str = ""
    status: str = ""
    priority: str = ""
    tags: tuple[str, ...] = ()
    contexts: tuple[str, ...] = ()
    projects: tuple[str, ...] = ()
    blocked_by: tuple[TaskDependency, ...] = ()
    blocking: tuple[str, ...] = ()
    due: Optional[str] = None
    scheduled: Optional[str] = None
    completed_date: Optional[str] = None
    date_created: Optional[str] = None
    date_modified: Optional[str] = None
    archived: bool = False
    time_estimate: Optional[float] = None
    recurrence: Optional[str] = None
    is_blocked: Optional[bool] = None
    is_blocking: Optional[bool] = None
    complete_instances: tuple[str, ...] = ()
    custom_properties: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TaskRecord:
        """Build a record from the camelCase JSON shape used by task exports."""
        blocked_by = tuple(
            _dependency_from_raw(item) for item in data.get("blockedBy") or ()
        )
        return cls(
            title=data.get("title", ""),
            path=data.get("path", ""),
            status=data.get("status", ""),
            priority=data.get("priority", ""),
            tags=tuple(data.get("tags") or ()),
            contexts=tuple(data.get("contexts") or ()),
            projects=tuple(data.get("projects") or ()),
            blocked_by=blocked_by,
            blocking=tuple(data.get("blocking") or ()),
            due=data.get("due"),
            scheduled=data.get("scheduled"),
            completed_date=data.get("completedDate"),
            date_created=data.get("dateCreated"),
            date_modified=data.get("dateModified"),
            archived=data.get("archived", False),
            time_estimate=data.get("timeEstimate"),
            recurrence=data.get("recurrence"),
            is_blocked=data.get("isBlocked"),
            is_blocking=data.get("isBlocking"),
            complete_instances=tuple(data.get("complete_instances") or ()),
            custom_properties=dict(data.get("customProperties") or {}),
        )


def _dependency_from_raw(raw: Any) -> TaskDependency:
    if isinstance(raw, str):
        return TaskDependency(uid=raw)
    if not isinstance(raw, Mapping):
        raise ValueError(f"blockedBy entry must be a string or an object, got {type(raw).__name__}")
    uid = raw.get("uid")
    if not isinstance(uid, str) or not uid:
        raise ValueError("blockedBy entry needs a uid")
    return TaskDependency(
        uid=uid,
        reltype=raw.get("reltype", "FINISHTOSTART"),
        gap=raw.get("gap"),
    )


@dataclass(frozen=True)
class UserField:
    id: str
    key: str
    display_name: str = ""
    type: UserFieldType = UserFieldType.TEXT


@dataclass(frozen=True)
class StatusConfig:
    value: str
    label: str = ""
    is_completed: bool = False
    order: int = 0


@dataclass(frozen=True)
class SavedView:
    id: int | None
    name: str
    query: FilterGroup
    created_at: datetime
    updated_at: datetime
