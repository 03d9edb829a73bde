from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from .enums import NodeType
from .errors import FilterValidationError

TaskPropertyValue = Union[str, tuple[str, ...], list[str], int, float, bool, None]


@dataclass(frozen=True)
class FilterCondition:
    id: str
    property: str = ""
    operator: str = "is"
    value: TaskPropertyValue = None

    type: ClassVar[NodeType] = NodeType.CONDITION


@dataclass(frozen=True)
class FilterGroup:
    id: str
    conjunction: str = "and"
    children: tuple[FilterNode, ...] = ()

    type: ClassVar[NodeType] = NodeType.GROUP


FilterNode = Union[FilterGroup, FilterCondition]


def node_to_dict(node: FilterNode) -> dict[str, Any]:
    if isinstance(node, FilterCondition):
        return {
            "id": node.id,
            "type": NodeType.CONDITION.value,
            "property": str(node.property),
            "operator": str(node.operator),
            "value": _value_to_json(node.value),
        }
    return {
        "id": node.id,
        "type": NodeType.GROUP.value,
        "conjunction": str(node.conjunction),
        "children": [node_to_dict(child) for child in node.children],
    }


def node_from_dict(data: Mapping[str, Any]) -> FilterNode:
    if not isinstance(data, Mapping):
        raise FilterValidationError("Filter node must be an object")

    node_id = data.get("id")
    node_type = data.get("type")
    if node_type == NodeType.CONDITION:
        return FilterCondition(
            id=node_id,
            property=data.get("property", ""),
            operator=data.get("operator", ""),
            value=_value_from_json(data.get("value")),
        )
    if node_type == NodeType.GROUP:
        children = data.get("children")
        if not isinstance(children, list):
            raise FilterValidationError(
                "Group must have a children array", "children", _id_or_none(node_id)
            )
        return FilterGroup(
            id=node_id,
            conjunction=data.get("conjunction", ""),
            children=tuple(node_from_dict(child) for child in children),
        )
    raise FilterValidationError(
        f"Unknown filter node type: {node_type}", "type", _id_or_none(node_id)
    )


def serialize_query(node: FilterNode) -> str:
    return json.dumps(node_to_dict(node), sort_keys=True, separators=(",", ":"))


def deserialize_query(raw: str | bytes) -> FilterNode:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise FilterValidationError(f"Filter query is not valid JSON: {exc.msg}") from exc
    return node_from_dict(data)


def _value_to_json(value: TaskPropertyValue) -> Any:
    if isinstance(value, (list, tuple)):
        return list(value)
    return value


def _value_from_json(value: Any) -> TaskPropertyValue:
    if isinstance(value, list):
        return tuple(value)
    return value


def _id_or_none(node_id: Any) -> str | None:
    return node_id if isinstance(node_id, str) else None
