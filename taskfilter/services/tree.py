from __future__ import annotations

import itertools
import threading
import time
from dataclasses import replace

from taskfilter.domain.enums import Conjunction, FilterOperator
from taskfilter.domain.errors import FilterValidationError
from taskfilter.domain.filters import (
    FilterCondition,
    FilterGroup,
    FilterNode,
    TaskPropertyValue,
    node_from_dict,
    node_to_dict,
)
from taskfilter.services.validation import is_complete

__all__ = [
    "add_child",
    "deep_clone",
    "find_node",
    "generate_id",
    "is_complete",
    "new_condition",
    "new_group",
    "regenerate_ids",
    "remove_node",
    "replace_node",
]

_id_counter = itertools.count(1)
_id_lock = threading.Lock()


def generate_id() -> str:
    with _id_lock:
        sequence = next(_id_counter)
    return f"filter_{int(time.time() * 1000)}_{sequence}"


def deep_clone(node: FilterNode) -> FilterNode:
    """Copy a tree with no shared substructure, as required before saving it."""
    return node_from_dict(node_to_dict(node))


def new_condition(
    property: str = "",
    operator: FilterOperator | str = FilterOperator.IS,
    value: TaskPropertyValue = None,
) -> FilterCondition:
    return FilterCondition(id=generate_id(), property=property, operator=str(operator), value=value)


def new_group(
    conjunction: Conjunction | str = Conjunction.AND,
    children: tuple[FilterNode, ...] = (),
) -> FilterGroup:
    return FilterGroup(id=generate_id(), conjunction=str(conjunction), children=tuple(children))


def find_node(root: FilterNode, node_id: str) -> FilterNode | None:
    if root.id == node_id:
        return root
    if isinstance(root, FilterGroup):
        for child in root.children:
            found = find_node(child, node_id)
            if found is not None:
                return found
    return None


def replace_node(root: FilterNode, node_id: str, new_node: FilterNode) -> FilterNode:
    if root.id == node_id:
        return new_node
    if isinstance(root, FilterCondition):
        return root
    children = tuple(replace_node(child, node_id, new_node) for child in root.children)
    if all(new is old for new, old in zip(children, root.children)):
        return root
    return replace(root, children=children)


def remove_node(root: FilterGroup, node_id: str) -> FilterGroup:
    if root.id == node_id:
        raise FilterValidationError("The root group cannot be removed", "id", node_id)
    return _without(root, node_id)


def _without(group: FilterGroup, node_id: str) -> FilterGroup:
    children = tuple(
        _without(child, node_id) if isinstance(child, FilterGroup) else child
        for child in group.children
        if child.id != node_id
    )
    if len(children) == len(group.children) and all(
        new is old for new, old in zip(children, group.children)
    ):
        return group
    return replace(group, children=children)


def add_child(root: FilterNode, group_id: str, child: FilterNode) -> FilterNode:
    target = find_node(root, group_id)
    if not isinstance(target, FilterGroup):
        raise FilterValidationError(f"No group with id {group_id}", "children", group_id)
    return replace_node(root, group_id, replace(target, children=target.children + (child,)))


def regenerate_ids(node: FilterNode) -> FilterNode:
    if isinstance(node, FilterCondition):
        return replace(node, id=generate_id())
    return replace(
        node,
        id=generate_id(),
        children=tuple(regenerate_ids(child) for child in node.children),
    )
