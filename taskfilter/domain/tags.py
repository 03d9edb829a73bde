"""Hierarchical tag matching.

Tags use ``/`` separated segments, so ``area/work`` is an ancestor of
``area/work/project``. Condition lists may mix inclusion patterns with
exclusion patterns written as ``-pattern``.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence

EXCLUSION_PREFIX = "-"


def matches_hierarchical_tag(tag: str, pattern: str) -> bool:
    """Exact, ancestor or substring match, case-insensitive."""
    if not tag or not pattern:
        return False
    tag_lower = tag.lower()
    pattern_lower = pattern.lower()
    if matches_hierarchical_tag_exact(tag_lower, pattern_lower):
        return True
    return pattern_lower in tag_lower


def matches_hierarchical_tag_exact(tag: str, pattern: str) -> bool:
    """Exact or ancestor match only. ``pkm-task`` does not match ``task``."""
    if not tag or not pattern:
        return False
    tag_lower = tag.lower()
    pattern_lower = pattern.lower()
    return tag_lower == pattern_lower or tag_lower.startswith(pattern_lower + "/")


def split_tag_conditions(condition_tags: Iterable[str]) -> tuple[list[str], list[str]]:
    inclusions: list[str] = []
    exclusions: list[str] = []
    for condition in condition_tags:
        if not isinstance(condition, str):
            continue
        if condition.startswith(EXCLUSION_PREFIX):
            pattern = condition[len(EXCLUSION_PREFIX):]
            if pattern:
                exclusions.append(pattern)
        else:
            inclusions.append(condition)
    return inclusions, exclusions


def matches_tag_conditions(task_tags: Sequence[str], condition_tags: Sequence[str]) -> bool:
    if not condition_tags:
        return True

    inclusions, exclusions = split_tag_conditions(condition_tags)

    # exclusions are checked before inclusions and always win
    for pattern in exclusions:
        if any(matches_hierarchical_tag(tag, pattern) for tag in task_tags):
            return False

    if inclusions:
        return any(
            matches_hierarchical_tag(tag, pattern)
            for pattern in inclusions
            for tag in task_tags
        )

    return True


def is_task_by_tag(task_tags: Iterable[str], identifying_tag: str) -> bool:
    return any(matches_hierarchical_tag_exact(tag, identifying_tag) for tag in task_tags)
