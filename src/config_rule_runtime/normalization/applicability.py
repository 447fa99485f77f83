"""Decide whether a resolved snapshot should be evaluated."""

from __future__ import annotations

from typing import Optional

from ..models import ItemStatus, ResourceSnapshot

APPLICABLE_STATUSES = frozenset({ItemStatus.OK.value, ItemStatus.RESOURCE_DISCOVERED.value})


def is_applicable(snapshot: ResourceSnapshot, event_left_scope: Optional[bool]) -> bool:
    """Return ``True`` for live resources that are still in the rule's scope.

    Deleted or undiscovered resources are not evaluated, and neither is a
    resource whose ``eventLeftScope`` flag is anything other than ``False``.
    """

    return snapshot.status_value in APPLICABLE_STATUSES and event_left_scope is False


__all__ = ["APPLICABLE_STATUSES", "is_applicable"]
