"""Resolve notifications into canonical :class:`ResourceSnapshot` instances."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..adapters.config_history import ConfigHistory
from ..errors import HistoryLookupError, MalformedEventError, MissingFieldError
from ..models import (
    ChangeNotification,
    ItemStatus,
    Notification,
    OversizedChangeNotification,
    Relationship,
    ResourceSnapshot,
    ScheduledNotification,
)
from .invocation import parse_timestamp, require

logger = logging.getLogger(__name__)

NO_SNAPSHOT = None

# History API field name -> invocation field name
_HISTORY_FIELD_NAMES = {
    "accountId": "awsAccountId",
    "arn": "ARN",
    "configurationItemMD5Hash": "configurationStateMd5Hash",
    "version": "configurationItemVersion",
}


class SnapshotResolver:
    """Turn any notification variant into a fully populated snapshot."""

    def __init__(self, history: ConfigHistory | None = None) -> None:
        self._history = history

    def resolve(self, notification: Notification) -> Optional[ResourceSnapshot]:
        """Return the snapshot for ``notification`` or ``NO_SNAPSHOT``.

        Scheduled notifications carry no resource and resolve to
        ``NO_SNAPSHOT``; callers decide how to reject them.
        """

        if isinstance(notification, OversizedChangeNotification):
            return self._resolve_oversized(notification)

        if isinstance(notification, ScheduledNotification):
            return NO_SNAPSHOT

        if isinstance(notification, ChangeNotification):
            item = notification.configuration_item
            if item is None:
                raise MissingFieldError("configurationItem", context="invokingEvent")
            return build_snapshot(item)

        raise TypeError(f"Unsupported notification type: {type(notification).__name__}")

    # ------------------------------------------------------------------
    def _resolve_oversized(self, notification: OversizedChangeNotification) -> ResourceSnapshot:
        if self._history is None:
            raise HistoryLookupError("No configuration history client configured")

        summary = notification.summary
        api_item = self._history.latest_item(
            summary.resource_type, summary.resource_id, summary.capture_time
        )
        return build_snapshot(convert_history_item(api_item))


def convert_history_item(api_item: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename history API fields to the names used by inline notifications."""

    item: Dict[str, Any] = dict(api_item)
    for api_name, invocation_name in _HISTORY_FIELD_NAMES.items():
        if api_name in item:
            item[invocation_name] = item.pop(api_name)

    configuration = item.get("configuration")
    if isinstance(configuration, str):
        try:
            item["configuration"] = json.loads(configuration) if configuration else {}
        except json.JSONDecodeError as exc:
            raise HistoryLookupError("Configuration blob in history item is not valid JSON") from exc

    relationships = item.get("relationships")
    if relationships:
        converted = []
        for relationship in relationships:
            relationship = dict(relationship)
            if "relationshipName" in relationship:
                relationship["name"] = relationship.pop("relationshipName")
            converted.append(relationship)
        item["relationships"] = converted

    return item


def build_snapshot(item: Mapping[str, Any]) -> ResourceSnapshot:
    """Build a snapshot from an item using inline notification field names."""

    if not isinstance(item, Mapping):
        raise MalformedEventError("'configurationItem' must be an object")

    context = "configurationItem"
    status = require(item, "configurationItemStatus", context=context)
    capture_time = parse_timestamp(
        require(item, "configurationItemCaptureTime", context=context),
        field_name="configurationItemCaptureTime",
    )

    configuration = item.get("configuration") or {}
    if not isinstance(configuration, Mapping):
        raise MalformedEventError("'configuration' must be an object")

    return ResourceSnapshot(
        resource_type=require(item, "resourceType", context=context),
        resource_id=require(item, "resourceId", context=context),
        status=_normalize_status(status),
        capture_time=capture_time,
        configuration=dict(configuration),
        relationships=_relationships(item.get("relationships") or []),
        account_id=item.get("awsAccountId"),
        arn=item.get("ARN"),
        region=item.get("awsRegion"),
        availability_zone=item.get("availabilityZone"),
        resource_name=item.get("resourceName"),
        tags=dict(item.get("tags") or {}),
        state_md5_hash=item.get("configurationStateMd5Hash"),
        version=item.get("configurationItemVersion"),
    )


def _normalize_status(status: str) -> ItemStatus | str:
    try:
        return ItemStatus(status)
    except ValueError:
        logger.debug("Unrecognized configuration item status", extra={"status": status})
        return status


def _relationships(entries: Iterable[Mapping[str, Any]]) -> List[Relationship]:
    relationships: List[Relationship] = []
    for index, entry in enumerate(entries):
        relationships.append(
            Relationship(
                name=require(entry, "name", context=f"relationships[{index}]"),
                resource_type=entry.get("resourceType"),
                resource_id=entry.get("resourceId"),
                resource_name=entry.get("resourceName"),
            )
        )
    return relationships


__all__ = ["NO_SNAPSHOT", "SnapshotResolver", "build_snapshot", "convert_history_item"]
