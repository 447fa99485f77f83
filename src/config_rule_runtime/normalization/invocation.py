"""Parse raw rule invocation payloads into :class:`RuleInvocation` models."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from ..errors import MalformedEventError, MissingFieldError
from ..models import (
    ChangeNotification,
    ConfigurationItemSummary,
    MessageType,
    Notification,
    OversizedChangeNotification,
    RuleInvocation,
    ScheduledNotification,
)

logger = logging.getLogger(__name__)


def require(source: Mapping[str, Any], field_name: str, *, context: str | None = None) -> Any:
    """Return ``source[field_name]`` or raise :class:`MissingFieldError`."""

    value = source.get(field_name)
    if value is None or value == "":
        raise MissingFieldError(field_name, context=context)
    return value


def parse_timestamp(value: Any, *, field_name: str) -> datetime:
    """Return an aware datetime for an ISO 8601 string or datetime value."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise MalformedEventError(f"Invalid timestamp in '{field_name}': {value!r}") from exc
    else:
        raise MalformedEventError(f"Invalid timestamp in '{field_name}': {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _decode_section(event: Mapping[str, Any], field_name: str) -> Any:
    raw = event.get(field_name)
    if not isinstance(raw, str):
        return raw

    try:
        return json.loads(raw) if raw.strip() else None
    except json.JSONDecodeError as exc:
        raise MalformedEventError(f"Invalid JSON in '{field_name}'") from exc


def parse_notification(invoking_event: Mapping[str, Any]) -> Notification:
    """Dispatch the invoking event onto one of the notification variants."""

    message_type = require(invoking_event, "messageType", context="invokingEvent")

    if message_type == MessageType.OVERSIZED_CONFIGURATION_ITEM_CHANGE.value:
        summary = require(invoking_event, "configurationItemSummary", context="invokingEvent")
        if not isinstance(summary, Mapping):
            raise MalformedEventError("'configurationItemSummary' must be an object")
        return OversizedChangeNotification(
            summary=ConfigurationItemSummary(
                resource_type=require(summary, "resourceType", context="configurationItemSummary"),
                resource_id=require(summary, "resourceId", context="configurationItemSummary"),
                capture_time=parse_timestamp(
                    require(
                        summary, "configurationItemCaptureTime", context="configurationItemSummary"
                    ),
                    field_name="configurationItemCaptureTime",
                ),
            )
        )

    if message_type == MessageType.SCHEDULED.value:
        return ScheduledNotification()

    return ChangeNotification(
        configuration_item=invoking_event.get("configurationItem"),
        message_type=str(message_type),
    )


def parse_invocation(event: Mapping[str, Any]) -> RuleInvocation:
    """Return the parsed invocation for a raw Lambda ``event``."""

    if not isinstance(event, Mapping):
        raise MalformedEventError("Invocation payload must be an object")

    invoking_event = _decode_section(event, "invokingEvent")
    if invoking_event is None:
        raise MissingFieldError("invokingEvent", context="event")
    if not isinstance(invoking_event, Mapping):
        raise MalformedEventError("'invokingEvent' must decode to an object")

    rule_parameters = _decode_section(event, "ruleParameters") or {}
    if not isinstance(rule_parameters, Mapping):
        raise MalformedEventError("'ruleParameters' must decode to an object")

    result_token = require(event, "resultToken", context="event")

    event_left_scope = event.get("eventLeftScope")
    if event_left_scope is None:
        event_left_scope = invoking_event.get("eventLeftScope")

    notification = parse_notification(invoking_event)
    logger.debug(
        "Parsed rule invocation",
        extra={
            "action": "parse_invocation",
            "message_type": notification.message_type,
            "event_left_scope": event_left_scope,
        },
    )

    params: Dict[str, Any] = dict(rule_parameters)
    return RuleInvocation(
        notification=notification,
        result_token=str(result_token),
        rule_parameters=params,
        event_left_scope=event_left_scope if isinstance(event_left_scope, bool) else None,
    )


__all__ = ["parse_invocation", "parse_notification", "parse_timestamp", "require"]
