"""Invocation payload models.

The three notification shapes delivered to a custom rule are modelled as a
tagged union so that a single resolver can dispatch on them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union


class MessageType(str, Enum):
    """``messageType`` values found in the invoking event."""

    CONFIGURATION_ITEM_CHANGE = "ConfigurationItemChangeNotification"
    OVERSIZED_CONFIGURATION_ITEM_CHANGE = "OversizedConfigurationItemChangeNotification"
    SCHEDULED = "ScheduledNotification"


@dataclass(slots=True)
class ConfigurationItemSummary:
    """Identifying fields sent in place of a snapshot that was too large to embed."""

    resource_type: str
    resource_id: str
    capture_time: datetime


@dataclass(slots=True)
class ChangeNotification:
    """Notification carrying the configuration item inline."""

    configuration_item: Optional[Mapping[str, Any]]
    message_type: str = MessageType.CONFIGURATION_ITEM_CHANGE.value


@dataclass(slots=True)
class OversizedChangeNotification:
    """Notification whose configuration item must be fetched from history."""

    summary: ConfigurationItemSummary
    message_type: str = MessageType.OVERSIZED_CONFIGURATION_ITEM_CHANGE.value


@dataclass(slots=True)
class ScheduledNotification:
    """Periodic trigger with no resource attached."""

    message_type: str = MessageType.SCHEDULED.value


Notification = Union[ChangeNotification, OversizedChangeNotification, ScheduledNotification]


@dataclass(slots=True)
class RuleInvocation:
    """Parsed rule invocation payload."""

    notification: Notification
    result_token: str
    rule_parameters: Dict[str, Any] = field(default_factory=dict)
    event_left_scope: Optional[bool] = None
