"""Canonical resource snapshot models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class ItemStatus(str, Enum):
    """Configuration item statuses reported by the configuration recorder."""

    OK = "OK"
    RESOURCE_DISCOVERED = "ResourceDiscovered"
    DELETED = "Deleted"
    RESOURCE_DELETED = "ResourceDeleted"
    RESOURCE_NOT_DISCOVERED = "ResourceNotDiscovered"


@dataclass(slots=True)
class Relationship:
    """A named edge from the snapshot's resource to a related resource."""

    name: str
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    resource_name: Optional[str] = None


@dataclass(slots=True)
class ResourceSnapshot:
    """State of a single resource at ``capture_time``.

    ``status`` is an :class:`ItemStatus` when the recorder reports a known
    status and the raw string otherwise.
    """

    resource_type: str
    resource_id: str
    status: ItemStatus | str
    capture_time: datetime
    configuration: Dict[str, Any] = field(default_factory=dict)
    relationships: List[Relationship] = field(default_factory=list)
    account_id: Optional[str] = None
    arn: Optional[str] = None
    region: Optional[str] = None
    availability_zone: Optional[str] = None
    resource_name: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)
    state_md5_hash: Optional[str] = None
    version: Optional[str] = None

    @property
    def status_value(self) -> str:
        """Return the status as the plain string reported by the recorder."""

        if isinstance(self.status, ItemStatus):
            return self.status.value
        return self.status
