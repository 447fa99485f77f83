"""Configuration history lookups used to rebuild oversized snapshots."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import HistoryLookupError

logger = logging.getLogger(__name__)


class ConfigHistoryAPI(Protocol):
    """Subset of the boto3 ``config`` client used for history lookups."""

    def get_resource_config_history(self, **kwargs: Any) -> Mapping[str, Any]:
        ...


class ConfigHistory:
    """Fetch point-in-time configuration items from the history service."""

    def __init__(self, client: ConfigHistoryAPI) -> None:
        self._client = client

    def latest_item(
        self, resource_type: str, resource_id: str, later_time: datetime
    ) -> Mapping[str, Any]:
        """Return the most recent item captured at or before ``later_time``."""

        logger.info(
            "Fetching configuration item from history",
            extra={
                "action": "get_resource_config_history",
                "resource_type": resource_type,
                "resource_id": resource_id,
                "later_time": later_time.isoformat(),
            },
        )

        try:
            response = self._client.get_resource_config_history(
                resourceType=resource_type,
                resourceId=resource_id,
                laterTime=later_time,
                limit=1,
            )
        except (BotoCoreError, ClientError) as exc:
            raise HistoryLookupError(
                f"Configuration history lookup failed for {resource_type} {resource_id}: {exc}"
            ) from exc

        items = response.get("configurationItems") or []
        if not items:
            raise HistoryLookupError(
                f"No configuration history found for {resource_type} {resource_id} "
                f"at or before {later_time.isoformat()}"
            )

        return items[0]


__all__ = ["ConfigHistory", "ConfigHistoryAPI"]
