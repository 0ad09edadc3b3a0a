"""
Key-value store backed by a DynamoDB table.

The table uses ``pk`` as its partition key and ``expires_at`` (epoch seconds)
as its TTL attribute.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

import boto3

from cloudassistant.core.config import StoreSettings


class DynamoDBStore:
    """Get, put and delete string values keyed by ``pk``."""

    def __init__(
        self,
        settings: StoreSettings,
        table: Any | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings
        self._clock = clock
        if table is None:
            if not settings.dynamodb_table_name:
                raise ValueError("DYNAMODB_TABLE_NAME must be set for the dynamodb store backend.")
            resource = boto3.resource("dynamodb", region_name=settings.region_name)
            table = resource.Table(settings.dynamodb_table_name)
        self._table = table

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """Put an item in the DynamoDB table."""
        item: Dict[str, Any] = {"pk": key, "value": value}
        if ttl_seconds:
            item["expires_at"] = int(self._clock()) + int(ttl_seconds)
        self._table.put_item(Item=item)

    def get(self, key: str) -> Optional[str]:
        """Retrieve a value, ignoring items whose TTL has passed."""
        response = self._table.get_item(Key={"pk": key}, ConsistentRead=True)
        item = response.get("Item")
        if not item:
            return None
        # TTL deletion in DynamoDB is lazy; expired items can linger for hours.
        expires_at = item.get("expires_at")
        if expires_at is not None and int(expires_at) <= int(self._clock()):
            return None
        return item.get("value")

    def delete(self, key: str) -> None:
        self._table.delete_item(Key={"pk": key})

    def pop(self, key: str) -> Optional[str]:
        """Delete an item and return the value it held, if still live."""
        response = self._table.delete_item(Key={"pk": key}, ReturnValues="ALL_OLD")
        item = response.get("Attributes")
        if not item:
            return None
        expires_at = item.get("expires_at")
        if expires_at is not None and int(expires_at) <= int(self._clock()):
            return None
        return item.get("value")


__all__ = ["DynamoDBStore"]
