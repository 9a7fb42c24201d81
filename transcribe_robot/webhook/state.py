"""
Subscription state store: durable cursor and identity per subscription
"""

import json
from datetime import datetime
from typing import Any, Optional

from ..core.exceptions import StorageError
from ..core.interfaces import StorageProvider
from ..core.logging import get_logger
from ..core.models import SubscriptionRecord

logger = get_logger(__name__)


class SubscriptionStore:
    """
    Persists one SubscriptionRecord per subscription id.

    Writes are last-writer-wins overwrites of a single key. Reads always go
    to the backing storage so that another instance's writes are seen.
    """

    def __init__(self, storage_provider: StorageProvider, prefix: str = "subscriptions/"):
        """
        Initialize subscription store

        Args:
            storage_provider: Storage provider for persisting records
            prefix: Key prefix under which records are stored
        """
        self.storage = storage_provider
        self.prefix = prefix if prefix.endswith("/") else prefix + "/"

        logger.info(f"Initialized SubscriptionStore with storage: {type(storage_provider).__name__}")

    def _key(self, subscription_id: str) -> str:
        if not subscription_id or "/" in subscription_id or subscription_id in (".", ".."):
            raise ValueError(f"Invalid subscription id: {subscription_id!r}")
        return f"{self.prefix}{subscription_id}.json"

    async def load(self, subscription_id: str) -> Optional[SubscriptionRecord]:
        """
        Load the record for a subscription

        Args:
            subscription_id: Subscription to load

        Returns:
            SubscriptionRecord or None if the subscription is unknown
        """
        try:
            key = self._key(subscription_id)
        except ValueError:
            logger.warning(f"Rejected malformed subscription id: {subscription_id!r}")
            return None

        raw = await self.storage.read(key)
        if raw is None:
            logger.debug(f"No record found for subscription {subscription_id}")
            return None

        return self._decode(raw, key)

    async def save(self, record: SubscriptionRecord) -> SubscriptionRecord:
        """
        Save a record, replacing any previous value for its subscription id

        Args:
            record: Record to persist

        Returns:
            The saved record with its updated_at stamp
        """
        record.updated_at = datetime.now().isoformat()
        key = self._key(record.subscription_id)
        data = json.dumps(record.to_dict(), indent=2).encode("utf-8")

        try:
            await self.storage.write(key, data)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save subscription {record.subscription_id}: {str(e)}")

        cursor_preview = (record.cursor or "<latest>")[:40]
        logger.debug(f"Saved subscription {record.subscription_id} at cursor {cursor_preview}...")
        return record

    async def delete(self, subscription_id: str) -> bool:
        """
        Delete the record for a subscription

        Returns:
            True if a record was deleted
        """
        deleted = await self.storage.delete(self._key(subscription_id))
        if deleted:
            logger.info(f"Deleted subscription record {subscription_id}")
        return deleted

    async def list_records(self) -> list[SubscriptionRecord]:
        """
        List all stored subscription records

        Returns:
            Records ordered by key
        """
        records = []
        for key in await self.storage.list_keys(self.prefix):
            if not key.endswith(".json"):
                continue
            raw = await self.storage.read(key)
            if raw is None:
                continue
            record = self._decode(raw, key)
            if record:
                records.append(record)
        return records

    async def find_by_owner(self, owner_identity: str) -> Optional[SubscriptionRecord]:
        """
        Find the subscription belonging to an owner

        Args:
            owner_identity: Principal whose subscription to find

        Returns:
            SubscriptionRecord or None if the owner has no subscription
        """
        for record in await self.list_records():
            if record.owner_identity == owner_identity:
                return record
        return None

    async def get_store_info(self) -> dict[str, Any]:
        """
        Get information about subscription storage

        Returns:
            Dictionary with store information
        """
        keys = await self.storage.list_keys(self.prefix)
        return {
            "subscription_count": sum(1 for k in keys if k.endswith(".json")),
            "storage_provider": type(self.storage).__name__,
            "prefix": self.prefix,
        }

    def _decode(self, raw: bytes, key: str) -> Optional[SubscriptionRecord]:
        try:
            return SubscriptionRecord.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Invalid subscription record at {key}: {e}")
            return None
