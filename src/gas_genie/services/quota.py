"""Storage usage estimation for the photo bucket."""

import logging
from dataclasses import dataclass
from typing import Protocol

from gas_genie.domain.storage import (
    ESTIMATED_OBJECT_BYTES,
    STORAGE_LIMIT_BYTES,
    StorageUsageSnapshot,
    StoredObject,
)

logger = logging.getLogger(__name__)


class ObjectStore(Protocol):
    """Interface for the object store holding photo payloads."""

    def list_objects(self, prefix: str) -> list[StoredObject]:
        """Return the entries directly under a prefix."""

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store an object and return its public URL."""

    def delete(self, key: str) -> None:
        """Delete an object; deleting a missing key is not an error."""

    def get_public_url(self, key: str) -> str:
        """Return the public URL for a key."""


@dataclass
class QuotaEstimator:
    """Estimates bucket usage from an object count.

    Objects are namespaced by owning user, so the listing recurses exactly
    one level into each top-level folder. Sizes are not read per object;
    each object counts as a fixed estimate.
    """

    object_store: ObjectStore
    limit_bytes: int = STORAGE_LIMIT_BYTES
    object_bytes: int = ESTIMATED_OBJECT_BYTES

    def estimate_usage(self) -> StorageUsageSnapshot:
        """Return the current usage snapshot, zeroed if listing fails."""
        try:
            object_count = self._count_objects()
        except Exception:
            logger.exception("Failed to list stored photos; reporting zero usage")
            return StorageUsageSnapshot.empty(self.limit_bytes)
        return StorageUsageSnapshot.from_object_count(
            object_count,
            limit_bytes=self.limit_bytes,
            object_bytes=self.object_bytes,
        )

    def _count_objects(self) -> int:
        count = 0
        for entry in self.object_store.list_objects(""):
            if not entry.is_folder:
                count += 1
                continue
            children = self.object_store.list_objects(entry.key)
            count += sum(1 for child in children if not child.is_folder)
        return count
