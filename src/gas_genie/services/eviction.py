"""Oldest-first eviction of job photos to keep the bucket under budget."""

import logging
from dataclasses import dataclass

from gas_genie.domain.storage import (
    ESTIMATED_OBJECT_BYTES,
    STORAGE_LIMIT_BYTES,
    TARGET_RATIO,
    EvictionResult,
)
from gas_genie.services.photos import PhotoRepository
from gas_genie.services.quota import ObjectStore

logger = logging.getLogger(__name__)


@dataclass
class EvictionPolicy:
    """Deletes the oldest photos until estimated usage reaches the target.

    Each photo is removed from the object store first and from the catalog
    second. A photo whose payload cannot be deleted is skipped and keeps its
    catalog record. Usage is tracked locally and never re-queried mid-run.
    """

    photo_repository: PhotoRepository
    object_store: ObjectStore
    limit_bytes: int = STORAGE_LIMIT_BYTES
    object_bytes: int = ESTIMATED_OBJECT_BYTES

    @property
    def target_bytes(self) -> float:
        """Usage level eviction stops at."""
        return TARGET_RATIO * self.limit_bytes

    def run_eviction(self, current_usage_bytes: float) -> EvictionResult:
        """Evict oldest photos until usage is at or below the target."""
        target_bytes = self.target_bytes
        if current_usage_bytes <= target_bytes:
            return EvictionResult(
                deleted_count=0, remaining_usage_bytes=current_usage_bytes
            )

        records = sorted(
            self.photo_repository.list_oldest_first(),
            key=lambda record: record.uploaded_at,
        )
        usage_bytes = current_usage_bytes
        deleted_count = 0
        skipped_count = 0
        for record in records:
            if usage_bytes <= target_bytes:
                break
            try:
                self.object_store.delete(record.storage_key)
            except Exception:
                logger.warning(
                    "Skipping eviction of %s: object delete failed",
                    record.storage_key,
                    exc_info=True,
                )
                skipped_count += 1
                continue
            usage_bytes -= self.object_bytes
            try:
                self.photo_repository.delete_photo(record.id)
            except Exception:
                logger.exception(
                    "Evicted object %s but failed to delete photo record %s",
                    record.storage_key,
                    record.id,
                )
                skipped_count += 1
                continue
            deleted_count += 1

        logger.info(
            "Evicted %s photos (%s skipped); estimated usage now %s bytes",
            deleted_count,
            skipped_count,
            int(usage_bytes),
        )
        return EvictionResult(
            deleted_count=deleted_count,
            remaining_usage_bytes=usage_bytes,
            skipped_count=skipped_count,
        )
