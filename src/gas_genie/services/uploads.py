"""Upload admission for job photos."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

from gas_genie.domain.photos import PhotoRecord
from gas_genie.domain.storage import EvictionResult
from gas_genie.errors import PhotoCatalogError, PhotoUploadError
from gas_genie.services.eviction import EvictionPolicy
from gas_genie.services.images import detect_mime_type, file_extension
from gas_genie.services.leases import LeaseManager
from gas_genie.services.photos import PhotoRepository
from gas_genie.services.quota import ObjectStore, QuotaEstimator

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class UploadGate:
    """Stores new photos, evicting old ones first when the bucket is near full.

    The quota check, any eviction and the upload itself run under a lease
    named after the bucket. When the lease is busy past the timeout the
    upload proceeds without the quota check.
    """

    object_store: ObjectStore
    photo_repository: PhotoRepository
    estimator: QuotaEstimator
    eviction_policy: EvictionPolicy
    lease_manager: LeaseManager
    namespace: str
    lease_timeout_seconds: float = 2.0
    clock: Callable[[], datetime] = field(default=_utcnow)

    def upload(  # noqa: PLR0913
        self,
        user_id: str,
        file_bytes: bytes,
        content_type: str | None = None,
        filename: str | None = None,
        description: str | None = None,
        job_id: str | None = None,
    ) -> PhotoRecord:
        """Store a photo and create its catalog record."""
        resolved_type = content_type or detect_mime_type(file_bytes)
        with self.lease_manager.acquire(
            self.namespace, self.lease_timeout_seconds
        ) as acquired:
            if acquired:
                self.ensure_capacity()
            else:
                logger.warning(
                    "Storage lease %s busy; uploading without quota check",
                    self.namespace,
                )
            return self._store(
                user_id=user_id,
                file_bytes=file_bytes,
                content_type=resolved_type,
                filename=filename,
                description=description,
                job_id=job_id,
            )

    def ensure_capacity(self) -> EvictionResult | None:
        """Run eviction if estimated usage is at or above the high watermark."""
        snapshot = self.estimator.estimate_usage()
        if not snapshot.is_near_full:
            return None
        logger.info(
            "Storage at %.1f%% of limit; evicting oldest photos", snapshot.percentage
        )
        try:
            return self.eviction_policy.run_eviction(snapshot.used_bytes)
        except Exception:
            logger.exception("Eviction failed; continuing with upload")
            return None

    def build_storage_key(
        self, user_id: str, filename: str | None, content_type: str | None
    ) -> str:
        """Return a collision-resistant key namespaced by user."""
        timestamp_ms = int(self.clock().timestamp() * 1000)
        extension = file_extension(filename, content_type)
        return f"{user_id}/{timestamp_ms}-{uuid4().hex[:8]}.{extension}"

    def _store(  # noqa: PLR0913
        self,
        user_id: str,
        file_bytes: bytes,
        content_type: str,
        filename: str | None,
        description: str | None,
        job_id: str | None,
    ) -> PhotoRecord:
        storage_key = self.build_storage_key(user_id, filename, content_type)
        try:
            file_url = self.object_store.put(storage_key, file_bytes, content_type)
        except Exception as exc:
            logger.exception("Photo upload to %s failed", storage_key)
            raise PhotoUploadError(f"Upload failed: {exc}") from exc

        try:
            return self.photo_repository.create_photo(
                storage_key=storage_key,
                file_url=file_url,
                uploaded_by=user_id,
                description=(description or "").strip() or None,
                job_id=job_id or None,
            )
        except Exception as exc:
            logger.exception(
                "Stored photo %s has no catalog record (orphaned object)", storage_key
            )
            raise PhotoCatalogError("Photo was stored but could not be saved") from exc
