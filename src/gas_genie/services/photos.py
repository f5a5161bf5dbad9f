"""Job photo catalog and library operations."""

import logging
from dataclasses import dataclass
from typing import Protocol

from gas_genie.domain.photos import PhotoRecord
from gas_genie.domain.storage import StorageUsageSnapshot
from gas_genie.errors import PhotoDeleteError, PhotoNotFoundError
from gas_genie.services.quota import ObjectStore, QuotaEstimator

logger = logging.getLogger(__name__)


class PhotoRepository(Protocol):
    """Persistence interface for the photo catalog."""

    def create_photo(  # noqa: PLR0913
        self,
        storage_key: str,
        file_url: str,
        uploaded_by: str,
        description: str | None,
        job_id: str | None,
    ) -> PhotoRecord:
        """Create a catalog record and return it."""

    def get_photo(self, photo_id: str) -> PhotoRecord | None:
        """Return a photo by id, if present."""

    def list_for_user(self, user_id: str) -> list[PhotoRecord]:
        """Return a user's photos, newest first."""

    def list_oldest_first(self) -> list[PhotoRecord]:
        """Return every photo ordered by upload time, oldest first."""

    def update_description(self, photo_id: str, description: str | None) -> None:
        """Update the free-text description of a photo."""

    def delete_photo(self, photo_id: str) -> None:
        """Delete a catalog record."""


@dataclass
class PhotoService:
    """User-facing operations over stored job photos."""

    photo_repository: PhotoRepository
    object_store: ObjectStore
    estimator: QuotaEstimator

    def list_photos(self, user_id: str) -> list[PhotoRecord]:
        """Return the user's photos, newest first."""
        return self.photo_repository.list_for_user(user_id)

    def update_description(
        self, user_id: str, photo_id: str, description: str | None
    ) -> PhotoRecord:
        """Change a photo description; blank descriptions are cleared."""
        photo = self._get_owned(user_id, photo_id)
        cleaned = description.strip() if description else None
        self.photo_repository.update_description(photo.id, cleaned or None)
        updated = self.photo_repository.get_photo(photo.id)
        if updated is None:
            raise PhotoNotFoundError("Photo not found")
        return updated

    def delete_photo(self, user_id: str, photo_id: str) -> None:
        """Delete a photo payload and then its catalog record."""
        photo = self._get_owned(user_id, photo_id)
        try:
            self.object_store.delete(photo.storage_key)
        except Exception as exc:
            logger.exception("Failed to delete stored photo %s", photo.storage_key)
            raise PhotoDeleteError("Could not delete photo. Please try again.") from exc
        try:
            self.photo_repository.delete_photo(photo.id)
        except Exception as exc:
            logger.exception(
                "Deleted stored photo %s but failed to delete photo record %s",
                photo.storage_key,
                photo.id,
            )
            raise PhotoDeleteError("Could not delete photo. Please try again.") from exc

    def usage(self) -> StorageUsageSnapshot:
        """Return the current storage usage estimate."""
        return self.estimator.estimate_usage()

    def _get_owned(self, user_id: str, photo_id: str) -> PhotoRecord:
        photo = self.photo_repository.get_photo(photo_id)
        if photo is None or photo.uploaded_by != user_id:
            raise PhotoNotFoundError("Photo not found")
        return photo
