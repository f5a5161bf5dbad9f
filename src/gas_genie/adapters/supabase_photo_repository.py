"""Supabase-backed photo catalog."""

import logging
from dataclasses import dataclass

from supabase import Client

from gas_genie.domain.photos import PhotoRecord, photo_from_row
from gas_genie.services.photos import PhotoRepository

logger = logging.getLogger(__name__)

_PAGE_SIZE = 1000
_PHOTO_COLUMNS = "id, file_path, file_url, uploaded_by, description, uploaded_at, job_id"


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for job photo metadata persistence."""

    client: Client

    def create_photo(  # noqa: PLR0913
        self,
        storage_key: str,
        file_url: str,
        uploaded_by: str,
        description: str | None,
        job_id: str | None,
    ) -> PhotoRecord:
        """Create a photo metadata row and return it."""
        response = (
            self.client.table("job_photos")
            .insert(
                {
                    "file_path": storage_key,
                    "file_url": file_url,
                    "uploaded_by": uploaded_by,
                    "description": description,
                    "job_id": job_id,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo metadata")
        return photo_from_row(response.data[0])

    def get_photo(self, photo_id: str) -> PhotoRecord | None:
        """Return a photo by id."""
        response = (
            self.client.table("job_photos")
            .select("*")
            .eq("id", photo_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return photo_from_row(response.data[0])

    def list_for_user(self, user_id: str) -> list[PhotoRecord]:
        """Return a user's photos, newest first."""
        response = (
            self.client.table("job_photos")
            .select("*")
            .eq("uploaded_by", user_id)
            .order("uploaded_at", desc=True)
            .execute()
        )
        return [photo_from_row(row) for row in response.data or []]

    def list_oldest_first(self) -> list[PhotoRecord]:
        """Return all photos oldest first, paging past the row cap."""
        photos: list[PhotoRecord] = []
        start = 0
        while True:
            response = (
                self.client.table("job_photos")
                .select(_PHOTO_COLUMNS)
                .order("uploaded_at")
                .range(start, start + _PAGE_SIZE - 1)
                .execute()
            )
            rows = response.data or []
            photos.extend(_valid_photos(rows))
            if len(rows) < _PAGE_SIZE:
                return photos
            start += _PAGE_SIZE

    def update_description(self, photo_id: str, description: str | None) -> None:
        """Update a photo description."""
        self.client.table("job_photos").update({"description": description}).eq(
            "id", photo_id
        ).execute()

    def delete_photo(self, photo_id: str) -> None:
        """Delete a photo metadata row."""
        self.client.table("job_photos").delete().eq("id", photo_id).execute()


def _valid_photos(rows: list[dict[str, object]]) -> list[PhotoRecord]:
    """Map catalog rows to records, skipping rows that fail validation."""
    photos = []
    for row in rows:
        try:
            photos.append(photo_from_row(row))
        except ValueError:
            logger.warning("Skipping malformed photo row %s", row.get("id"))
    return photos
