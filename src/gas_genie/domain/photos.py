"""Job photo domain models."""

from dataclasses import dataclass
from datetime import datetime

from gas_genie.domain.timestamps import parse_timestamp


@dataclass(frozen=True)
class PhotoRecord:
    """Catalog entry for one uploaded job photo."""

    id: str
    storage_key: str
    uploaded_by: str
    uploaded_at: datetime
    description: str | None = None
    job_id: str | None = None
    file_url: str | None = None


def photo_from_row(row: dict[str, object]) -> PhotoRecord:
    """Build a photo record from a catalog row, defaulting optional fields."""
    photo_id = row.get("id")
    storage_key = row.get("file_path")
    uploaded_by = row.get("uploaded_by")
    if not photo_id or not isinstance(storage_key, str) or not storage_key:
        raise ValueError("Photo row is missing id or file_path")
    if not uploaded_by:
        raise ValueError("Photo row is missing uploaded_by")
    uploaded_at = parse_timestamp(row.get("uploaded_at"))
    if uploaded_at is None:
        raise ValueError("Photo row is missing uploaded_at")
    return PhotoRecord(
        id=str(photo_id),
        storage_key=storage_key,
        uploaded_by=str(uploaded_by),
        uploaded_at=uploaded_at,
        description=_optional_str(row.get("description")),
        job_id=_optional_str(row.get("job_id")),
        file_url=_optional_str(row.get("file_url")),
    )


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
