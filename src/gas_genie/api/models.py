"""Pydantic request and response models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from gas_genie.domain.photos import PhotoRecord
from gas_genie.domain.storage import StorageUsageSnapshot


class DiagnoseRequest(BaseModel):
    """Request body for photo diagnosis."""

    photo_url: str = Field(min_length=1)


class RegulationSearchRequest(BaseModel):
    """Request body for regulation search."""

    query: str = Field(min_length=1)
    limit: int = Field(default=5, ge=1, le=20)


class DescriptionUpdate(BaseModel):
    """Request body for changing a photo description."""

    description: str | None = None


class PhotoResponse(BaseModel):
    """Public view of a job photo."""

    id: str
    file_path: str
    file_url: str | None
    description: str | None
    uploaded_at: datetime
    job_id: str | None

    @classmethod
    def from_record(cls, record: PhotoRecord) -> "PhotoResponse":
        """Build a response from a photo record."""
        return cls(
            id=record.id,
            file_path=record.storage_key,
            file_url=record.file_url,
            description=record.description,
            uploaded_at=record.uploaded_at,
            job_id=record.job_id,
        )


class StorageUsageResponse(BaseModel):
    """Public view of a storage usage snapshot."""

    used_bytes: int
    limit_bytes: int
    object_count: int
    percentage: float
    is_near_full: bool

    @classmethod
    def from_snapshot(cls, snapshot: StorageUsageSnapshot) -> "StorageUsageResponse":
        """Build a response from a usage snapshot."""
        return cls(
            used_bytes=snapshot.used_bytes,
            limit_bytes=snapshot.limit_bytes,
            object_count=snapshot.object_count,
            percentage=snapshot.percentage,
            is_near_full=snapshot.is_near_full,
        )
