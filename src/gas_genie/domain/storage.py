"""Storage budget models and constants."""

from dataclasses import dataclass

BYTES_PER_MB = 1024 * 1024
STORAGE_LIMIT_BYTES = 1024 * BYTES_PER_MB
ESTIMATED_OBJECT_BYTES = 300 * 1024
HIGH_WATERMARK_PERCENT = 90.0
TARGET_RATIO = 0.7


@dataclass(frozen=True)
class StoredObject:
    """Entry returned by an object store listing."""

    key: str
    size: int | None = None
    is_folder: bool = False


@dataclass(frozen=True)
class StorageUsageSnapshot:
    """Estimated usage of the photo bucket against its configured limit."""

    used_bytes: int
    limit_bytes: int
    object_count: int
    percentage: float
    is_near_full: bool

    @classmethod
    def from_object_count(
        cls,
        object_count: int,
        limit_bytes: int = STORAGE_LIMIT_BYTES,
        object_bytes: int = ESTIMATED_OBJECT_BYTES,
    ) -> "StorageUsageSnapshot":
        """Estimate usage from a count of stored objects."""
        used_bytes = object_count * object_bytes
        percentage = usage_percentage(used_bytes, limit_bytes)
        return cls(
            used_bytes=used_bytes,
            limit_bytes=limit_bytes,
            object_count=object_count,
            percentage=percentage,
            is_near_full=percentage >= HIGH_WATERMARK_PERCENT,
        )

    @classmethod
    def empty(cls, limit_bytes: int = STORAGE_LIMIT_BYTES) -> "StorageUsageSnapshot":
        """Return a zeroed snapshot used when usage is unknown."""
        return cls(
            used_bytes=0,
            limit_bytes=limit_bytes,
            object_count=0,
            percentage=0.0,
            is_near_full=False,
        )


@dataclass(frozen=True)
class EvictionResult:
    """Outcome of a single eviction run."""

    deleted_count: int
    remaining_usage_bytes: float
    skipped_count: int = 0


def usage_percentage(used_bytes: float, limit_bytes: int) -> float:
    """Return usage as a percentage rounded to one decimal place."""
    if limit_bytes <= 0:
        return 0.0
    return round(used_bytes / limit_bytes * 1000) / 10
