"""Admin domain models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class VoiceCall:
    """Minimal admin view of a voice assistant call."""

    id: str
    user_id: str | None
    started_at: datetime | None
    duration_seconds: int | None
    status: str
    topic_tags: list[str]


@dataclass(frozen=True)
class CallStats:
    """Aggregate figures for the admin dashboard."""

    total_calls: int
    total_minutes: int
    active_users: int
    calls_today: int
