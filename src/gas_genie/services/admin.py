"""Admin service for reporting."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from gas_genie.domain.admin import CallStats, VoiceCall
from gas_genie.domain.storage import EvictionResult, StorageUsageSnapshot
from gas_genie.services.uploads import UploadGate


class AdminRepository(Protocol):
    """Persistence interface for admin data."""

    def list_recent_calls(self, limit: int) -> list[VoiceCall]:
        """Return recent voice calls, newest first."""


@dataclass
class AdminService:
    """Service for admin dashboards."""

    admin_repository: AdminRepository
    upload_gate: UploadGate

    def call_report(
        self, today: date, limit: int = 50
    ) -> tuple[CallStats, list[dict[str, object]]]:
        """Return dashboard totals and the recent calls they were computed from."""
        calls = self.admin_repository.list_recent_calls(limit)
        return summarise_calls(calls, today), [_serialize_call(call) for call in calls]

    def storage_usage(self) -> StorageUsageSnapshot:
        """Return the current storage usage estimate."""
        return self.upload_gate.estimator.estimate_usage()

    def evict_now(self) -> EvictionResult | None:
        """Run the quota check and eviction outside of an upload."""
        gate = self.upload_gate
        with gate.lease_manager.acquire(
            gate.namespace, gate.lease_timeout_seconds
        ) as acquired:
            if not acquired:
                return None
            return gate.ensure_capacity()


def _serialize_call(call: VoiceCall) -> dict[str, object]:
    return {
        "id": call.id,
        "user_id": call.user_id,
        "started_at": call.started_at.isoformat() if call.started_at else None,
        "duration_seconds": call.duration_seconds,
        "status": call.status,
        "topic_tags": call.topic_tags,
    }


def summarise_calls(calls: list[VoiceCall], today: date) -> CallStats:
    """Summarise voice calls for the admin dashboard."""
    total_seconds = sum(call.duration_seconds or 0 for call in calls)
    return CallStats(
        total_calls=len(calls),
        total_minutes=round(total_seconds / 60),
        active_users=len({call.user_id for call in calls if call.user_id}),
        calls_today=sum(
            1
            for call in calls
            if call.started_at is not None and call.started_at.date() == today
        ),
    )
