"""Supabase admin data access."""

from dataclasses import dataclass

from supabase import Client

from gas_genie.domain.admin import VoiceCall
from gas_genie.domain.timestamps import parse_timestamp
from gas_genie.services.admin import AdminRepository


@dataclass
class SupabaseAdminRepository(AdminRepository):
    """Supabase implementation for admin queries."""

    client: Client

    def list_recent_calls(self, limit: int) -> list[VoiceCall]:
        """Return recent voice calls ordered by start time."""
        response = (
            self.client.table("voice_calls")
            .select("id, user_id, started_at, duration_seconds, status, topic_tags")
            .order("started_at", desc=True)
            .limit(limit)
            .execute()
        )
        calls = []
        for row in response.data or []:
            duration = row.get("duration_seconds")
            calls.append(
                VoiceCall(
                    id=str(row["id"]),
                    user_id=str(row["user_id"]) if row.get("user_id") else None,
                    started_at=parse_timestamp(row.get("started_at")),
                    duration_seconds=int(duration) if duration is not None else None,
                    status=str(row.get("status") or "unknown"),
                    topic_tags=list(row.get("topic_tags") or []),
                )
            )
        return calls
