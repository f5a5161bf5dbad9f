"""Supabase-backed storage for jobs, hours and mileage logged by voice."""

from dataclasses import dataclass

from supabase import Client

from gas_genie.services.voice_tools import WorkLogRepository


@dataclass
class SupabaseWorkLogRepository(WorkLogRepository):
    """Supabase implementation for voice work logs."""

    client: Client

    def insert(self, table: str, payload: dict[str, object]) -> None:
        """Insert a work log row."""
        response = self.client.table(table).insert(payload).execute()
        if response.data is None:
            raise RuntimeError(f"Failed to insert into {table}")
