"""Supabase-backed photo analysis storage."""

from dataclasses import dataclass

from supabase import Client

from gas_genie.services.diagnosis import AnalysisRepository


@dataclass
class SupabaseAnalysisRepository(AnalysisRepository):
    """Supabase implementation for photo analyses."""

    client: Client

    def create_analysis(
        self,
        user_id: str,
        photo_url: str,
        analysis: dict[str, object],
        model_used: str,
    ) -> None:
        """Insert a photo analysis row."""
        self.client.table("photo_analyses").insert(
            {
                "user_id": user_id,
                "photo_url": photo_url,
                "analysis": analysis,
                "model_used": model_used,
            }
        ).execute()
