"""Supabase-backed regulation chunk search."""

from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from gas_genie.errors import SearchUnavailableError
from gas_genie.services.regulations import RegulationRepository


@dataclass
class SupabaseRegulationRepository(RegulationRepository):
    """Regulation search via the match_regulations RPC and full-text search."""

    client: Client

    def match_regulations(
        self, embedding: list[float], threshold: float, count: int
    ) -> list[dict[str, object]]:
        """Call the vector similarity RPC."""
        try:
            response = self.client.rpc(
                "match_regulations",
                {
                    "query_embedding": embedding,
                    "match_threshold": threshold,
                    "match_count": count,
                },
            ).execute()
        except APIError as exc:
            raise SearchUnavailableError("Vector search failed") from exc
        return response.data or []

    def text_search(self, query: str, limit: int) -> list[dict[str, object]]:
        """Full-text search over chunk content."""
        response = (
            self.client.table("regulation_chunks")
            .select("source, section, content")
            .text_search("content", query)
            .limit(limit)
            .execute()
        )
        return response.data or []
