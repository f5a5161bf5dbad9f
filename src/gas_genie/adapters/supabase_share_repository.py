"""Supabase-backed share links and shared documents."""

from dataclasses import dataclass

from supabase import Client

from gas_genie.domain.sharing import ShareLink
from gas_genie.domain.timestamps import parse_timestamp
from gas_genie.services.sharing import ShareRepository


@dataclass
class SupabaseShareRepository(ShareRepository):
    """Supabase implementation for customer document sharing."""

    client: Client

    def get_share_link(self, share_token: str) -> ShareLink | None:
        """Return the share link row for a token."""
        response = (
            self.client.table("shared_documents")
            .select("*")
            .eq("share_token", share_token)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return ShareLink(
            id=str(row["id"]),
            share_token=row["share_token"],
            document_type=str(row.get("document_type") or ""),
            document_id=str(row.get("document_id") or ""),
            engineer_id=str(row.get("engineer_id") or ""),
            expires_at=parse_timestamp(row.get("expires_at")),
        )

    def get_document(self, table: str, document_id: str) -> dict[str, object] | None:
        """Return a document row by id."""
        return self._get_by_id(table, document_id)

    def get_profile(self, engineer_id: str) -> dict[str, object] | None:
        """Return an engineer profile by id."""
        if not engineer_id:
            return None
        return self._get_by_id("profiles", engineer_id)

    def _get_by_id(self, table: str, row_id: str) -> dict[str, object] | None:
        response = (
            self.client.table(table).select("*").eq("id", row_id).limit(1).execute()
        )
        if not response.data:
            return None
        return response.data[0]
