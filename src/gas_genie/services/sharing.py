"""Customer-facing access to shared documents."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from gas_genie.domain.sharing import DOCUMENT_TABLES, SharedDocument, ShareLink
from gas_genie.errors import ShareLinkError

INVALID_LINK = "This link is invalid or has expired."
EXPIRED_LINK = "This link has expired. Please contact your engineer for a new one."


class ShareRepository(Protocol):
    """Persistence interface for share links and the documents they expose."""

    def get_share_link(self, share_token: str) -> ShareLink | None:
        """Return the share link for a token, if present."""

    def get_document(self, table: str, document_id: str) -> dict[str, object] | None:
        """Return a document row from a table, if present."""

    def get_profile(self, engineer_id: str) -> dict[str, object] | None:
        """Return an engineer profile, if present."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SharingService:
    """Resolves share tokens into documents for customers."""

    repository: ShareRepository
    clock: Callable[[], datetime] = field(default=_utcnow)

    def get_shared_document(self, share_token: str) -> SharedDocument:
        """Return the shared document and engineer profile for a token."""
        if not share_token:
            raise ShareLinkError("Invalid link", status_code=400)
        link = self.repository.get_share_link(share_token)
        if link is None:
            raise ShareLinkError(INVALID_LINK, status_code=404)
        if link.expires_at is not None and link.expires_at < self.clock():
            raise ShareLinkError(EXPIRED_LINK, status_code=410)

        table = DOCUMENT_TABLES.get(link.document_type)
        if table is None:
            raise ShareLinkError("Unknown document type", status_code=400)
        document = self.repository.get_document(table, link.document_id)
        if document is None:
            raise ShareLinkError("Document not found", status_code=404)
        return SharedDocument(
            document_type=link.document_type,
            document=document,
            engineer=self.repository.get_profile(link.engineer_id),
        )
