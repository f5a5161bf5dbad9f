"""Domain models for customer document sharing."""

from dataclasses import dataclass
from datetime import datetime

DOCUMENT_TABLES: dict[str, str] = {
    "cp12": "cp12_records",
    "quote": "quotes",
    "invoice": "invoices",
}


@dataclass(frozen=True)
class ShareLink:
    """A share token granting customer access to one document."""

    id: str
    share_token: str
    document_type: str
    document_id: str
    engineer_id: str
    expires_at: datetime | None


@dataclass(frozen=True)
class SharedDocument:
    """A document resolved from a share link, with its engineer profile."""

    document_type: str
    document: dict[str, object]
    engineer: dict[str, object] | None
