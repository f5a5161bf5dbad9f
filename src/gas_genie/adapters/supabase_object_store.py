"""Supabase Storage-backed object store."""

from dataclasses import dataclass

from supabase import Client

from gas_genie.domain.storage import StoredObject
from gas_genie.services.quota import ObjectStore

_PAGE_SIZE = 1000


@dataclass
class SupabaseObjectStore(ObjectStore):
    """Object store over a single Supabase Storage bucket."""

    client: Client
    bucket: str

    def list_objects(self, prefix: str) -> list[StoredObject]:
        """List entries directly under a prefix, following pagination."""
        bucket = self.client.storage.from_(self.bucket)
        entries: list[StoredObject] = []
        offset = 0
        while True:
            page = bucket.list(prefix, {"limit": _PAGE_SIZE, "offset": offset})
            for item in page or []:
                name = item.get("name")
                if not name or name == ".emptyFolderPlaceholder":
                    continue
                metadata = item.get("metadata") or {}
                size = metadata.get("size") if isinstance(metadata, dict) else None
                entries.append(
                    StoredObject(
                        key=f"{prefix}/{name}" if prefix else name,
                        size=size if isinstance(size, int) else None,
                        is_folder=item.get("id") is None,
                    )
                )
            if not page or len(page) < _PAGE_SIZE:
                return entries
            offset += _PAGE_SIZE

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Upload bytes under a key and return the public URL."""
        self.client.storage.from_(self.bucket).upload(
            key, data, {"content-type": content_type}
        )
        return self.get_public_url(key)

    def delete(self, key: str) -> None:
        """Remove an object; Supabase ignores keys that do not exist."""
        self.client.storage.from_(self.bucket).remove([key])

    def get_public_url(self, key: str) -> str:
        """Return the public URL for a key."""
        return self.client.storage.from_(self.bucket).get_public_url(key)
