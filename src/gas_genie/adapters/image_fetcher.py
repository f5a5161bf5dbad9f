"""HTTP download of photos by URL."""

from dataclasses import dataclass

import httpx

from gas_genie.services.diagnosis import ImageFetcher


@dataclass
class HttpxImageFetcher(ImageFetcher):
    """Image fetcher using httpx."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls) -> "HttpxImageFetcher":
        """Create an image fetcher with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True))

    async def fetch(self, url: str) -> tuple[bytes, str | None]:
        """Download an image and return its bytes and content type."""
        response = await self.http_client.get(url, timeout=20)
        response.raise_for_status()
        return response.content, response.headers.get("content-type")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
