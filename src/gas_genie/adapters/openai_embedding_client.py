"""OpenAI embeddings client for regulation search."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from gas_genie.services.regulations import EmbeddingClient


@dataclass
class OpenAIEmbeddingClient(EmbeddingClient):
    """Embedding client backed by the OpenAI embeddings endpoint."""

    client: AsyncOpenAI

    async def embed(self, *, model: str, text: str) -> list[float]:
        """Return the embedding for a single text."""
        response = await self.client.embeddings.create(model=model, input=text)
        if not response.data:
            return []
        return list(response.data[0].embedding)
