"""Regulation search over embedded regulation chunks."""

import logging
from dataclasses import dataclass
from typing import Protocol

from gas_genie.domain.regulations import RegulationMatch, RegulationSearchResult
from gas_genie.errors import EmbeddingError, SearchUnavailableError

logger = logging.getLogger(__name__)

MATCH_THRESHOLD = 0.7


class EmbeddingClient(Protocol):
    """Interface for text embedding generation."""

    async def embed(self, *, model: str, text: str) -> list[float]:
        """Return the embedding vector for a text."""


class RegulationRepository(Protocol):
    """Persistence interface for regulation chunks."""

    def match_regulations(
        self, embedding: list[float], threshold: float, count: int
    ) -> list[dict[str, object]]:
        """Return chunks similar to the embedding, with a similarity score."""

    def text_search(self, query: str, limit: int) -> list[dict[str, object]]:
        """Return chunks whose content matches all query terms."""


@dataclass
class RegulationSearchService:
    """Vector search with a full-text fallback."""

    embedding_client: EmbeddingClient
    repository: RegulationRepository
    embedding_model: str

    async def search(self, query: str, limit: int = 5) -> RegulationSearchResult:
        """Search regulations for a free-text query."""
        try:
            rows = await self._vector_search(query, limit)
        except SearchUnavailableError:
            logger.warning("Vector search unavailable; using text search fallback")
            rows = self.repository.text_search(_to_text_query(query), limit)
            return RegulationSearchResult(
                results=[_to_match(row, with_relevance=False) for row in rows],
                search_type="text_fallback",
            )
        return RegulationSearchResult(
            results=[_to_match(row, with_relevance=True) for row in rows],
            search_type="vector",
        )

    async def _vector_search(self, query: str, limit: int) -> list[dict[str, object]]:
        try:
            embedding = await self.embedding_client.embed(
                model=self.embedding_model, text=query
            )
        except Exception as exc:
            raise EmbeddingError("Failed to generate embedding") from exc
        if not embedding:
            raise EmbeddingError("No embedding returned")
        return self.repository.match_regulations(embedding, MATCH_THRESHOLD, limit)


def format_matches(result: RegulationSearchResult) -> str:
    """Render matches as plain text for a voice assistant."""
    return "\n\n".join(
        f"[{match.source}] {match.section}: {match.content}"
        for match in result.results
    )


def _to_text_query(query: str) -> str:
    return " & ".join(term for term in query.split() if term)


def _to_match(row: dict[str, object], *, with_relevance: bool) -> RegulationMatch:
    relevance = None
    if with_relevance:
        similarity = row.get("similarity")
        relevance = round(float(similarity) * 100) if similarity is not None else 0
    return RegulationMatch(
        source=str(row.get("source") or "Unknown"),
        section=str(row.get("section") or ""),
        content=str(row.get("content") or ""),
        relevance=relevance,
    )
