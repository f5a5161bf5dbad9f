"""Models for regulation search."""

from typing import Literal

from pydantic import BaseModel


class RegulationMatch(BaseModel):
    """A regulation chunk returned by search."""

    source: str
    section: str = ""
    content: str = ""
    relevance: int | None = None


class RegulationSearchResult(BaseModel):
    """Search results plus the strategy that produced them."""

    results: list[RegulationMatch]
    search_type: Literal["vector", "text_fallback"]
