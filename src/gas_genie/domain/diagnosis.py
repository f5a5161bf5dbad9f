"""Models for photo diagnosis results."""

from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["low", "medium", "high", "critical"]


class PhotoDiagnosis(BaseModel):
    """Structured diagnosis of an on-site photo."""

    diagnosis: str
    severity: Severity
    possible_causes: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    safety_warning: str | None = None
    confidence: float = Field(ge=0.0, le=1.0)


def fallback_diagnosis() -> PhotoDiagnosis:
    """Return the diagnosis used when the model output cannot be parsed."""
    return PhotoDiagnosis(
        diagnosis="Unable to analyse this image. Please try a clearer photo.",
        severity="low",
        possible_causes=[],
        next_steps=["Try uploading a clearer photo", "Ensure the subject is well-lit"],
        safety_warning=None,
        confidence=0.2,
    )
