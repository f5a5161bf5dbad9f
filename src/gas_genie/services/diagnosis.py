"""Photo fault diagnosis using a vision LLM."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from gas_genie.domain.diagnosis import PhotoDiagnosis, fallback_diagnosis
from gas_genie.errors import DiagnosisError
from gas_genie.services.images import to_data_url

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are Gas Genie, an expert UK gas engineer and plumber with decades of experience.
You are analysing a photo taken on-site by a gas engineer or plumber.

Your task is to identify:
1. Any error codes displayed on boiler/appliance screens
2. Installation defects or compliance issues
3. Equipment condition and faults
4. Safety concerns

Rules:
- Always refer to UK Gas Safety Regulations
- If you see a gas leak indication, set severity to "critical" and safety_warning to "If you smell gas, call the National Gas Emergency Service: 0800 111 999"
- Reference specific boiler models/brands when identifiable
- Be specific about error codes (e.g. "E119 on Vaillant ecoTEC = ignition failure")
- If the image is unclear, set confidence low and say so in the diagnosis
- Always include practical next steps a qualified engineer would take"""  # noqa: E501

DIAGNOSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "diagnosis": {"type": "string"},
        "severity": {
            "type": "string",
            "enum": ["low", "medium", "high", "critical"],
        },
        "possible_causes": {"type": "array", "items": {"type": "string"}},
        "next_steps": {"type": "array", "items": {"type": "string"}},
        "safety_warning": {"anyOf": [{"type": "string"}, {"type": "null"}]},
        "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
    },
    "required": [
        "diagnosis",
        "severity",
        "possible_causes",
        "next_steps",
        "safety_warning",
        "confidence",
    ],
    "additionalProperties": False,
}


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured vision extraction data."""


class ImageFetcher(Protocol):
    """Interface for downloading an image by URL."""

    async def fetch(self, url: str) -> tuple[bytes, str | None]:
        """Return the image bytes and the reported content type."""


class AnalysisRepository(Protocol):
    """Persistence interface for stored photo analyses."""

    def create_analysis(
        self,
        user_id: str,
        photo_url: str,
        analysis: dict[str, object],
        model_used: str,
    ) -> None:
        """Store a photo analysis."""


@dataclass
class DiagnosisService:
    """Fetches a photo, asks the vision model for a diagnosis, stores it."""

    client: VisionClient
    image_fetcher: ImageFetcher
    repository: AnalysisRepository
    model: str
    reasoning_effort: str | None
    store: bool

    async def diagnose(self, photo_url: str, user_id: str | None) -> PhotoDiagnosis:
        """Return a diagnosis for the photo at the given URL."""
        try:
            image_bytes, content_type = await self.image_fetcher.fetch(photo_url)
        except Exception as exc:
            logger.exception("Failed to download photo for diagnosis")
            raise DiagnosisError("Could not download the photo") from exc

        diagnosis = await self.analyse(image_bytes, content_type)
        if user_id:
            self.repository.create_analysis(
                user_id=user_id,
                photo_url=photo_url,
                analysis=diagnosis.model_dump(),
                model_used=self.model,
            )
        return diagnosis

    async def analyse(
        self, image_bytes: bytes, content_type: str | None = None
    ) -> PhotoDiagnosis:
        """Run the vision model over raw image bytes."""
        mime_type = _image_mime_type(content_type)
        try:
            raw = await self.client.extract(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                image_data_url=to_data_url(image_bytes, mime_type),
                schema=DIAGNOSIS_SCHEMA,
                prompt=SYSTEM_PROMPT,
            )
        except json.JSONDecodeError:
            logger.warning("Vision model returned non-JSON output", exc_info=True)
            return fallback_diagnosis()
        except Exception as exc:
            logger.exception("Vision model call failed")
            raise DiagnosisError("AI analysis failed") from exc
        try:
            return PhotoDiagnosis.model_validate(raw)
        except ValidationError:
            logger.warning("Vision model returned an invalid diagnosis", exc_info=True)
            return fallback_diagnosis()


def _image_mime_type(content_type: str | None) -> str | None:
    """Return the content type if it names an image, else None."""
    if not content_type:
        return None
    mime_type = content_type.split(";")[0].strip().lower()
    return mime_type if mime_type.startswith("image/") else None
