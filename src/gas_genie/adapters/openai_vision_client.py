"""OpenAI Responses API client for photo diagnosis."""

import json
import re
from dataclasses import dataclass

from openai import AsyncOpenAI

from gas_genie.services.diagnosis import VisionClient

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Responses API."""

    client: AsyncOpenAI

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
        """Call OpenAI Responses API with structured outputs."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "photo_diagnosis",
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return _parse_json_object(output_text)


def _parse_json_object(text: str) -> dict[str, object]:
    """Parse the first JSON object in text, tolerating markdown fences."""
    match = _JSON_OBJECT.search(text)
    return json.loads(match.group(0) if match else text)
