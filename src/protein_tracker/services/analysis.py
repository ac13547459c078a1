"""Meal analysis gateway: prompt the vision model and parse its reply."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from protein_tracker.domain.errors import UpstreamFormatError, ValidationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a nutrition analysis expert specialized in identifying food items from photos and estimating protein content.

Your task:
1. Identify all visible food items in the image
2. Estimate the quantity of each food item (in grams or ml)
3. Calculate the protein content for each item based on standard nutritional data
4. Return the results in JSON format

Return ONLY valid JSON in this exact format:
{
  "foods": [
    {"name": "Chicken Breast", "quantity": "150g", "protein": 45},
    {"name": "Cooked Rice", "quantity": "200g", "protein": 4}
  ],
  "totalProtein": 49
}

Important:
- Use common Indian and international food items
- Be realistic with portion estimates
- Use standard USDA/IFCT nutritional values
- Round protein to nearest gram
- If you cannot identify food clearly, make your best estimate
- Return ONLY the JSON object, no additional text"""  # noqa: E501

USER_PROMPT = (
    "Analyze this meal photo and tell me the protein content of each food item."
)

# Greedy: spans from the first "{" to the last "}" in the reply.
_JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


class ChatCompletionClient(Protocol):
    """Interface for a vision-capable chat completion model."""

    async def complete(  # noqa: PLR0913
        self,
        *,
        api_key: str,
        model: str,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
        image_url: str,
    ) -> str | None:
        """Return the model's text reply; raise UpstreamError on failure."""


@dataclass
class AnalysisService:
    """Relay a meal photo to the model and return its nutrition estimate."""

    client: ChatCompletionClient
    model: str
    max_tokens: int

    async def analyze(
        self, image: str | None, api_key: str | None
    ) -> dict[str, object]:
        """Analyze a data-URI image with the caller's credential.

        The parsed object is returned as the model produced it; field types,
        ranges and the ``totalProtein`` sum are not checked.
        """
        if not api_key:
            raise ValidationError("OpenAI API key is required")
        if not image:
            raise ValidationError("Image is required")

        content = await self.client.complete(
            api_key=api_key,
            model=self.model,
            max_tokens=self.max_tokens,
            system_prompt=SYSTEM_PROMPT,
            user_prompt=USER_PROMPT,
            image_url=image,
        )
        if not content:
            raise UpstreamFormatError("No response from OpenAI")

        result = extract_json_object(content)
        foods = result.get("foods")
        logger.info(
            "Meal analyzed",
            extra={"food_count": len(foods) if isinstance(foods, list) else None},
        )
        return result


def extract_json_object(text: str) -> dict[str, object]:
    """Pull the brace-delimited JSON object out of a free-text reply."""
    match = _JSON_OBJECT_PATTERN.search(text)
    if not match:
        raise UpstreamFormatError("Invalid response format from OpenAI")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise UpstreamFormatError(
            f"Invalid JSON in OpenAI response: {exc.msg}"
        ) from exc
    if not isinstance(parsed, dict):
        raise UpstreamFormatError("Invalid response format from OpenAI")
    return parsed
