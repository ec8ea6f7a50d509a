"""Meal photo recognition and validation of its free-form output."""

import asyncio
import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from food_tracker.domain.errors import (
    MalformedResponseError,
    NoFoodDetectedError,
    TransportError,
)
from food_tracker.domain.nutrition import FoodItem
from food_tracker.domain.recognition import RecognitionPayload

_logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```(?:json)?", flags=re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"```$")

RECOGNITION_PROMPT = """\
Analyze the food image and identify every distinct food item with high accuracy.
Be specific (e.g. "Grilled Chicken Breast", "Brown Rice") and include visible
condiments or sauces. Estimate each quantity in measurable units (grams, pieces,
slices, cups) from portion size, shape and density, and base calories, protein,
carbs and fats on that quantity. Give each value as a single number, never a
range. Combine identical items (e.g. several slices of bread) into one entry.
Only report items you can identify confidently.

Return only JSON with this structure:
{"foods": [{"name": "Grilled Chicken", "quantity": "150g", "calories": 250,
"protein": 30, "carbs": 2, "fats": 10}]}

If no food is detected or the image is too unclear, return:
{"error": "Unable to detect food items. Please try another image."}
"""


class RecognitionClient(Protocol):
    """Interface for the external image recognition service."""

    async def recognize(
        self,
        *,
        model: str,
        image_data_url: str,
        prompt: str,
    ) -> str:
        """Return the raw text produced for an image."""


@dataclass
class RecognitionService:
    """Service that sends meal photos for recognition and validates results."""

    client: RecognitionClient
    model: str
    timeout_seconds: float = 60.0

    async def recognize(self, image_bytes: bytes) -> list[FoodItem]:
        """Recognize food items in an image.

        Raises a ``RecognitionError`` subclass when the call fails, the output
        is malformed, or no food was detected.
        """
        data_url = _to_data_url(image_bytes)
        try:
            raw = await asyncio.wait_for(
                self.client.recognize(
                    model=self.model,
                    image_data_url=data_url,
                    prompt=RECOGNITION_PROMPT,
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as exc:
            raise TransportError("Recognition request timed out") from exc
        except Exception as exc:
            raise TransportError(f"Recognition request failed: {exc}") from exc
        _logger.debug("Recognition raw output: %s", raw)
        return parse_recognition(raw)


def parse_recognition(raw: str) -> list[FoodItem]:
    """Validate raw recognition output into food items.

    The text may be wrapped in a code fence. Anything that does not parse as
    JSON once the fence is removed is rejected.
    """
    try:
        parsed = json.loads(strip_code_fence(raw))
    except (TypeError, ValueError) as exc:
        raise MalformedResponseError("Recognition output is not valid JSON") from exc
    if not isinstance(parsed, dict):
        raise MalformedResponseError("Recognition output is not a JSON object")

    error = parsed.get("error")
    if error:
        raise NoFoodDetectedError(str(error))

    foods = parsed.get("foods")
    if not isinstance(foods, list):
        raise MalformedResponseError("Recognition output has no foods list")
    if not foods:
        raise NoFoodDetectedError()

    try:
        payload = RecognitionPayload.model_validate(parsed)
    except ValidationError as exc:
        raise MalformedResponseError(f"Invalid food entry: {exc}") from exc

    return [food.to_food_item() for food in payload.foods]


def strip_code_fence(text: str) -> str:
    """Remove an optional leading and trailing code fence."""
    cleaned = text.strip()
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1).strip()
    return _CLOSING_FENCE.sub("", cleaned, count=1).strip()


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
