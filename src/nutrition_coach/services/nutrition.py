"""Photo-based nutrition estimation using the model gateway."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from nutrition_coach.domain.meals import (
    MealMetadata,
    display_hunger,
    display_value,
)
from nutrition_coach.domain.nutrition import NutritionEstimate, fallback_estimate
from nutrition_coach.services.decoding import ModelOutputError, decode_model_json
from nutrition_coach.services.gateway import ModelGateway

_logger = logging.getLogger(__name__)

NUTRITION_SYSTEM_PROMPT = """\
You are a certified nutritionist analyzing food photos. \
Respond with valid JSON only in this format:
{
  "calories": number,
  "macros": {
    "protein": number,
    "carbs": number,
    "fat": number,
    "fiber": number,
    "sugar": number
  },
  "micronutrients": {
    "sodium_mg": number,
    "potassium_mg": number,
    "calcium_mg": number,
    "iron_mg": number,
    "vitamin_c_mg": number
  },
  "ingredients": ["ingredient1", "ingredient2"],
  "preparationNotes": "cooking method and style observations"
}"""


class PhotoClient(Protocol):
    """Interface for retrieving photo bytes from a reference."""

    async def fetch_bytes(self, photo_ref: str) -> bytes:
        """Return the raw bytes behind a URL or data URI."""


def build_nutrition_prompt(
    metadata: MealMetadata, image_base64: str, mime_type: str | None = None
) -> str:
    """Build the user prompt for the vision nutrition estimate."""
    return (
        "Here is a photo of a meal encoded in base64 format"
        f" ({mime_type or 'unknown type'}):\n"
        f"<base64>\n{image_base64}\n</base64>\n\n"
        "Additional metadata:\n"
        f"- Meal type: {display_value(metadata.meal_type)}\n"
        f"- Time: {display_value(metadata.meal_time)}\n"
        f"- Location: {display_value(metadata.location)}\n"
        f"- Social context: {display_value(metadata.social_context)}\n"
        f"- Hunger level: {display_hunger(metadata.hunger_level)}\n"
        f"- Mood before: {display_value(metadata.mood_before)}\n"
        f"- Mood after: {display_value(metadata.mood_after)}\n"
        f"- Portion size: {display_value(metadata.portion_size)}\n"
        f"- Preparation: {display_value(metadata.preparation_method)}\n"
        f"- Notes: {display_value(metadata.notes)}\n\n"
        "Please analyze the image and return the nutrition estimate "
        "in the required JSON format."
    )


@dataclass
class NutritionEstimator:
    """Estimates nutrition for a meal photo, falling back to zeros."""

    gateway: ModelGateway
    photo_client: PhotoClient

    async def estimate(
        self, photo_ref: str, metadata: MealMetadata
    ) -> NutritionEstimate:
        """Return a nutrition estimate; never raises on model failure."""
        image_bytes = await self._load_photo(photo_ref)
        image_base64 = ""
        mime_type = None
        if image_bytes:
            image_base64 = base64.b64encode(image_bytes).decode("utf-8")
            mime_type = _detect_mime_type(image_bytes)
        prompt = build_nutrition_prompt(metadata, image_base64, mime_type)
        try:
            text = await self.gateway.invoke(NUTRITION_SYSTEM_PROMPT, prompt)
            estimate = decode_model_json(text, NutritionEstimate)
        except ModelOutputError as exc:
            _logger.warning("Error parsing nutritional analysis: %s", exc.raw_text)
            return fallback_estimate()
        except Exception:
            _logger.exception("Nutrition estimate request failed")
            return fallback_estimate()
        _logger.info(
            "Nutrition estimate: calories=%s ingredients=%s",
            estimate.calories,
            len(estimate.ingredients),
        )
        return estimate

    async def _load_photo(self, photo_ref: str) -> bytes:
        try:
            return await self.photo_client.fetch_bytes(photo_ref)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError):
            _logger.exception("Error encoding image to base64")
            return b""


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
