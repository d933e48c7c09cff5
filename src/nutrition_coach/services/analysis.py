"""Extraction of a structured analysis from coaching text."""

import logging
from dataclasses import dataclass

from nutrition_coach.domain.analysis import StructuredAnalysis, fallback_analysis
from nutrition_coach.domain.meals import MealMetadata
from nutrition_coach.domain.nutrition import NutritionEstimate
from nutrition_coach.services.decoding import ModelOutputError, decode_model_json
from nutrition_coach.services.gateway import ModelGateway

_logger = logging.getLogger(__name__)

ANALYSIS_SYSTEM_PROMPT = """\
Return only valid JSON matching this format and nothing else:
{
  "nutritionalAnalysis": {
    "calories": number,
    "macros": {"protein": number, "carbs": number, "fat": number,
               "fiber": number, "sugar": number},
    "micronutrients": {"sodium_mg": number, "potassium_mg": number,
                       "calcium_mg": number, "iron_mg": number,
                       "vitamin_c_mg": number},
    "ingredients": ["string"],
    "preparationNotes": "string"
  },
  "healthAssessment": {
    "score": number between 0 and 100,
    "category": "excellent" | "good" | "fair" | "poor",
    "concerns": ["string"],
    "positives": ["string"]
  },
  "personalizedRecommendations": ["string"],
  "mealTimingAdvice": "string",
  "portionFeedback": "string",
  "improvementSuggestions": ["string"],
  "contextualInsights": ["string"]
}"""


def build_analysis_prompt(
    estimate: NutritionEstimate, coach_text: str, metadata: MealMetadata
) -> str:
    """Build the prompt that compresses coaching text into the schema."""
    return (
        f"Coach Response:\n{coach_text}\n\n"
        f"Nutritional:\n{estimate.model_dump_json(by_alias=True)}\n\n"
        f"Metadata:\n{metadata.model_dump_json(by_alias=True)}"
    )


@dataclass
class AnalysisExtractor:
    """Extracts a StructuredAnalysis, falling back to a neutral record."""

    gateway: ModelGateway

    async def extract(
        self,
        estimate: NutritionEstimate,
        coach_text: str,
        metadata: MealMetadata,
    ) -> StructuredAnalysis:
        """Return a structured analysis; never raises on model failure."""
        prompt = build_analysis_prompt(estimate, coach_text, metadata)
        try:
            text = await self.gateway.invoke(ANALYSIS_SYSTEM_PROMPT, prompt)
            return decode_model_json(text, StructuredAnalysis)
        except ModelOutputError as exc:
            _logger.warning("Error parsing structured analysis: %s", exc.raw_text)
        except Exception:
            _logger.exception("Structured analysis request failed")
        return fallback_analysis(estimate)
