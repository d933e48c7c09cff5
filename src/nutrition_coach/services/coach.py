"""Free-text coaching advice for an analyzed meal."""

import logging
from dataclasses import dataclass

from nutrition_coach.domain.health import HealthContext
from nutrition_coach.domain.meals import MealMetadata, display_hunger, display_value
from nutrition_coach.domain.nutrition import NutritionEstimate
from nutrition_coach.services.gateway import ModelGateway

_logger = logging.getLogger(__name__)

COACH_SYSTEM_PROMPT = """\
You are an AI Health Coach reviewing a meal the user just logged.

Key personality traits:
- Supportive and motivational, never judgmental
- Evidence-based nutrition and recovery advice
- Uses emojis sparingly to keep the tone friendly

Guidelines:
1. Reference the meal's calories, macros and ingredients
2. Connect the meal to the user's recent recovery, sleep and training
3. Comment on meal timing, portion size and eating context
4. Give two or three concrete, actionable suggestions
5. Keep the response under 200 words"""


def build_coach_prompt(
    metadata: MealMetadata, estimate: NutritionEstimate, context: HealthContext
) -> str:
    """Build the coaching prompt from the meal, estimate and context."""
    macros = estimate.macros
    return (
        "Meal Info:\n"
        f"Meal Type: {display_value(metadata.meal_type)}\n"
        f"Time: {display_value(metadata.meal_time)}\n"
        f"Location: {display_value(metadata.location)}\n"
        f"Social Context: {display_value(metadata.social_context)}\n"
        f"Hunger: {display_hunger(metadata.hunger_level)}\n"
        f"Mood Before: {display_value(metadata.mood_before)}\n"
        f"Mood After: {display_value(metadata.mood_after)}\n"
        f"Portion: {display_value(metadata.portion_size)}\n"
        f"Prep: {display_value(metadata.preparation_method)}\n"
        f"Notes: {display_value(metadata.notes)}\n\n"
        "Nutrition:\n"
        f"Calories: {estimate.calories:g}\n"
        f"Protein: {macros.protein:g}g\n"
        f"Carbs: {macros.carbs:g}g\n"
        f"Fat: {macros.fat:g}g\n"
        f"Ingredients: {', '.join(estimate.ingredients)}\n\n"
        "Context:\n"
        f"{context.summary}"
    )


@dataclass
class CoachResponder:
    """Produces coaching text; gateway failures propagate."""

    gateway: ModelGateway

    async def respond(
        self,
        metadata: MealMetadata,
        estimate: NutritionEstimate,
        context: HealthContext,
    ) -> str:
        """Return the model's coaching text verbatim."""
        prompt = build_coach_prompt(metadata, estimate, context)
        text = await self.gateway.invoke(COACH_SYSTEM_PROMPT, prompt)
        _logger.info("Coach response generated: chars=%s", len(text))
        return text
