"""Structured meal analysis returned to the caller."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nutrition_coach.domain.nutrition import NutritionEstimate


class HealthCategory(StrEnum):
    """Overall quality bucket for a meal."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class HealthAssessment(BaseModel):
    """Scored assessment of a meal."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=0, le=100)
    category: HealthCategory
    concerns: list[str]
    positives: list[str]


class StructuredAnalysis(BaseModel):
    """Terminal analysis artifact of the food-photo pipeline."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    nutritional_analysis: NutritionEstimate
    health_assessment: HealthAssessment
    personalized_recommendations: list[str]
    meal_timing_advice: str
    portion_feedback: str
    improvement_suggestions: list[str]
    contextual_insights: list[str]


def fallback_analysis(estimate: NutritionEstimate) -> StructuredAnalysis:
    """Return the neutral analysis used when extraction fails."""
    return StructuredAnalysis(
        nutritional_analysis=estimate,
        health_assessment=HealthAssessment(
            score=70,
            category=HealthCategory.GOOD,
            concerns=["Unable to parse detailed analysis"],
            positives=["Meal logged for tracking"],
        ),
        personalized_recommendations=[
            "Continue tracking your meals for better insights"
        ],
        meal_timing_advice="Meal timing analysis unavailable",
        portion_feedback="Portion analysis unavailable",
        improvement_suggestions=["Try adding more vegetables to your meals"],
        contextual_insights=["Keep logging meals with context for better insights"],
    )
