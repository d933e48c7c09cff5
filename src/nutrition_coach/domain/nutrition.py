"""Nutrition estimate produced from a food photo."""

from pydantic import BaseModel, ConfigDict, Field


class Macros(BaseModel):
    """Macronutrients in grams."""

    model_config = ConfigDict(frozen=True)

    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0


class Micronutrients(BaseModel):
    """Selected micronutrients in milligrams."""

    model_config = ConfigDict(frozen=True)

    sodium_mg: float = 0.0
    potassium_mg: float = 0.0
    calcium_mg: float = 0.0
    iron_mg: float = 0.0
    vitamin_c_mg: float = 0.0


class NutritionEstimate(BaseModel):
    """Structured nutrition estimate for a single meal."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    calories: float = 0.0
    macros: Macros = Field(default_factory=Macros)
    micronutrients: Micronutrients = Field(default_factory=Micronutrients)
    ingredients: list[str] = Field(default_factory=list)
    preparation_notes: str = Field(default="", alias="preparationNotes")


def fallback_estimate() -> NutritionEstimate:
    """Return the all-zero estimate used when analysis fails."""
    return NutritionEstimate(preparation_notes="Unable to analyze")
