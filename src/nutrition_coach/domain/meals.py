"""Meal metadata submitted alongside a food photo."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MealType(StrEnum):
    """Kind of meal being logged."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class MealMetadata(BaseModel):
    """User-supplied descriptive attributes of a logged meal."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    meal_type: MealType | None = None
    meal_time: str | None = None
    location: str | None = None
    social_context: str | None = None
    hunger_level: int | None = Field(default=None, ge=0, le=10)
    mood_before: str | None = None
    mood_after: str | None = None
    portion_size: str | None = None
    preparation_method: str | None = None
    notes: str | None = None


def display_value(value: object) -> str:
    """Render an optional metadata value for a prompt."""
    if value is None or value == "":
        return "not specified"
    return str(value)


def display_hunger(level: int | None) -> str:
    """Render a hunger level on its 0-10 scale."""
    if level is None:
        return "not specified"
    return f"{level}/10"
