"""Pydantic models for HTTP request payloads."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from nutrition_coach.domain.meals import MealMetadata


class FoodAnalysisRequest(BaseModel):
    """Food-photo analysis request payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    photo: str | None = None
    metadata: MealMetadata = Field(default_factory=MealMetadata)
    user_id: str | None = None


class ConversationTurn(BaseModel):
    """Prior chat message sent by the client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: str
    is_user: bool = False


class HealthCoachRequest(BaseModel):
    """Health coach chat request payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    user_id: str | None = None
    conversation_history: list[ConversationTurn] = Field(default_factory=list)
