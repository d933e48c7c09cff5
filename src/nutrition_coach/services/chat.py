"""Conversational health coach over the user's recent history."""

import logging
from dataclasses import dataclass
from typing import Literal

from nutrition_coach.domain.health import HealthContext
from nutrition_coach.services.gateway import ModelGateway
from nutrition_coach.services.health_context import HealthContextService

_logger = logging.getLogger(__name__)

Priority = Literal["low", "medium", "high"]

DEMO_MODE_REPLY = (
    "I'm currently running in demo mode. To access your real health data and "
    "get personalized insights, please configure your Supabase database "
    "connection. For now, I can provide general health advice!\n\n"
    "What would you like to know about recovery, sleep, workouts, or wellness?"
)
ERROR_REPLY = (
    "I'm sorry, I'm having trouble connecting right now. Please try again in a "
    "moment, or check if your database is properly configured."
)

_CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("recovery", ("recovery", "hrv", "strain")),
    ("sleep", ("sleep", "tired", "rest")),
    ("fitness", ("workout", "exercise", "training")),
    ("medical", ("lab", "medical", "test")),
]


@dataclass(frozen=True)
class ChatTurn:
    """Previous message in the conversation."""

    content: str
    is_user: bool


@dataclass(frozen=True)
class ChatReply:
    """Coach answer with routing hints for the client."""

    response: str
    category: str
    priority: Priority
    context_data: dict[str, object] | None = None


def build_chat_system_prompt(context: HealthContext) -> str:
    """Build the coach persona prompt with the user's health summary."""
    return (
        "You are an AI Health Coach specializing in fitness tracking data "
        "analysis.\n\n"
        "Key personality traits:\n"
        "- Expert in recovery science and sleep optimization\n"
        "- Knowledgeable about heart rate variability and strain\n"
        "- Evidence-based recommendations for performance optimization\n"
        "- Supportive and motivational\n"
        "- Uses emojis appropriately\n\n"
        f"Available Health Data:\n{context.summary}\n\n"
        "Guidelines:\n"
        "1. Reference specific metrics like recovery score, HRV, sleep duration\n"
        "2. Provide actionable advice based on strain and recovery patterns\n"
        "3. Acknowledge achievements and progress\n"
        "4. Flag concerning trends in health metrics\n"
        "5. Keep responses under 200 words unless detailed explanation needed"
    )


def build_chat_prompt(message: str, history: list[ChatTurn]) -> str:
    """Build the user prompt from the message and conversation history."""
    if history:
        previous = "\n".join(
            f"{'User' if turn.is_user else 'Coach'}: {turn.content}"
            for turn in history
        )
    else:
        previous = "No previous context"
    return (
        f'User message: "{message}"\n\n'
        f"Previous conversation context:\n{previous}\n\n"
        "Please provide a helpful, personalized response based on the user's "
        "health tracking data."
    )


def categorize_message(message: str) -> str:
    """Classify a user message into a coaching topic."""
    lowered = message.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "general"


def determine_priority(reply: str) -> Priority:
    """Rank a coach reply by urgency."""
    lowered = reply.lower()
    if any(word in lowered for word in ("urgent", "concerning", "doctor")):
        return "high"
    if "should consider" in lowered or "recommend" in lowered:
        return "medium"
    return "low"


@dataclass
class HealthCoachChatService:
    """Answers free-text questions using the user's health context."""

    gateway: ModelGateway
    health_context_service: HealthContextService

    async def reply(
        self, message: str, user_id: str | None, history: list[ChatTurn]
    ) -> ChatReply:
        """Return a coach reply; gateway failures become an apology."""
        if self.health_context_service.repository is None:
            return ChatReply(
                response=DEMO_MODE_REPLY,
                category="general",
                priority="low",
                context_data={
                    "hasHealthData": False,
                    "dataPoints": {"demo_mode": True},
                },
            )

        context = await self.health_context_service.fetch_context(user_id)
        try:
            text = await self.gateway.invoke(
                build_chat_system_prompt(context), build_chat_prompt(message, history)
            )
        except Exception:
            _logger.exception("Error in health coach")
            return ChatReply(response=ERROR_REPLY, category="error", priority="low")

        return ChatReply(
            response=text,
            category=categorize_message(message),
            priority=determine_priority(text),
            context_data={
                "hasHealthData": context.has_data,
                "dataPoints": _data_points(context),
            },
        )


def _data_points(context: HealthContext) -> dict[str, object]:
    return {
        "hasRecoveryData": bool(context.recovery),
        "hasSleepData": bool(context.sleep),
        "hasWorkoutData": bool(context.workouts),
        "hasNutritionData": bool(context.recent_nutrition),
        "dataRecency": "7_days",
    }
