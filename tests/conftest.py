"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import datetime

import pytest

from nutrition_coach.config import Settings
from nutrition_coach.containers import AppContainer
from nutrition_coach.domain.health import (
    NutritionLogRow,
    RecoveryRow,
    SleepRow,
    WorkoutRow,
)
from nutrition_coach.services.analysis import AnalysisExtractor
from nutrition_coach.services.chat import HealthCoachChatService
from nutrition_coach.services.coach import CoachResponder
from nutrition_coach.services.gateway import GatewayError, ModelGateway
from nutrition_coach.services.health_context import (
    HealthContextService,
    HealthRepository,
)
from nutrition_coach.services.nutrition import NutritionEstimator, PhotoClient
from nutrition_coach.services.pipeline import FoodCoachPipeline

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"fake-image-bytes"

NUTRITION_PAYLOAD: dict[str, object] = {
    "calories": 520,
    "macros": {"protein": 32, "carbs": 48, "fat": 18, "fiber": 6, "sugar": 5},
    "micronutrients": {
        "sodium_mg": 640,
        "potassium_mg": 710,
        "calcium_mg": 90,
        "iron_mg": 3.2,
        "vitamin_c_mg": 24,
    },
    "ingredients": ["grilled chicken", "brown rice", "broccoli"],
    "preparationNotes": "Grilled chicken over steamed rice",
}

COACH_TEXT = (
    "Great balanced lunch! 💪 The 32g of protein supports recovery after "
    "yesterday's training. Consider adding a little more fiber tonight."
)

ANALYSIS_PAYLOAD: dict[str, object] = {
    "nutritionalAnalysis": NUTRITION_PAYLOAD,
    "healthAssessment": {
        "score": 84,
        "category": "excellent",
        "concerns": ["Sodium is slightly high"],
        "positives": ["High protein", "Whole grains"],
    },
    "personalizedRecommendations": ["Hydrate well this afternoon"],
    "mealTimingAdvice": "Lunch timing fits your training schedule",
    "portionFeedback": "Portion matches your energy needs",
    "improvementSuggestions": ["Add leafy greens"],
    "contextualInsights": ["Recovery is trending up"],
}


@dataclass
class FakeModelGateway(ModelGateway):
    """Gateway returning scripted responses in order and recording calls."""

    responses: list[str | Exception] = field(default_factory=list)
    calls: list[tuple[str | None, str]] = field(default_factory=list)

    async def invoke(
        self, system: str | None, prompt: str, *, timeout: float | None = None
    ) -> str:
        self.calls.append((system, prompt))
        if not self.responses:
            raise GatewayError("No scripted response")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        return None


@dataclass
class FakePhotoClient(PhotoClient):
    """Photo client returning static bytes or raising a scripted error."""

    content: bytes = PNG_BYTES
    error: Exception | None = None
    requested: list[str] = field(default_factory=list)

    async def fetch_bytes(self, photo_ref: str) -> bytes:
        self.requested.append(photo_ref)
        if self.error is not None:
            raise self.error
        return self.content

    async def close(self) -> None:
        return None


@dataclass
class InMemoryHealthRepository(HealthRepository):
    """In-memory health repository for tests."""

    recovery: list[RecoveryRow] = field(default_factory=list)
    sleep: list[SleepRow] = field(default_factory=list)
    workouts: list[WorkoutRow] = field(default_factory=list)
    nutrition: list[NutritionLogRow] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    nutrition_window: tuple[datetime, datetime] | None = None

    def list_recovery(self, user_id: str, limit: int) -> list[RecoveryRow]:
        self._record("recovery")
        return self.recovery[:limit]

    def list_sleep(self, user_id: str, limit: int) -> list[SleepRow]:
        self._record("sleep")
        return self.sleep[:limit]

    def list_workouts(self, user_id: str, limit: int) -> list[WorkoutRow]:
        self._record("workouts")
        return self.workouts[:limit]

    def list_nutrition_logs(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[NutritionLogRow]:
        self._record("nutrition")
        self.nutrition_window = (start, end)
        return self.nutrition

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failing:
            raise RuntimeError(f"{name} read failed")


def scripted_gateway(*responses: str | Exception) -> FakeModelGateway:
    return FakeModelGateway(responses=list(responses))


def happy_path_responses() -> list[str | Exception]:
    return [
        json.dumps(NUTRITION_PAYLOAD),
        COACH_TEXT,
        json.dumps(ANALYSIS_PAYLOAD),
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(llm_api_key="llm-key")


@pytest.fixture
def gateway() -> FakeModelGateway:
    return FakeModelGateway()


@pytest.fixture
def photo_client() -> FakePhotoClient:
    return FakePhotoClient()


@pytest.fixture
def health_repository() -> InMemoryHealthRepository:
    return InMemoryHealthRepository(
        recovery=[
            RecoveryRow(cycle_start=None, recovery_score=60, hrv_ms=45),
            RecoveryRow(cycle_start=None, recovery_score=70, hrv_ms=50),
            RecoveryRow(cycle_start=None, recovery_score=80, hrv_ms=55),
        ],
        sleep=[SleepRow(cycle_start=None, asleep_minutes=450, performance_pct=88)],
    )


@pytest.fixture
def container(
    settings: Settings,
    gateway: FakeModelGateway,
    photo_client: FakePhotoClient,
    health_repository: InMemoryHealthRepository,
) -> AppContainer:
    health_context_service = HealthContextService(health_repository)
    pipeline = FoodCoachPipeline(
        health_context_service=health_context_service,
        nutrition_estimator=NutritionEstimator(
            gateway=gateway, photo_client=photo_client
        ),
        coach_responder=CoachResponder(gateway),
        analysis_extractor=AnalysisExtractor(gateway),
        timeout_seconds=settings.pipeline_timeout_seconds,
    )
    chat_service = HealthCoachChatService(
        gateway=gateway, health_context_service=health_context_service
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        model_gateway=gateway,
        health_context_service=health_context_service,
        food_coach_pipeline=pipeline,
        chat_service=chat_service,
        close_resources=close_resources,
    )
