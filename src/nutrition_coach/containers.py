"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_coach.adapters.httpx_chat_gateway import HttpxChatGateway
from nutrition_coach.adapters.httpx_photo_client import HttpxPhotoClient
from nutrition_coach.adapters.openai_chat_gateway import OpenAIChatGateway
from nutrition_coach.adapters.supabase_health_repository import (
    SupabaseHealthRepository,
)
from nutrition_coach.config import Settings
from nutrition_coach.services.analysis import AnalysisExtractor
from nutrition_coach.services.chat import HealthCoachChatService
from nutrition_coach.services.coach import CoachResponder
from nutrition_coach.services.gateway import ModelGateway
from nutrition_coach.services.health_context import HealthContextService
from nutrition_coach.services.nutrition import NutritionEstimator
from nutrition_coach.services.pipeline import FoodCoachPipeline


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    model_gateway: ModelGateway
    health_context_service: HealthContextService
    food_coach_pipeline: FoodCoachPipeline
    chat_service: HealthCoachChatService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    health_repository = None
    if resolved_settings.supabase_configured:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        health_repository = SupabaseHealthRepository(supabase_client)
    health_context_service = HealthContextService(health_repository)

    gateway_factory = (
        OpenAIChatGateway
        if resolved_settings.llm_backend == "openai"
        else HttpxChatGateway
    )
    model_gateway = gateway_factory.create(
        api_key=resolved_settings.llm_api_key,
        base_url=resolved_settings.llm_base_url,
        model=resolved_settings.llm_model,
        timeout_seconds=resolved_settings.llm_timeout_seconds,
    )
    photo_client = HttpxPhotoClient.create(
        timeout_seconds=resolved_settings.photo_fetch_timeout_seconds
    )
    food_coach_pipeline = FoodCoachPipeline(
        health_context_service=health_context_service,
        nutrition_estimator=NutritionEstimator(
            gateway=model_gateway, photo_client=photo_client
        ),
        coach_responder=CoachResponder(model_gateway),
        analysis_extractor=AnalysisExtractor(model_gateway),
        timeout_seconds=resolved_settings.pipeline_timeout_seconds,
    )
    chat_service = HealthCoachChatService(
        gateway=model_gateway,
        health_context_service=health_context_service,
    )

    async def close_resources() -> None:
        await model_gateway.close()
        await photo_client.close()

    return AppContainer(
        settings=resolved_settings,
        model_gateway=model_gateway,
        health_context_service=health_context_service,
        food_coach_pipeline=food_coach_pipeline,
        chat_service=chat_service,
        close_resources=close_resources,
    )
