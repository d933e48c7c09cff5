"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nutrition_coach.api.models import FoodAnalysisRequest, HealthCoachRequest
from nutrition_coach.app_logging import configure_logging
from nutrition_coach.containers import AppContainer
from nutrition_coach.services.chat import ChatTurn
from nutrition_coach.services.pipeline import MissingPhotoError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/analyze-food-with-coach")
    async def analyze_food_with_coach(
        payload: FoodAnalysisRequest, request: Request
    ) -> JSONResponse:
        """Run the food-photo coaching pipeline."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.food_coach_pipeline.run(
                payload.photo, payload.metadata, payload.user_id
            )
        except MissingPhotoError:
            return JSONResponse({"error": "Photo is required"}, status_code=400)
        except Exception:
            logger.exception("Error in food analysis with coach")
            return JSONResponse(
                {"error": "Failed to analyze food with health coach"},
                status_code=500,
            )
        return JSONResponse(
            {
                "analysis": result.analysis.model_dump(mode="json", by_alias=True),
                "coachResponse": result.coach_response,
                "success": True,
            }
        )

    @app.post("/health-coach")
    async def health_coach(
        payload: HealthCoachRequest, request: Request
    ) -> dict[str, object]:
        """Answer a free-text question about the user's health data."""
        state_container: AppContainer = request.app.state.container
        reply = await state_container.chat_service.reply(
            payload.message,
            payload.user_id,
            [
                ChatTurn(content=turn.content, is_user=turn.is_user)
                for turn in payload.conversation_history
            ],
        )
        body: dict[str, object] = {
            "response": reply.response,
            "category": reply.category,
            "priority": reply.priority,
        }
        if reply.context_data is not None:
            body["contextData"] = reply.context_data
        return body

    return app
