"""Food-photo coaching pipeline orchestration."""

import asyncio
import logging
from dataclasses import dataclass

from nutrition_coach.domain.analysis import StructuredAnalysis
from nutrition_coach.domain.meals import MealMetadata
from nutrition_coach.services.analysis import AnalysisExtractor
from nutrition_coach.services.coach import CoachResponder
from nutrition_coach.services.health_context import HealthContextService
from nutrition_coach.services.nutrition import NutritionEstimator

_logger = logging.getLogger(__name__)


class MissingPhotoError(ValueError):
    """Raised when a pipeline run is requested without a photo."""


@dataclass(frozen=True)
class FoodCoachResult:
    """Outcome of a successful pipeline run."""

    analysis: StructuredAnalysis
    coach_response: str


@dataclass
class FoodCoachPipeline:
    """Runs context, estimate, coach and extract stages in order."""

    health_context_service: HealthContextService
    nutrition_estimator: NutritionEstimator
    coach_responder: CoachResponder
    analysis_extractor: AnalysisExtractor
    timeout_seconds: float | None = None

    async def run(
        self,
        photo_ref: str | None,
        metadata: MealMetadata,
        user_id: str | None,
        *,
        timeout_seconds: float | None = None,
    ) -> FoodCoachResult:
        """Analyze a meal photo end to end.

        Raises MissingPhotoError before any stage runs when no photo is
        given, and TimeoutError when the deadline expires; the in-flight
        stage is cancelled in that case. Coaching failures propagate.
        """
        if not photo_ref:
            raise MissingPhotoError("Photo is required")
        deadline = (
            timeout_seconds if timeout_seconds is not None else self.timeout_seconds
        )
        async with asyncio.timeout(deadline):
            context = await self.health_context_service.fetch_context(user_id)
            _logger.info("Health context ready: has_data=%s", context.has_data)
            estimate = await self.nutrition_estimator.estimate(photo_ref, metadata)
            coach_response = await self.coach_responder.respond(
                metadata, estimate, context
            )
            analysis = await self.analysis_extractor.extract(
                estimate, coach_response, metadata
            )
        return FoodCoachResult(analysis=analysis, coach_response=coach_response)
