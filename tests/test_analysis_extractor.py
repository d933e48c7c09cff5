"""Tests for the structured analysis extractor."""

import asyncio
import json

import httpx
import pytest

from nutrition_coach.adapters.httpx_chat_gateway import HttpxChatGateway
from nutrition_coach.domain.analysis import HealthCategory
from nutrition_coach.domain.meals import MealMetadata, MealType
from nutrition_coach.domain.nutrition import NutritionEstimate
from nutrition_coach.services.analysis import (
    ANALYSIS_SYSTEM_PROMPT,
    AnalysisExtractor,
    build_analysis_prompt,
)
from nutrition_coach.services.gateway import GatewayError
from tests.conftest import (
    ANALYSIS_PAYLOAD,
    COACH_TEXT,
    NUTRITION_PAYLOAD,
    scripted_gateway,
)

METADATA = MealMetadata(meal_type=MealType.BREAKFAST, portion_size="small")
ESTIMATE = NutritionEstimate.model_validate(NUTRITION_PAYLOAD)


def test_extract_parses_model_json() -> None:
    gateway = scripted_gateway(json.dumps(ANALYSIS_PAYLOAD))
    extractor = AnalysisExtractor(gateway)

    analysis = asyncio.run(extractor.extract(ESTIMATE, COACH_TEXT, METADATA))

    assert analysis.health_assessment.score == 84
    assert analysis.health_assessment.category is HealthCategory.EXCELLENT
    assert analysis.improvement_suggestions == ["Add leafy greens"]
    assert gateway.calls[0][0] == ANALYSIS_SYSTEM_PROMPT


@pytest.mark.parametrize(
    "response",
    [
        "Here is the analysis you asked for.",
        json.dumps({**ANALYSIS_PAYLOAD, "healthAssessment": {"score": 150}}),
        json.dumps({"mealTimingAdvice": "Fine"}),
        GatewayError("HTTP 429", status_code=429),
        RuntimeError("unexpected response shape"),
    ],
)
def test_extract_falls_back_to_neutral_analysis(response: str | Exception) -> None:
    extractor = AnalysisExtractor(scripted_gateway(response))

    analysis = asyncio.run(extractor.extract(ESTIMATE, COACH_TEXT, METADATA))

    assert analysis.nutritional_analysis == ESTIMATE
    assert analysis.health_assessment.score == 70
    assert analysis.health_assessment.category is HealthCategory.GOOD
    assert len(analysis.health_assessment.concerns) == 1
    assert len(analysis.health_assessment.positives) == 1
    assert len(analysis.personalized_recommendations) == 1
    assert len(analysis.improvement_suggestions) == 1
    assert len(analysis.contextual_insights) == 1
    assert analysis.meal_timing_advice
    assert analysis.portion_feedback


def test_extract_falls_back_when_endpoint_returns_a_json_list() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    gateway = HttpxChatGateway(
        api_key="key",
        base_url="https://llm.test/api/v1",
        model="gpt-4o",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    analysis = asyncio.run(
        AnalysisExtractor(gateway).extract(ESTIMATE, COACH_TEXT, METADATA)
    )

    assert analysis.nutritional_analysis == ESTIMATE
    assert analysis.health_assessment.score == 70
    assert analysis.health_assessment.category is HealthCategory.GOOD


def test_extract_accepts_fractional_score() -> None:
    payload = {
        **ANALYSIS_PAYLOAD,
        "healthAssessment": {**ANALYSIS_PAYLOAD["healthAssessment"], "score": 82.5},
    }
    extractor = AnalysisExtractor(scripted_gateway(json.dumps(payload)))

    analysis = asyncio.run(extractor.extract(ESTIMATE, COACH_TEXT, METADATA))

    assert analysis.health_assessment.score == 82.5
    assert analysis.health_assessment.category is HealthCategory.EXCELLENT


def test_analysis_prompt_serializes_estimate_and_metadata() -> None:
    prompt = build_analysis_prompt(ESTIMATE, COACH_TEXT, METADATA)

    assert prompt.startswith(f"Coach Response:\n{COACH_TEXT}")
    assert '"preparationNotes":"Grilled chicken over steamed rice"' in prompt
    assert '"mealType":"breakfast"' in prompt
    assert '"portionSize":"small"' in prompt


def test_analysis_system_prompt_names_every_section() -> None:
    for key in ANALYSIS_PAYLOAD:
        assert f'"{key}"' in ANALYSIS_SYSTEM_PROMPT
