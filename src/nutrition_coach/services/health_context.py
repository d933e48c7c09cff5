"""Aggregation of recent health history into a coaching context."""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from nutrition_coach.domain.health import (
    HealthContext,
    NutritionLogRow,
    RecoveryRow,
    SleepRow,
    WorkoutRow,
)

_logger = logging.getLogger(__name__)

DEMO_MODE_SUMMARY = "No health data available - running in demo mode"
UNAVAILABLE_SUMMARY = "Unable to fetch health context"
EMPTY_SUMMARY = "No recent health data available."

RECOVERY_LIMIT = 3
SLEEP_LIMIT = 3
WORKOUT_LIMIT = 5
NUTRITION_WINDOW = timedelta(days=7)
WORKOUT_SUMMARY_LIMIT = 3
NUTRITION_SUMMARY_LIMIT = 5


class HealthRepository(Protocol):
    """Read-only access to wearable and nutrition history."""

    def list_recovery(self, user_id: str, limit: int) -> list[RecoveryRow]:
        """Return the latest recovery cycles, most recent first."""

    def list_sleep(self, user_id: str, limit: int) -> list[SleepRow]:
        """Return the latest sleep sessions, most recent first."""

    def list_workouts(self, user_id: str, limit: int) -> list[WorkoutRow]:
        """Return the latest workouts, most recent first."""

    def list_nutrition_logs(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[NutritionLogRow]:
        """Return nutrition logs in the window, most recent first."""


@dataclass
class HealthContextService:
    """Builds a HealthContext; demo mode when no repository is configured."""

    repository: HealthRepository | None

    async def fetch_context(self, user_id: str | None) -> HealthContext:
        """Fetch recent history and summarize it; read failures never raise."""
        if self.repository is None:
            return HealthContext(has_data=False, summary=DEMO_MODE_SUMMARY)
        if not user_id:
            return HealthContext(has_data=False, summary=EMPTY_SUMMARY)

        end = datetime.now(tz=UTC)
        start = end - NUTRITION_WINDOW
        results = await asyncio.gather(
            asyncio.to_thread(self.repository.list_recovery, user_id, RECOVERY_LIMIT),
            asyncio.to_thread(self.repository.list_sleep, user_id, SLEEP_LIMIT),
            asyncio.to_thread(self.repository.list_workouts, user_id, WORKOUT_LIMIT),
            asyncio.to_thread(
                self.repository.list_nutrition_logs, user_id, start, end
            ),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException) and not isinstance(
                result, Exception
            ):
                raise result
        failures = [result for result in results if isinstance(result, Exception)]
        if failures:
            # One failed read discards the others.
            _logger.error(
                "Error fetching user health context (%s of 4 reads failed)",
                len(failures),
                exc_info=failures[0],
            )
            return HealthContext(has_data=False, summary=UNAVAILABLE_SUMMARY)

        recovery, sleep, workouts, nutrition = results
        return HealthContext(
            has_data=True,
            summary=format_health_summary(recovery, sleep, workouts, nutrition),
            recovery=recovery,
            sleep=sleep,
            workouts=workouts,
            recent_nutrition=nutrition,
        )


def format_health_summary(
    recovery: list[RecoveryRow],
    sleep: list[SleepRow],
    workouts: list[WorkoutRow],
    nutrition: list[NutritionLogRow],
) -> str:
    """Condense health history into a short natural-language summary."""
    fragments: list[str] = []

    if recovery:
        latest = recovery[0]
        avg = sum(row.recovery_score or 0 for row in recovery) / len(recovery)
        fragments.append(
            f"Recent Recovery: Current {_number(latest.recovery_score)}%, "
            f"avg {avg:.1f}%. HRV: {_number(latest.hrv_ms)}ms."
        )

    if sleep:
        latest_sleep = sleep[0]
        latest_hours = (latest_sleep.asleep_minutes or 0) / 60
        avg_hours = sum((row.asleep_minutes or 0) / 60 for row in sleep) / len(sleep)
        fragments.append(
            f"Recent Sleep: Latest {latest_hours:.1f}h, avg {avg_hours:.1f}h. "
            f"Quality: {_number(latest_sleep.performance_pct)}%."
        )

    if workouts:
        window = workouts[:WORKOUT_SUMMARY_LIMIT]
        avg_strain = sum(row.strain or 0 for row in window) / len(window)
        fragments.append(
            f"Recent Workouts: {len(window)} sessions, avg strain {avg_strain:.1f}."
        )

    if nutrition:
        meals = nutrition[:NUTRITION_SUMMARY_LIMIT]
        avg_calories = sum(row.calories or 0 for row in meals) / len(meals)
        fragments.append(
            f"Recent Nutrition: Avg {math.floor(avg_calories + 0.5)} cal/meal."
        )

    return " ".join(fragments) or EMPTY_SUMMARY


def _number(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{value:g}"
