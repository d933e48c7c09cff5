"""Supabase repository for wearable and nutrition history."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from nutrition_coach.domain.health import (
    NutritionLogRow,
    RecoveryRow,
    SleepRow,
    WorkoutRow,
)
from nutrition_coach.services.health_context import HealthRepository

_CYCLE_START = "Cycle start time"
_WORKOUT_START = "Workout start time"


@dataclass
class SupabaseHealthRepository(HealthRepository):
    """Supabase implementation for health history queries."""

    client: Client

    def list_recovery(self, user_id: str, limit: int) -> list[RecoveryRow]:
        """Return the latest physiological cycles."""
        response = (
            self.client.table("physiological_cycles")
            .select("*")
            .eq("user_id", user_id)
            .order(_CYCLE_START, desc=True)
            .limit(limit)
            .execute()
        )
        return [
            RecoveryRow(
                cycle_start=_parse_datetime(row.get(_CYCLE_START)),
                recovery_score=_parse_float(row.get("Recovery score %")),
                hrv_ms=_parse_float(row.get("Heart rate variability (ms)")),
            )
            for row in response.data or []
        ]

    def list_sleep(self, user_id: str, limit: int) -> list[SleepRow]:
        """Return the latest sleep sessions."""
        response = (
            self.client.table("sleep")
            .select("*")
            .eq("user_id", user_id)
            .order(_CYCLE_START, desc=True)
            .limit(limit)
            .execute()
        )
        return [
            SleepRow(
                cycle_start=_parse_datetime(row.get(_CYCLE_START)),
                asleep_minutes=_parse_float(row.get("Asleep duration (min)")),
                performance_pct=_parse_float(row.get("Sleep performance %")),
            )
            for row in response.data or []
        ]

    def list_workouts(self, user_id: str, limit: int) -> list[WorkoutRow]:
        """Return the latest workouts."""
        response = (
            self.client.table("workouts")
            .select("*")
            .eq("user_id", user_id)
            .order(_WORKOUT_START, desc=True)
            .limit(limit)
            .execute()
        )
        return [
            WorkoutRow(
                started_at=_parse_datetime(row.get(_WORKOUT_START)),
                strain=_parse_float(row.get("Activity Strain")),
            )
            for row in response.data or []
        ]

    def list_nutrition_logs(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[NutritionLogRow]:
        """Return food logs recorded within the window."""
        response = (
            self.client.table("food_logs")
            .select("*")
            .eq("user_id", user_id)
            .gte("logged_at", start.isoformat())
            .lte("logged_at", end.isoformat())
            .order("logged_at", desc=True)
            .execute()
        )
        return [
            NutritionLogRow(
                logged_at=_parse_datetime(row.get("logged_at")),
                calories=_parse_float(row.get("calories")),
            )
            for row in response.data or []
        ]


def _parse_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _parse_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None
