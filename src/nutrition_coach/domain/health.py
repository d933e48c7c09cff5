"""Domain models for wearable and nutrition history."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RecoveryRow:
    """Single physiological cycle with its recovery score."""

    cycle_start: datetime | None
    recovery_score: float | None
    hrv_ms: float | None


@dataclass(frozen=True)
class SleepRow:
    """Single sleep session."""

    cycle_start: datetime | None
    asleep_minutes: float | None
    performance_pct: float | None


@dataclass(frozen=True)
class WorkoutRow:
    """Single recorded workout."""

    started_at: datetime | None
    strain: float | None


@dataclass(frozen=True)
class NutritionLogRow:
    """Logged meal with its calorie total."""

    logged_at: datetime | None
    calories: float | None


@dataclass(frozen=True)
class HealthContext:
    """Recent health history condensed for coaching prompts."""

    has_data: bool
    summary: str
    recovery: list[RecoveryRow] = field(default_factory=list)
    sleep: list[SleepRow] = field(default_factory=list)
    workouts: list[WorkoutRow] = field(default_factory=list)
    recent_nutrition: list[NutritionLogRow] = field(default_factory=list)
