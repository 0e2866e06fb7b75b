"""Insight score domain models."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class DailyInsightScores:
    """Derived 0-100 scores for one user and calendar day."""

    user_id: UUID
    day: date
    recovery_score: int
    stress_score: int
    strain_score: int
    readiness_score: int
    sleep_score: int
    nutrition_score: int
    hydration_score: int

    @property
    def overall_wellness_score(self) -> int:
        return (
            self.recovery_score
            + self.sleep_score
            + self.nutrition_score
            + self.hydration_score
        ) // 4


@dataclass(frozen=True)
class WeeklyInsightSummary:
    """Stored scores for a recent window with simple averages."""

    scores: list[DailyInsightScores]
    avg_recovery: int
    avg_strain: int
