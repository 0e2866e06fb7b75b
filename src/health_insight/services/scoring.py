"""Daily wellness scores.

Every function here is pure and total: missing inputs fall back to fixed
neutral defaults instead of raising.
"""

import math
from datetime import date
from uuid import UUID

from health_insight.domain.activity import DailyActivity
from health_insight.domain.insights import DailyInsightScores
from health_insight.domain.nutrition import NutritionDaySummary
from health_insight.domain.sleep import DailySleepRecord

NO_DATA_SCORE = 50
NO_ACTIVITY_SCORE = 30
STEP_TARGET = 10000
SLEEP_HOURS_TARGET = 8.0
DEEP_MINUTES_TARGET = 90.0
REM_MINUTES_TARGET = 90.0

_LABEL_BANDS = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
)


def score_label(score: int) -> str:
    """Return the label band for a 0-100 score."""
    if score <= 100:
        for floor, label in _LABEL_BANDS:
            if score >= floor:
                return label
    return "Poor"


def sleep_score(record: DailySleepRecord) -> int:
    """Score one night of sleep out of 100.

    Duration is worth 40 points (8 h for full marks), efficiency 30, deep
    sleep 20 (90 min) and REM 10 (90 min). Each term is truncated before
    summing. A score supplied by the source is returned as-is.
    """
    if record.sleep_score is not None:
        return record.sleep_score
    duration = int(min(1.0, record.total_hours / SLEEP_HOURS_TARGET) * 40)
    efficiency = int(record.efficiency * 30)
    deep = int(min(1.0, record.deep_minutes / DEEP_MINUTES_TARGET) * 20)
    rem = int(min(1.0, record.rem_minutes / REM_MINUTES_TARGET) * 10)
    return duration + efficiency + deep + rem


def activity_score(activity: DailyActivity | None) -> int:
    """Steps against a 10k target, or a pessimistic default without data."""
    if activity is None:
        return NO_ACTIVITY_SCORE
    return _round(100 * min(1.0, activity.steps / STEP_TARGET))


def nutrition_score(nutrition: NutritionDaySummary | None) -> int:
    """Calories consumed as a percentage of the goal; may exceed 100."""
    if nutrition is None:
        return NO_DATA_SCORE
    goal = max(1.0, nutrition.calorie_goal)
    return max(0, _round(100 * nutrition.calories_consumed / goal))


def hydration_score(hydration_ml: float, hydration_goal_ml: float) -> int:
    return _round(100 * min(1.0, max(0.0, hydration_ml) / max(1.0, hydration_goal_ml)))


def compute_daily_insight_scores(  # noqa: PLR0913
    user_id: UUID,
    day: date,
    sleep: DailySleepRecord | None,
    nutrition: NutritionDaySummary | None,
    activity: DailyActivity | None,
    hydration_ml: float,
    hydration_goal_ml: float,
) -> DailyInsightScores:
    """Compute the day's insight scores from its aggregates.

    Recovery rewards good sleep and penalises a heavy activity load;
    readiness currently mirrors recovery.
    """
    sleep_value = sleep_score(sleep) if sleep is not None else NO_DATA_SCORE
    activity_value = activity_score(activity)
    recovery = (sleep_value + 100 - activity_value) // 2
    stress = max(0, 100 - activity_value)

    return DailyInsightScores(
        user_id=user_id,
        day=day,
        recovery_score=_clamp(recovery),
        stress_score=_clamp(stress),
        strain_score=_clamp(activity_value),
        readiness_score=_clamp(recovery),
        sleep_score=_clamp(sleep_value),
        nutrition_score=nutrition_score(nutrition),
        hydration_score=_clamp(hydration_score(hydration_ml, hydration_goal_ml)),
    )


def _round(value: float) -> int:
    """Round half away from zero for non-negative values."""
    return int(math.floor(value + 0.5))


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return min(high, max(low, value))
