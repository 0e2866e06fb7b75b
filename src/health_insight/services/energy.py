"""Energy expenditure estimates."""

from datetime import date

from health_insight.domain.activity import (
    BiologicalSex,
    DailyActivity,
    TDEEBreakdown,
    UserProfile,
)

KCAL_PER_STEP = 0.04
THERMIC_EFFECT_OF_FOOD = 0.10


def basal_metabolic_rate(profile: UserProfile, today: date) -> float:
    """Mifflin-St Jeor BMR; 0 when the date of birth is unknown."""
    age = profile.age_on(today)
    if age is None:
        return 0.0
    base = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * age
    if profile.biological_sex == BiologicalSex.MALE:
        return base + 5
    return base - 161


def calculate_tdee(
    profile: UserProfile,
    activity: DailyActivity | None,
    calories_consumed: float,
    today: date,
) -> TDEEBreakdown:
    """Split the day's expenditure into BMR, NEAT, TEF and EAT."""
    return TDEEBreakdown(
        bmr=basal_metabolic_rate(profile, today),
        neat=activity.steps * KCAL_PER_STEP if activity else 0.0,
        tef=calories_consumed * THERMIC_EFFECT_OF_FOOD,
        eat=activity.active_calories if activity else 0.0,
    )
