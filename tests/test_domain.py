"""Tests for domain model invariants."""

from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

import pytest

from health_insight.domain.nutrition import (
    LoggedMealItem,
    MacroProfile,
    MealEntry,
    MealType,
    NutritionDaySummary,
    normalize_barcode,
    sum_macros,
)
from health_insight.domain.sleep import DailySleepRecord
from tests.conftest import make_product


def test_macro_addition_handles_optional_daily_values() -> None:
    left = MacroProfile(calories=100.0, vitamin_c=10.0)
    right = MacroProfile(calories=50.0, protein_g=4.0)

    total = left + right

    assert total.calories == 150.0
    assert total.protein_g == 4.0
    assert total.vitamin_c == 10.0
    assert total.iron is None
    assert left + right == right + left


def test_macro_scaling() -> None:
    profile = MacroProfile(calories=120.0, fat_g=3.0, calcium=8.0)

    assert profile.scaled(1.0) == profile
    assert profile.scaled(2.5).calories == pytest.approx(300.0)
    assert profile.scaled(2.5).calcium == pytest.approx(20.0)
    assert profile.scaled(2.5).iron is None


def test_sum_macros_of_nothing_is_zero() -> None:
    assert sum_macros([]) == MacroProfile.zero()


@pytest.mark.parametrize(
    ("raw", "expected"), [(None, None), ("", None), ("  ", None), (" 42 ", "42")]
)
def test_normalize_barcode(raw: str | None, expected: str | None) -> None:
    assert normalize_barcode(raw) == expected


@pytest.mark.parametrize("servings", [0, -1.5])
def test_logged_item_rejects_non_positive_servings(servings: float) -> None:
    with pytest.raises(ValueError):
        LoggedMealItem(product=make_product(), servings=servings)


def test_sleep_record_rejects_inverted_span() -> None:
    start = datetime(2024, 5, 1, 23, tzinfo=UTC)

    with pytest.raises(ValueError):
        DailySleepRecord(start_time=start, end_time=start)
    with pytest.raises(ValueError):
        DailySleepRecord(start_time=start, end_time=start - timedelta(minutes=1))


def test_day_summary_progress_is_clamped() -> None:
    meal = MealEntry(
        user_id=uuid4(),
        meal_type=MealType.DINNER,
        items=[LoggedMealItem(product=make_product(calories=900.0), servings=3)],
        logged_at=datetime(2024, 5, 1, 19, tzinfo=UTC),
    )
    summary = NutritionDaySummary(
        day=date(2024, 5, 1),
        meals=[meal],
        calorie_goal=2000.0,
        protein_goal=150.0,
        carb_goal=0.0,
        fat_goal=65.0,
    )

    assert summary.calories_consumed == pytest.approx(2700.0)
    assert summary.calories_remaining == pytest.approx(-700.0)
    assert summary.calorie_progress == 1.0
    assert summary.protein_progress == pytest.approx(15.0 / 150.0)
    assert summary.carb_progress == 0.0
