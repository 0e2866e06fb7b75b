"""JSON shapes returned by the HTTP API."""

from dataclasses import asdict

from health_insight.domain.activity import TDEEBreakdown
from health_insight.domain.insights import DailyInsightScores, WeeklyInsightSummary
from health_insight.domain.nutrition import (
    FoodProduct,
    LoggedMealItem,
    MacroProfile,
    MealEntry,
    NutritionDaySummary,
)
from health_insight.domain.sleep import DailySleepRecord
from health_insight.services.scoring import score_label


def macros_to_dict(macros: MacroProfile) -> dict[str, float | None]:
    return asdict(macros)


def product_to_dict(product: FoodProduct) -> dict[str, object]:
    return {
        "id": str(product.id),
        "name": product.name,
        "brand": product.brand,
        "barcode": product.barcode,
        "serving_size": product.serving_size,
        "serving_unit": product.serving_unit,
        "serving_description": product.serving_description,
        "is_custom": product.is_custom,
        "user_id": str(product.user_id) if product.user_id else None,
        "image_url": product.image_url,
        "macros": macros_to_dict(product.macros),
    }


def meal_item_to_dict(item: LoggedMealItem) -> dict[str, object]:
    return {
        "id": str(item.id),
        "servings": item.servings,
        "serving_size_override": item.serving_size_override,
        "product": product_to_dict(item.product),
        "total_macros": macros_to_dict(item.total_macros),
    }


def meal_to_dict(entry: MealEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "user_id": str(entry.user_id),
        "meal_type": entry.meal_type.value,
        "logged_at": entry.logged_at.isoformat(),
        "notes": entry.notes,
        "image_url": entry.image_url,
        "items": [meal_item_to_dict(item) for item in entry.items],
        "total_macros": macros_to_dict(entry.total_macros),
    }


def day_summary_to_dict(summary: NutritionDaySummary) -> dict[str, object]:
    """Serialize a day's meals with goal progress."""
    return {
        "day": summary.day.isoformat(),
        "meals": [meal_to_dict(meal) for meal in summary.meals],
        "total_macros": macros_to_dict(summary.total_macros),
        "calorie_goal": summary.calorie_goal,
        "calories_consumed": summary.calories_consumed,
        "calories_remaining": summary.calories_remaining,
        "progress": {
            "calories": summary.calorie_progress,
            "protein": summary.protein_progress,
            "carbs": summary.carb_progress,
            "fat": summary.fat_progress,
        },
    }


def sleep_to_dict(record: DailySleepRecord) -> dict[str, object]:
    return {
        "id": str(record.id),
        "start_time": record.start_time.isoformat(),
        "end_time": record.end_time.isoformat(),
        "source": record.source,
        "total_minutes": record.total_minutes,
        "light_minutes": record.light_minutes,
        "deep_minutes": record.deep_minutes,
        "rem_minutes": record.rem_minutes,
        "awake_minutes": record.awake_minutes,
        "efficiency": record.efficiency,
    }


def scores_to_dict(scores: DailyInsightScores) -> dict[str, object]:
    """Serialize scores, each with its label band."""
    values = {
        "recovery": scores.recovery_score,
        "stress": scores.stress_score,
        "strain": scores.strain_score,
        "readiness": scores.readiness_score,
        "sleep": scores.sleep_score,
        "nutrition": scores.nutrition_score,
        "hydration": scores.hydration_score,
        "overall_wellness": scores.overall_wellness_score,
    }
    return {
        "user_id": str(scores.user_id),
        "day": scores.day.isoformat(),
        "scores": {
            name: {"value": value, "label": score_label(value)}
            for name, value in values.items()
        },
    }


def weekly_summary_to_dict(summary: WeeklyInsightSummary) -> dict[str, object]:
    return {
        "avg_recovery": summary.avg_recovery,
        "avg_strain": summary.avg_strain,
        "days": [scores_to_dict(scores) for scores in summary.scores],
    }


def tdee_to_dict(breakdown: TDEEBreakdown) -> dict[str, float]:
    return {
        "bmr": breakdown.bmr,
        "neat": breakdown.neat,
        "tef": breakdown.tef,
        "eat": breakdown.eat,
        "total": breakdown.total,
    }
