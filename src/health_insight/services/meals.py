"""Meal logging service."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from health_insight.domain.activity import UserProfile
from health_insight.domain.nutrition import (
    LoggedMealItem,
    MealEntry,
    NutritionDaySummary,
)
from health_insight.services.catalog import CatalogService


class MealRepository(Protocol):
    """Persistence interface for meals and their items."""

    def upsert_meal(self, entry: MealEntry) -> None:
        """Insert or update the meal row (items excluded)."""

    def delete_meal_items(self, meal_id: UUID) -> None:
        """Delete every item row of a meal."""

    def insert_meal_items(self, meal_id: UUID, items: list[LoggedMealItem]) -> None:
        """Insert item rows referencing catalog products."""

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealEntry]:
        """Return meals logged in ``[start, end)`` with their items."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal and its items."""


@dataclass
class MealService:
    """Persists meals against the shared catalog."""

    repository: MealRepository
    catalog_service: CatalogService

    def save_meal(self, entry: MealEntry) -> MealEntry:
        """Store a meal, replacing all of its items.

        Each item's product is resolved to its catalog row before anything is
        written, so a failed lookup leaves the stored meal untouched.
        """
        items = [
            replace(
                item,
                product=self.catalog_service.resolve_for_meal(
                    item.product, entry.user_id
                ),
            )
            for item in entry.items
        ]
        self.repository.upsert_meal(entry)
        self.repository.delete_meal_items(entry.id)
        if items:
            self.repository.insert_meal_items(entry.id, items)
        return replace(entry, items=items)

    def delete_meal(self, meal_id: UUID) -> None:
        self.repository.delete_meal(meal_id)

    def list_day(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> list[MealEntry]:
        """Return the meals logged on a local calendar day."""
        tz = ZoneInfo(timezone_name)
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = start + timedelta(days=1)
        return self.repository.list_meals(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )

    def day_summary(
        self, profile: UserProfile, day: date, timezone_name: str = "UTC"
    ) -> NutritionDaySummary:
        """Summarise a day's meals against the profile's goals."""
        return NutritionDaySummary(
            day=day,
            meals=self.list_day(profile.id, day, timezone_name),
            calorie_goal=profile.daily_calorie_goal,
            protein_goal=profile.daily_protein_goal,
            carb_goal=profile.daily_carb_goal,
            fat_goal=profile.daily_fat_goal,
        )
