"""Supabase repository for meal entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from health_insight.adapters.supabase_catalog_repository import parse_food_item
from health_insight.domain.nutrition import LoggedMealItem, MealEntry, MealType
from health_insight.services.meals import MealRepository

_MEAL_SELECT = (
    "id, user_id, meal_type, logged_at, notes, image_url, "
    "items:meal_entry_items(id, servings, serving_size, food_item:food_items(*))"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals and their items."""

    client: Client

    def upsert_meal(self, entry: MealEntry) -> None:
        """Insert or update the meal row by id."""
        self.client.table("meal_entries").upsert(
            {
                "id": str(entry.id),
                "user_id": str(entry.user_id),
                "meal_type": entry.meal_type.value,
                "logged_at": entry.logged_at.isoformat(),
                "notes": entry.notes,
                "image_url": entry.image_url,
            }
        ).execute()

    def delete_meal_items(self, meal_id: UUID) -> None:
        self.client.table("meal_entry_items").delete().eq(
            "meal_entry_id", str(meal_id)
        ).execute()

    def insert_meal_items(self, meal_id: UUID, items: list[LoggedMealItem]) -> None:
        """Insert item rows pointing at catalog products."""
        payload = [
            {
                "id": str(item.id),
                "meal_entry_id": str(meal_id),
                "food_item_id": str(item.product.id),
                "servings": item.servings,
                "serving_size": item.serving_size_override,
            }
            for item in items
        ]
        if payload:
            self.client.table("meal_entry_items").insert(payload).execute()

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[MealEntry]:
        """Return meals in ``[start, end)`` ordered by log time."""
        response = (
            self.client.table("meal_entries")
            .select(_MEAL_SELECT)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal; item rows cascade."""
        self.client.table("meal_entries").delete().eq("id", str(meal_id)).execute()


def _parse_meal(row: dict[str, object]) -> MealEntry:
    items = []
    for item_row in row.get("items") or []:
        food_row = item_row.get("food_item")
        if not food_row:
            continue
        serving_size = item_row.get("serving_size")
        items.append(
            LoggedMealItem(
                id=UUID(str(item_row["id"])),
                product=parse_food_item(food_row),
                servings=float(item_row.get("servings") or 1.0),
                serving_size_override=(
                    float(serving_size) if serving_size is not None else None
                ),
            )
        )
    return MealEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_type=MealType(str(row["meal_type"])),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        items=items,
        notes=row.get("notes"),
        image_url=row.get("image_url"),
    )
