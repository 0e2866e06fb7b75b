"""Supabase implementation of the shared food catalog."""

from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from health_insight.domain.nutrition import FoodProduct, MacroProfile
from health_insight.services.catalog import CatalogConflictError, CatalogRepository

UNIQUE_VIOLATION = "23505"

# Domain field -> food_items column.
_MACRO_COLUMNS = {
    "calories": "calories",
    "protein_g": "protein",
    "carbs_g": "carbs",
    "fat_g": "fat",
    "fiber_g": "fiber",
    "sugar_g": "sugar",
    "sodium_mg": "sodium",
    "cholesterol_mg": "cholesterol",
    "saturated_fat_g": "saturated_fat",
    "trans_fat_g": "trans_fat",
    "potassium_mg": "potassium",
}
_OPTIONAL_COLUMNS = ("vitamin_a", "vitamin_c", "calcium", "iron")


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase-backed ``food_items`` table."""

    client: Client

    def get_by_barcode(self, barcode: str) -> FoodProduct | None:
        response = (
            self.client.table("food_items")
            .select("*")
            .eq("barcode", barcode)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_food_item(response.data[0])

    def get_by_id(self, product_id: UUID) -> FoodProduct | None:
        response = (
            self.client.table("food_items")
            .select("*")
            .eq("id", str(product_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_food_item(response.data[0])

    def search(self, query: str, limit: int) -> list[FoodProduct]:
        """Case-insensitive substring match on the product name."""
        response = (
            self.client.table("food_items")
            .select("*")
            .ilike("name", f"%{query}%")
            .order("name", desc=False)
            .limit(limit)
            .execute()
        )
        return [parse_food_item(row) for row in response.data or []]

    def insert(self, product: FoodProduct) -> FoodProduct:
        """Insert a product row, mapping a barcode collision to a conflict."""
        try:
            response = (
                self.client.table("food_items")
                .insert(food_item_payload(product))
                .execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise CatalogConflictError(
                    f"Barcode {product.barcode} already exists"
                ) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create food item")
        return parse_food_item(response.data[0])


def food_item_payload(product: FoodProduct) -> dict[str, object]:
    """Serialize a product into a ``food_items`` row."""
    payload: dict[str, object] = {
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
    }
    for attribute, column in _MACRO_COLUMNS.items():
        payload[column] = getattr(product.macros, attribute)
    for column in _OPTIONAL_COLUMNS:
        payload[column] = getattr(product.macros, column)
    return payload


def parse_food_item(row: dict[str, object]) -> FoodProduct:
    """Parse a ``food_items`` row into a domain model."""
    macros: dict[str, float | None] = {
        attribute: float(row.get(column) or 0.0)
        for attribute, column in _MACRO_COLUMNS.items()
    }
    for column in _OPTIONAL_COLUMNS:
        value = row.get(column)
        macros[column] = float(value) if value is not None else None
    user_id = row.get("user_id")
    return FoodProduct(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        brand=row.get("brand"),
        barcode=row.get("barcode"),
        serving_size=float(row.get("serving_size") or 100.0),
        serving_unit=str(row.get("serving_unit") or "g"),
        serving_description=row.get("serving_description"),
        is_custom=bool(row.get("is_custom", False)),
        user_id=UUID(str(user_id)) if user_id else None,
        image_url=row.get("image_url"),
        macros=MacroProfile(**macros),
    )
