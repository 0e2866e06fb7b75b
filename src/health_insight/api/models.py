"""Pydantic request models for the HTTP API."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from health_insight.domain.nutrition import (
    FoodProduct,
    LoggedMealItem,
    MacroProfile,
    MealEntry,
    MealType,
)
from health_insight.services.health_samples import SleepSample


class MacroPayload(BaseModel):
    """Per-serving nutrients."""

    calories: float = Field(default=0.0, ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)
    fiber_g: float = Field(default=0.0, ge=0)
    sugar_g: float = Field(default=0.0, ge=0)
    sodium_mg: float = Field(default=0.0, ge=0)
    cholesterol_mg: float = Field(default=0.0, ge=0)
    saturated_fat_g: float = Field(default=0.0, ge=0)
    trans_fat_g: float = Field(default=0.0, ge=0)
    potassium_mg: float = Field(default=0.0, ge=0)
    vitamin_a: float | None = Field(default=None, ge=0)
    vitamin_c: float | None = Field(default=None, ge=0)
    calcium: float | None = Field(default=None, ge=0)
    iron: float | None = Field(default=None, ge=0)

    def to_domain(self) -> MacroProfile:
        return MacroProfile(**self.model_dump())


class FoodProductPayload(BaseModel):
    """A food product as submitted by a client."""

    id: UUID | None = None
    name: str = Field(min_length=1)
    brand: str | None = None
    barcode: str | None = None
    serving_size: float = Field(default=100.0, gt=0)
    serving_unit: str = "g"
    serving_description: str | None = None
    is_custom: bool = False
    image_url: str | None = None
    macros: MacroPayload = Field(default_factory=MacroPayload)

    def to_domain(self) -> FoodProduct:
        return FoodProduct(
            id=self.id or uuid4(),
            name=self.name.strip(),
            brand=self.brand,
            barcode=self.barcode,
            serving_size=self.serving_size,
            serving_unit=self.serving_unit,
            serving_description=self.serving_description,
            is_custom=self.is_custom,
            image_url=self.image_url,
            macros=self.macros.to_domain(),
        )


class CreateFoodRequest(FoodProductPayload):
    """Body of ``POST /foods``; ``user_id`` marks a custom food's owner."""

    user_id: UUID | None = None


class MealItemPayload(BaseModel):
    product: FoodProductPayload
    servings: float = Field(default=1.0, gt=0)
    serving_size_override: float | None = Field(default=None, gt=0)


class MealRequest(BaseModel):
    """Body of ``POST /users/{user_id}/meals``."""

    id: UUID | None = None
    meal_type: MealType
    logged_at: datetime
    items: list[MealItemPayload] = Field(default_factory=list)
    notes: str | None = None
    image_url: str | None = None

    def to_domain(self, user_id: UUID) -> MealEntry:
        return MealEntry(
            id=self.id or uuid4(),
            user_id=user_id,
            meal_type=self.meal_type,
            logged_at=self.logged_at,
            items=[
                LoggedMealItem(
                    product=item.product.to_domain(),
                    servings=item.servings,
                    serving_size_override=item.serving_size_override,
                )
                for item in self.items
            ],
            notes=self.notes,
            image_url=self.image_url,
        )


class SleepSamplePayload(BaseModel):
    """One platform sleep-analysis sample."""

    category: str
    start_time: datetime
    end_time: datetime


class SleepSamplesRequest(BaseModel):
    samples: list[SleepSamplePayload]

    def to_domain(self) -> list[SleepSample]:
        return [
            SleepSample(
                category=sample.category,
                start_time=sample.start_time,
                end_time=sample.end_time,
            )
            for sample in self.samples
        ]
