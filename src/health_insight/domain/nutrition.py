"""Nutrition domain models."""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID, uuid4

_OPTIONAL_DV_FIELDS = ("vitamin_a", "vitamin_c", "calcium", "iron")


@dataclass(frozen=True)
class MacroProfile:
    """Nutrient quantities for one serving.

    Masses are grams except sodium, cholesterol and potassium, which are
    milligrams. The vitamin and mineral fields are percent of daily value and
    stay ``None`` when the source does not report them.
    """

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    sugar_g: float = 0.0
    sodium_mg: float = 0.0
    cholesterol_mg: float = 0.0
    saturated_fat_g: float = 0.0
    trans_fat_g: float = 0.0
    potassium_mg: float = 0.0
    vitamin_a: float | None = None
    vitamin_c: float | None = None
    calcium: float | None = None
    iron: float | None = None

    @classmethod
    def zero(cls) -> "MacroProfile":
        """Return an empty profile."""
        return cls()

    def scaled(self, factor: float) -> "MacroProfile":
        """Return the profile multiplied by a serving factor."""
        values: dict[str, float | None] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            values[item.name] = None if value is None else value * factor
        return MacroProfile(**values)

    def __add__(self, other: "MacroProfile") -> "MacroProfile":
        if not isinstance(other, MacroProfile):
            return NotImplemented
        values: dict[str, float | None] = {}
        for item in fields(self):
            left = getattr(self, item.name)
            right = getattr(other, item.name)
            if item.name in _OPTIONAL_DV_FIELDS and left is None and right is None:
                values[item.name] = None
                continue
            values[item.name] = (left or 0.0) + (right or 0.0)
        return MacroProfile(**values)


def sum_macros(profiles: "list[MacroProfile]") -> MacroProfile:
    """Add up a list of profiles, starting from zero."""
    total = MacroProfile.zero()
    for profile in profiles:
        total = total + profile
    return total


def normalize_barcode(raw: str | None) -> str | None:
    """Trim a barcode and map blank values to ``None``."""
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None


@dataclass(frozen=True)
class FoodProduct:
    """A food with its per-serving nutrients."""

    name: str
    serving_size: float
    serving_unit: str
    macros: MacroProfile
    id: UUID = field(default_factory=uuid4)
    brand: str | None = None
    barcode: str | None = None
    serving_description: str | None = None
    is_custom: bool = False
    user_id: UUID | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class LoggedMealItem:
    """A product captured into a meal with a servings multiplier."""

    product: FoodProduct
    servings: float
    id: UUID = field(default_factory=uuid4)
    serving_size_override: float | None = None

    def __post_init__(self) -> None:
        if self.servings <= 0:
            raise ValueError("servings must be positive")

    @property
    def total_macros(self) -> MacroProfile:
        """Macros for the logged amount."""
        return self.product.macros.scaled(self.servings)


class MealType(StrEnum):
    """Meal slot a log entry belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    PRE_WORKOUT = "pre_workout"
    POST_WORKOUT = "post_workout"


@dataclass(frozen=True)
class MealEntry:
    """One logged meal."""

    user_id: UUID
    meal_type: MealType
    items: list[LoggedMealItem]
    logged_at: datetime
    id: UUID = field(default_factory=uuid4)
    notes: str | None = None
    image_url: str | None = None

    @property
    def total_macros(self) -> MacroProfile:
        return sum_macros([item.total_macros for item in self.items])


@dataclass(frozen=True)
class NutritionDaySummary:
    """Meals logged on one day against the user's goals."""

    day: date
    meals: list[MealEntry]
    calorie_goal: float
    protein_goal: float
    carb_goal: float
    fat_goal: float

    @property
    def total_macros(self) -> MacroProfile:
        return sum_macros([meal.total_macros for meal in self.meals])

    @property
    def calories_consumed(self) -> float:
        return self.total_macros.calories

    @property
    def calories_remaining(self) -> float:
        return self.calorie_goal - self.calories_consumed

    @property
    def calorie_progress(self) -> float:
        return _progress(self.calories_consumed, self.calorie_goal)

    @property
    def protein_progress(self) -> float:
        return _progress(self.total_macros.protein_g, self.protein_goal)

    @property
    def carb_progress(self) -> float:
        return _progress(self.total_macros.carbs_g, self.carb_goal)

    @property
    def fat_progress(self) -> float:
        return _progress(self.total_macros.fat_g, self.fat_goal)


def _progress(value: float, goal: float) -> float:
    if goal <= 0:
        return 0.0
    return min(1.0, max(0.0, value / goal))
