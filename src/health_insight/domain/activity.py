"""Activity, profile and energy expenditure models."""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from uuid import UUID, uuid4


class BiologicalSex(StrEnum):
    """Biological sex used by the BMR equation."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


@dataclass(frozen=True)
class UserProfile:
    """Body measurements and daily goals for a user."""

    id: UUID
    date_of_birth: date | None = None
    biological_sex: BiologicalSex = BiologicalSex.OTHER
    height_cm: float = 170.0
    weight_kg: float = 70.0
    daily_calorie_goal: float = 2000.0
    daily_protein_goal: float = 150.0
    daily_carb_goal: float = 250.0
    daily_fat_goal: float = 65.0
    daily_water_goal_ml: float = 2500.0
    daily_step_goal: int = 10000
    nightly_sleep_goal_hours: float = 8.0

    def age_on(self, today: date) -> int | None:
        """Return the age in whole years on a given day."""
        if self.date_of_birth is None:
            return None
        dob = self.date_of_birth
        years = today.year - dob.year
        if (today.month, today.day) < (dob.month, dob.day):
            years -= 1
        return years


@dataclass(frozen=True)
class DailyActivity:
    """Daily activity totals for a user."""

    day: date
    steps: int = 0
    distance_km: float = 0.0
    active_calories: float = 0.0
    resting_calories: float = 0.0
    active_minutes: int = 0
    id: UUID = field(default_factory=uuid4)
    user_id: UUID | None = None
    avg_heart_rate: float | None = None
    resting_heart_rate: float | None = None
    max_heart_rate: float | None = None
    vo2max: float | None = None


@dataclass(frozen=True)
class TDEEBreakdown:
    """Total daily energy expenditure split into its components."""

    bmr: float
    neat: float
    tef: float
    eat: float

    @property
    def total(self) -> float:
        return self.bmr + self.neat + self.tef + self.eat
