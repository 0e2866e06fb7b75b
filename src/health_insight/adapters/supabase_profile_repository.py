"""Supabase-backed user profile repository."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from health_insight.domain.activity import BiologicalSex, UserProfile
from health_insight.services.insights import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile reads."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile, if present."""
        response = (
            self.client.table("user_profiles")
            .select("*")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])


def _parse_profile(row: dict[str, object]) -> UserProfile:
    raw_dob = row.get("date_of_birth")
    raw_sex = str(row.get("biological_sex") or BiologicalSex.OTHER.value)
    try:
        sex = BiologicalSex(raw_sex)
    except ValueError:
        sex = BiologicalSex.OTHER
    date_of_birth = (
        date.fromisoformat(raw_dob) if isinstance(raw_dob, str) and raw_dob else None
    )
    defaults = UserProfile(id=UUID(str(row["id"])))
    return UserProfile(
        id=defaults.id,
        date_of_birth=date_of_birth,
        biological_sex=sex,
        height_cm=_float(row.get("height_cm"), defaults.height_cm),
        weight_kg=_float(row.get("weight_kg"), defaults.weight_kg),
        daily_calorie_goal=_float(
            row.get("daily_calorie_goal"), defaults.daily_calorie_goal
        ),
        daily_protein_goal=_float(
            row.get("daily_protein_goal"), defaults.daily_protein_goal
        ),
        daily_carb_goal=_float(row.get("daily_carb_goal"), defaults.daily_carb_goal),
        daily_fat_goal=_float(row.get("daily_fat_goal"), defaults.daily_fat_goal),
        daily_water_goal_ml=_float(
            row.get("daily_water_goal"), defaults.daily_water_goal_ml
        ),
        daily_step_goal=int(row.get("daily_step_goal") or defaults.daily_step_goal),
        nightly_sleep_goal_hours=_float(
            row.get("nightly_sleep_goal"), defaults.nightly_sleep_goal_hours
        ),
    )


def _float(value: object, default: float) -> float:
    if value is None:
        return default
    return float(value)
