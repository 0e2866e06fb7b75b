"""Supabase reads for daily activity and water logs."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from uuid import UUID

from supabase import Client

from health_insight.domain.activity import DailyActivity
from health_insight.services.insights import DailyLogRepository


@dataclass
class SupabaseDailyLogRepository(DailyLogRepository):
    """Supabase implementation for daily log aggregates."""

    client: Client

    def get_daily_activity(self, user_id: UUID, day: date) -> DailyActivity | None:
        """Return the ``daily_activities`` row for a day, if present."""
        response = (
            self.client.table("daily_activities")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_activity(response.data[0])

    def get_water_total_ml(self, user_id: UUID, day: date) -> float:
        """Sum the water entries logged during a UTC day."""
        start = datetime.combine(day, time.min, tzinfo=UTC)
        end = start + timedelta(days=1)
        response = (
            self.client.table("water_entries")
            .select("amount_ml")
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .execute()
        )
        return sum(float(row.get("amount_ml") or 0.0) for row in response.data or [])


def _parse_activity(row: dict[str, object]) -> DailyActivity:
    user_id = row.get("user_id")
    return DailyActivity(
        id=UUID(str(row["id"])),
        user_id=UUID(str(user_id)) if user_id else None,
        day=date.fromisoformat(str(row["date"])),
        steps=int(row.get("steps") or 0),
        distance_km=float(row.get("distance_km") or 0.0),
        active_calories=float(row.get("active_calories") or 0.0),
        resting_calories=float(row.get("resting_calories") or 0.0),
        active_minutes=int(row.get("active_minutes") or 0),
        avg_heart_rate=_optional_float(row.get("avg_heart_rate")),
        resting_heart_rate=_optional_float(row.get("resting_heart_rate")),
        max_heart_rate=_optional_float(row.get("max_heart_rate")),
        vo2max=_optional_float(row.get("vo2max")),
    )


def _optional_float(value: object) -> float | None:
    return float(value) if value is not None else None
