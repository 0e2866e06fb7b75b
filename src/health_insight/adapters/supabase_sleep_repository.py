"""Supabase repository for sleep entries and their stage segments."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from health_insight.domain.sleep import DailySleepRecord, SleepStage, SleepStageSegment
from health_insight.services.insights import SleepRepository

_SLEEP_SELECT = (
    "*, stages:sleep_stage_segments(id, stage, start_time, duration_minutes)"
)


@dataclass
class SupabaseSleepRepository(SleepRepository):
    """Supabase implementation for sleep persistence."""

    client: Client

    def save_sleep(self, record: DailySleepRecord) -> None:
        """Upsert the sleep row and replace its segments."""
        if record.user_id is None:
            raise ValueError("sleep record has no user_id")
        self.client.table("sleep_entries").upsert(
            {
                "id": str(record.id),
                "user_id": str(record.user_id),
                "start_time": record.start_time.isoformat(),
                "end_time": record.end_time.isoformat(),
                "source": record.source,
                "avg_heart_rate": record.avg_heart_rate,
                "avg_hrv": record.avg_hrv,
                "avg_oxygen_saturation": record.avg_oxygen_saturation,
                "avg_respiratory_rate": record.avg_respiratory_rate,
                "sleep_score": record.sleep_score,
            }
        ).execute()
        self.client.table("sleep_stage_segments").delete().eq(
            "sleep_entry_id", str(record.id)
        ).execute()
        segments = [
            {
                "id": str(segment.id),
                "sleep_entry_id": str(record.id),
                "stage": segment.stage.value,
                "start_time": segment.start_time.isoformat(),
                "duration_minutes": segment.duration_minutes,
            }
            for segment in record.stages
        ]
        if segments:
            self.client.table("sleep_stage_segments").insert(segments).execute()

    def get_latest_sleep(
        self, user_id: UUID, ended_before: datetime
    ) -> DailySleepRecord | None:
        response = (
            self.client.table("sleep_entries")
            .select(_SLEEP_SELECT)
            .eq("user_id", str(user_id))
            .lt("end_time", ended_before.isoformat())
            .order("end_time", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_sleep(response.data[0])


def _parse_sleep(row: dict[str, object]) -> DailySleepRecord:
    stages = [
        SleepStageSegment(
            id=UUID(str(segment["id"])),
            stage=SleepStage(str(segment["stage"])),
            start_time=datetime.fromisoformat(str(segment["start_time"])),
            duration_minutes=float(segment.get("duration_minutes") or 0.0),
        )
        for segment in row.get("stages") or []
    ]
    stages.sort(key=lambda segment: segment.start_time)
    score = row.get("sleep_score")
    return DailySleepRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        start_time=datetime.fromisoformat(str(row["start_time"])),
        end_time=datetime.fromisoformat(str(row["end_time"])),
        stages=stages,
        source=str(row.get("source") or "manual"),
        avg_heart_rate=_optional_float(row.get("avg_heart_rate")),
        avg_hrv=_optional_float(row.get("avg_hrv")),
        avg_oxygen_saturation=_optional_float(row.get("avg_oxygen_saturation")),
        avg_respiratory_rate=_optional_float(row.get("avg_respiratory_rate")),
        sleep_score=int(score) if score is not None else None,
    )


def _optional_float(value: object) -> float | None:
    return float(value) if value is not None else None
