"""Supabase repository for daily insight scores."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from health_insight.domain.insights import DailyInsightScores
from health_insight.services.insights import InsightScoresRepository

_SCORE_COLUMNS = (
    "recovery_score",
    "stress_score",
    "strain_score",
    "readiness_score",
    "sleep_score",
    "nutrition_score",
    "hydration_score",
)


@dataclass
class SupabaseInsightsRepository(InsightScoresRepository):
    """Supabase implementation for ``insight_scores``."""

    client: Client

    def upsert_scores(self, scores: DailyInsightScores) -> None:
        """Write one row per ``(user_id, date)``, overwriting earlier runs."""
        payload: dict[str, object] = {
            "user_id": str(scores.user_id),
            "date": scores.day.isoformat(),
        }
        for column in _SCORE_COLUMNS:
            payload[column] = getattr(scores, column)
        self.client.table("insight_scores").upsert(
            payload, on_conflict="user_id,date"
        ).execute()

    def list_scores(self, user_id: UUID, since: date) -> list[DailyInsightScores]:
        response = (
            self.client.table("insight_scores")
            .select("*")
            .eq("user_id", str(user_id))
            .gte("date", since.isoformat())
            .order("date", desc=True)
            .execute()
        )
        return [_parse_scores(row) for row in response.data or []]


def _parse_scores(row: dict[str, object]) -> DailyInsightScores:
    values = {column: int(row.get(column) or 0) for column in _SCORE_COLUMNS}
    return DailyInsightScores(
        user_id=UUID(str(row["user_id"])),
        day=date.fromisoformat(str(row["date"])),
        **values,
    )
