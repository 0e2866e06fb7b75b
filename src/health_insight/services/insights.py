"""Daily insight scores and energy breakdowns."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID

from health_insight.domain.activity import DailyActivity, TDEEBreakdown, UserProfile
from health_insight.domain.insights import DailyInsightScores, WeeklyInsightSummary
from health_insight.domain.sleep import DailySleepRecord
from health_insight.services.energy import calculate_tdee
from health_insight.services.health_samples import SleepSample, build_sleep_record
from health_insight.services.meals import MealService
from health_insight.services.scoring import compute_daily_insight_scores

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Read access to user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile, if present."""


class SleepRepository(Protocol):
    """Persistence interface for sleep records."""

    def save_sleep(self, record: DailySleepRecord) -> None:
        """Upsert a sleep record with its stage segments."""

    def get_latest_sleep(
        self, user_id: UUID, ended_before: datetime
    ) -> DailySleepRecord | None:
        """Return the most recent record that ended before a moment."""


class DailyLogRepository(Protocol):
    """Read access to daily activity and water logs."""

    def get_daily_activity(self, user_id: UUID, day: date) -> DailyActivity | None:
        """Return the activity totals for a day, if recorded."""

    def get_water_total_ml(self, user_id: UUID, day: date) -> float:
        """Return the water logged on a day in millilitres."""


class InsightScoresRepository(Protocol):
    """Persistence interface for daily insight scores."""

    def upsert_scores(self, scores: DailyInsightScores) -> None:
        """Insert or overwrite the scores for ``(user_id, day)``."""

    def list_scores(self, user_id: UUID, since: date) -> list[DailyInsightScores]:
        """Return stored scores since a day, newest first."""


@dataclass
class InsightsService:
    """Gathers a day's aggregates and turns them into scores."""

    profile_repository: ProfileRepository
    sleep_repository: SleepRepository
    daily_log_repository: DailyLogRepository
    scores_repository: InsightScoresRepository
    meal_service: MealService

    def record_sleep_samples(
        self, user_id: UUID, samples: list[SleepSample]
    ) -> DailySleepRecord | None:
        """Build a night from platform samples and store it."""
        record = build_sleep_record(samples)
        if record is None:
            return None
        record = replace(record, user_id=user_id)
        self.sleep_repository.save_sleep(record)
        return record

    def refresh_day(self, user_id: UUID, day: date) -> DailyInsightScores:
        """Compute and store the scores for a day.

        Running it again later in the day overwrites the earlier row.
        """
        profile = self.get_profile(user_id)
        day_start = datetime.combine(day, time.min, tzinfo=UTC)
        sleep = self.sleep_repository.get_latest_sleep(
            user_id, day_start + timedelta(days=1)
        )
        if sleep is not None and sleep.end_time < day_start:
            sleep = None
        activity = self.daily_log_repository.get_daily_activity(user_id, day)
        water_ml = self.daily_log_repository.get_water_total_ml(user_id, day)
        nutrition = self.meal_service.day_summary(profile, day)

        scores = compute_daily_insight_scores(
            user_id=user_id,
            day=day,
            sleep=sleep,
            nutrition=nutrition,
            activity=activity,
            hydration_ml=water_ml,
            hydration_goal_ml=profile.daily_water_goal_ml,
        )
        self.scores_repository.upsert_scores(scores)
        _logger.info(
            "Insight scores refreshed: user=%s day=%s wellness=%s",
            user_id,
            day.isoformat(),
            scores.overall_wellness_score,
        )
        return scores

    def weekly_summary(
        self, user_id: UUID, today: date, days: int = 7
    ) -> WeeklyInsightSummary:
        """Return stored scores for the last ``days`` days with averages."""
        scores = self.scores_repository.list_scores(
            user_id, today - timedelta(days=days)
        )
        if not scores:
            return WeeklyInsightSummary(scores=[], avg_recovery=0, avg_strain=0)
        return WeeklyInsightSummary(
            scores=scores,
            avg_recovery=sum(item.recovery_score for item in scores) // len(scores),
            avg_strain=sum(item.strain_score for item in scores) // len(scores),
        )

    def energy_breakdown(self, user_id: UUID, day: date) -> TDEEBreakdown:
        """Return the TDEE breakdown for a day."""
        profile = self.get_profile(user_id)
        activity = self.daily_log_repository.get_daily_activity(user_id, day)
        nutrition = self.meal_service.day_summary(profile, day)
        return calculate_tdee(
            profile=profile,
            activity=activity,
            calories_consumed=nutrition.calories_consumed,
            today=day,
        )

    def get_profile(self, user_id: UUID) -> UserProfile:
        """Return the stored profile or the default goals for a new user."""
        profile = self.profile_repository.get_profile(user_id)
        if profile is None:
            return UserProfile(id=user_id)
        return profile
