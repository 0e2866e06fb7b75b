"""Mapping of platform health samples into sleep records."""

from dataclasses import dataclass
from datetime import datetime

from health_insight.domain.sleep import DailySleepRecord, SleepStage, SleepStageSegment

_SLEEP_CATEGORY_STAGES = {
    "in_bed": SleepStage.AWAKE,
    "awake": SleepStage.AWAKE,
    "asleep_rem": SleepStage.REM,
    "asleep_core": SleepStage.LIGHT,
    "asleep_unspecified": SleepStage.LIGHT,
    "asleep_deep": SleepStage.DEEP,
}


@dataclass(frozen=True)
class SleepSample:
    """A raw sleep-analysis sample from the platform health store."""

    category: str
    start_time: datetime
    end_time: datetime


def stage_for_category(category: str) -> SleepStage:
    """Map a platform sleep category to a stage; unknown values count as light."""
    key = category.strip().lower().replace("-", "_")
    return _SLEEP_CATEGORY_STAGES.get(key, SleepStage.LIGHT)


def build_sleep_record(
    samples: list[SleepSample], source: str = "healthkit"
) -> DailySleepRecord | None:
    """Assemble one night from samples ordered by start time."""
    if not samples:
        return None
    ordered = sorted(samples, key=lambda sample: sample.start_time)
    start = ordered[0].start_time
    end = ordered[-1].end_time
    if end <= start:
        return None
    segments = [
        SleepStageSegment(
            stage=stage_for_category(sample.category),
            start_time=sample.start_time,
            duration_minutes=max(
                0.0, (sample.end_time - sample.start_time).total_seconds() / 60
            ),
        )
        for sample in ordered
    ]
    return DailySleepRecord(
        start_time=start, end_time=end, stages=segments, source=source
    )
