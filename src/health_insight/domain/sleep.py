"""Sleep domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class SleepStage(StrEnum):
    """Sleep stage of a segment."""

    AWAKE = "awake"
    LIGHT = "light"
    REM = "rem"
    DEEP = "deep"


@dataclass(frozen=True)
class SleepStageSegment:
    """A contiguous stretch of one sleep stage."""

    stage: SleepStage
    start_time: datetime
    duration_minutes: float
    id: UUID = field(default_factory=uuid4)


@dataclass(frozen=True)
class DailySleepRecord:
    """One night of sleep with its stage breakdown."""

    start_time: datetime
    end_time: datetime
    stages: list[SleepStageSegment] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    user_id: UUID | None = None
    source: str = "manual"
    avg_heart_rate: float | None = None
    avg_hrv: float | None = None
    avg_oxygen_saturation: float | None = None
    avg_respiratory_rate: float | None = None
    sleep_score: int | None = None

    def __post_init__(self) -> None:
        if self.end_time <= self.start_time:
            raise ValueError("sleep end_time must be after start_time")

    @property
    def total_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() / 60)

    @property
    def total_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600

    def stage_minutes(self, stage: SleepStage) -> float:
        """Return the summed duration of one stage in minutes."""
        return sum(
            segment.duration_minutes
            for segment in self.stages
            if segment.stage == stage
        )

    @property
    def awake_minutes(self) -> float:
        return self.stage_minutes(SleepStage.AWAKE)

    @property
    def light_minutes(self) -> int:
        return int(self.stage_minutes(SleepStage.LIGHT))

    @property
    def rem_minutes(self) -> int:
        return int(self.stage_minutes(SleepStage.REM))

    @property
    def deep_minutes(self) -> int:
        return int(self.stage_minutes(SleepStage.DEEP))

    @property
    def efficiency(self) -> float:
        """Share of the night not spent awake."""
        if self.total_minutes <= 0:
            return 0.0
        return max(0.0, 1.0 - self.awake_minutes / self.total_minutes)
