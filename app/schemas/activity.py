"""
Activity-ring schemas.

:class:`AppleStyleMetrics` holds daily totals for the three rings (move
calories, exercise minutes, stand hours).  :class:`DiscreteSample` is the
per-interval form of the same quantities for writers that need samples
rather than totals.
"""

from __future__ import annotations

import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class MetricsBreakdown(BaseModel):
    """How each ring total was derived."""

    # Move
    source_calories: float = 0.0
    elevation_fraction: float = 0.0
    calorie_multiplier: float = 1.0
    waking_hours: float = 0.0
    motion_bonus_calories: float = 0.0

    # Exercise
    workout_minutes: float = 0.0
    workout_count: int = 0
    workout_bonus_minutes: float = 0.0
    low_intensity_minutes: float = 0.0
    moderate_intensity_minutes: float = 0.0
    high_intensity_minutes: float = 0.0

    # Stand
    hours_with_hr_spike: list[int] = Field(default_factory=list)
    hours_with_workout: list[int] = Field(default_factory=list)
    hours_inferred: list[int] = Field(default_factory=list)


class AppleStyleMetrics(BaseModel):
    """Daily activity-ring totals."""

    date: datetime.date
    active_energy_kcal: float = Field(..., ge=0.0)
    exercise_minutes: float = Field(..., ge=0.0)
    stand_hours: list[int] = Field(
        default_factory=list,
        description="Distinct credited clock hours (0-23), ascending",
    )
    breakdown: MetricsBreakdown = Field(default_factory=MetricsBreakdown)

    @field_validator("stand_hours")
    @classmethod
    def _distinct_hours(cls, hours: list[int]) -> list[int]:
        if any(h < 0 or h > 23 for h in hours):
            raise ValueError("stand hours must be within 0-23")
        return sorted(set(hours))

    @property
    def stand_hour_count(self) -> int:
        return len(self.stand_hours)


class SampleType(str, Enum):
    ENERGY = "energy"
    EXERCISE = "exercise"
    STAND = "stand"


SAMPLE_UNITS: dict[SampleType, str] = {
    SampleType.ENERGY: "kcal",
    SampleType.EXERCISE: "min",
    SampleType.STAND: "hr",
}


class DiscreteSample(BaseModel):
    """A single time-bounded quantity."""

    type: SampleType
    start: datetime.datetime
    end: datetime.datetime
    quantity: float = Field(..., gt=0.0)
    unit: str

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0


class ActivitySamplesResponse(BaseModel):
    """Transform output together with its synthesised samples."""

    metrics: AppleStyleMetrics
    samples: list[DiscreteSample]
