"""
Recovery scoring schemas.

The recovery score combines four metric categories, each compared against
either a fixed population band (sleep) or the person's own trailing
baseline (HRV, resting HR, temperature):

    Sleep        weight 0.30   fixed optimal band 7–9 h
    HRV          weight 0.30   z-score vs. 30-day baseline (higher is better)
    Resting HR   weight 0.25   z-score vs. 30-day baseline (lower is better)
    Temperature  weight 0.15   absolute deviation from baseline mean

A reading is either :class:`Present` or :class:`Missing`.  Absence is a
first-class state, never zero.  Categories that are missing have their
nominal weight redistributed over the present ones.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class MetricCategory(str, Enum):
    """Metric categories that feed the recovery score."""
    SLEEP = "sleep"
    HRV = "hrv"
    RESTING_HR = "resting_hr"
    TEMPERATURE = "temperature"


BASELINE_CATEGORIES = (
    MetricCategory.HRV,
    MetricCategory.RESTING_HR,
    MetricCategory.TEMPERATURE,
)


class MissingReason(str, Enum):
    """Why a category could not be scored."""
    NO_READING = "no_reading"
    NO_BASELINE = "no_baseline"


class ScoreCategory(str, Enum):
    """Coarse label for an overall score."""
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"

    @classmethod
    def from_score(cls, score: float) -> ScoreCategory:
        if score >= 67.0:
            return cls.HIGH
        if score >= 34.0:
            return cls.MODERATE
        return cls.LOW

    @property
    def description(self) -> str:
        return {
            ScoreCategory.HIGH: "Ready for high intensity",
            ScoreCategory.MODERATE: "Moderate activity recommended",
            ScoreCategory.LOW: "Focus on recovery",
        }[self]


# ---------------------------------------------------------------------------
# Reading sum type
# ---------------------------------------------------------------------------

class Present(BaseModel):
    """A reading that exists."""

    model_config = ConfigDict(frozen=True)

    value: float


class Missing(BaseModel):
    """A reading that does not exist (or cannot be used)."""

    model_config = ConfigDict(frozen=True)

    reason: MissingReason = MissingReason.NO_READING


Reading = Union[Present, Missing]


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

_READING_FIELDS = {
    MetricCategory.SLEEP: "sleep_hours",
    MetricCategory.HRV: "hrv_ms",
    MetricCategory.RESTING_HR: "resting_hr_bpm",
    MetricCategory.TEMPERATURE: "temperature_deviation_c",
}


class HealthMetrics(BaseModel):
    """Current-day readings.  Any subset may be absent."""

    model_config = ConfigDict(allow_inf_nan=False)

    sleep_hours: Optional[float] = Field(
        None, ge=0.0, le=24.0,
        description="Total sleep for the night ending on this day (hours)",
    )
    hrv_ms: Optional[float] = Field(
        None, gt=0.0, le=500.0,
        description="Heart-rate variability (ms)",
    )
    resting_hr_bpm: Optional[float] = Field(
        None, gt=0.0, le=250.0,
        description="Resting heart rate (bpm)",
    )
    temperature_deviation_c: Optional[float] = Field(
        None, ge=-10.0, le=10.0,
        description="Skin / wrist temperature deviation (°C)",
    )

    def reading(self, category: MetricCategory) -> Reading:
        """Return the current reading for *category* as a :data:`Reading`."""
        value = getattr(self, _READING_FIELDS[category])
        if value is None:
            return Missing(reason=MissingReason.NO_READING)
        return Present(value=value)


class MetricBaseline(BaseModel):
    """Rolling statistics for one metric."""

    mean: float
    stddev: float = Field(..., ge=0.0)
    sample_count: int = Field(..., ge=1)
    window_start: Optional[datetime.date] = None
    window_end: Optional[datetime.date] = None


class Baseline(BaseModel):
    """Per-metric personal baseline.  ``None`` means "no usable baseline"."""

    hrv: Optional[MetricBaseline] = None
    resting_hr: Optional[MetricBaseline] = None
    temperature: Optional[MetricBaseline] = None

    def for_category(self, category: MetricCategory) -> Optional[MetricBaseline]:
        if category is MetricCategory.SLEEP:
            return None
        return getattr(self, category.value)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

class RecoveryResult(BaseModel):
    """Recovery score for one day."""

    date: Optional[datetime.date] = None
    score: float = Field(..., ge=0.0, le=100.0)
    category: ScoreCategory
    sub_scores: dict[MetricCategory, float] = Field(
        default_factory=dict,
        description="0–100 sub-score per category that was computed",
    )
    missing: dict[MetricCategory, MissingReason] = Field(
        default_factory=dict,
        description="Categories that could not be scored, with the reason",
    )
    applied_weights: dict[MetricCategory, float] = Field(
        default_factory=dict,
        description="Redistributed weight per present category (sums to 1.0)",
    )

    # Echo of the inputs, for history display.
    inputs: HealthMetrics = Field(default_factory=HealthMetrics)
    hrv_baseline: Optional[float] = None
    rhr_baseline: Optional[float] = None
    temperature_baseline: Optional[float] = None

    @property
    def has_missing_data(self) -> bool:
        return bool(self.missing)


class DailyReading(HealthMetrics):
    """One stored day of readings (history input for the baseline)."""

    date: datetime.date

    def to_health_metrics(self) -> HealthMetrics:
        return HealthMetrics(**self.model_dump(exclude={"date"}))
