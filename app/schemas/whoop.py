"""
WHOOP daily payload schemas.

These mirror the already-decoded records of the WHOOP developer API that
the activity-ring transform needs.  Fetching, OAuth and JSON decoding of
the remote service happen elsewhere; this module only describes the shape
handed to :func:`app.vigor.generosity.transform`.

Energy is reported by WHOOP in kilojoules and converted to kilocalories
(÷ 4.184).  Workouts are nested inside cycles, so the day's source energy
is the larger of the two sums rather than their total.
"""

from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, Field

KJ_PER_KCAL = 4.184


class HeartRateSample(BaseModel):
    """One heart-rate reading."""

    time: datetime.datetime
    bpm: int = Field(..., ge=0, le=300)


class ZoneDurations(BaseModel):
    """Time spent in each WHOOP heart-rate zone (milliseconds)."""

    zone_zero_milli: Optional[int] = Field(None, ge=0)
    zone_one_milli: Optional[int] = Field(None, ge=0)
    zone_two_milli: Optional[int] = Field(None, ge=0)
    zone_three_milli: Optional[int] = Field(None, ge=0)
    zone_four_milli: Optional[int] = Field(None, ge=0)
    zone_five_milli: Optional[int] = Field(None, ge=0)

    @property
    def moderate_to_high_minutes(self) -> float:
        """Minutes spent in zones 2-5."""
        millis = sum(
            v or 0 for v in (
                self.zone_two_milli,
                self.zone_three_milli,
                self.zone_four_milli,
                self.zone_five_milli,
            )
        )
        return millis / 60000.0


class WorkoutScore(BaseModel):
    strain: Optional[float] = Field(None, ge=0.0)
    average_heart_rate: Optional[int] = Field(None, ge=0)
    max_heart_rate: Optional[int] = Field(None, ge=0)
    kilojoule: float = Field(0.0, ge=0.0)
    percent_recorded: Optional[float] = Field(None, ge=0.0, le=100.0)
    zone_durations: ZoneDurations = Field(default_factory=ZoneDurations)

    @property
    def calories(self) -> float:
        return self.kilojoule / KJ_PER_KCAL


class Workout(BaseModel):
    """A discrete workout interval."""

    id: Optional[int] = None
    sport_id: Optional[int] = None
    start: datetime.datetime
    end: datetime.datetime
    score: Optional[WorkoutScore] = None

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0


class CycleScore(BaseModel):
    strain: Optional[float] = Field(None, ge=0.0)
    kilojoule: float = Field(0.0, ge=0.0)
    average_heart_rate: Optional[int] = Field(None, ge=0)
    max_heart_rate: Optional[int] = Field(None, ge=0)

    @property
    def calories(self) -> float:
        return self.kilojoule / KJ_PER_KCAL


class Cycle(BaseModel):
    """A WHOOP physiological cycle (roughly wake-to-wake)."""

    id: Optional[int] = None
    start: datetime.datetime
    end: Optional[datetime.datetime] = None
    score: Optional[CycleScore] = None


class Sleep(BaseModel):
    """A sleep period; naps are excluded from waking-time estimation."""

    id: Optional[int] = None
    start: datetime.datetime
    end: datetime.datetime
    nap: bool = False

    @property
    def duration_hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600.0


class RecoveryScore(BaseModel):
    user_calibrating: bool = False
    recovery_score: float = Field(..., ge=0.0, le=100.0)
    resting_heart_rate: float = Field(..., gt=0.0)
    hrv_rmssd_milli: float = Field(..., gt=0.0)
    spo2_percentage: Optional[float] = None
    skin_temp_celsius: Optional[float] = None


class Recovery(BaseModel):
    cycle_id: Optional[int] = None
    score: RecoveryScore


class WhoopDailyPayload(BaseModel):
    """All WHOOP data for a single day."""

    date: datetime.date
    resting_heart_rate: float = Field(..., gt=0.0)
    max_heart_rate: int = Field(..., gt=0)
    heart_rate_samples: list[HeartRateSample] = Field(default_factory=list)
    workouts: list[Workout] = Field(default_factory=list)
    cycles: list[Cycle] = Field(default_factory=list)
    sleep: list[Sleep] = Field(default_factory=list)
    recovery: Optional[Recovery] = None

    @property
    def total_active_calories(self) -> float:
        """Source active energy for the day (kcal)."""
        cycle_kcal = sum(c.score.calories for c in self.cycles if c.score)
        workout_kcal = sum(w.score.calories for w in self.workouts if w.score)
        return max(cycle_kcal, workout_kcal)

    @property
    def total_workout_minutes(self) -> float:
        return sum(w.duration_minutes for w in self.workouts)
