"""
Generosity transform: WHOOP cardiovascular data → activity-ring credit.

WHOOP measures strain from heart rate alone.  Activity rings also credit
motion that never raises heart rate much (walking around, fidgeting,
standing up).  This module re-derives the three ring totals from a day
of WHOOP data, inflating them the way a wrist accelerometer would.

Move ring
---------
    final_kcal = source_kcal × multiplier + motion_bonus

``multiplier`` is interpolated linearly between the preset's low and high
bound by the *elevation fraction*, the share of heart-rate samples above
``resting × (1 + elevated_threshold)``.  ``motion_bonus`` is a flat
kcal-per-hour allowance over the waking hours of the day.

Exercise ring
-------------
Heart-rate samples are grouped per wall-clock minute and the minute's
peak is classed against max HR:

    high      ≥ high threshold         weight 1.0
    moderate  ≥ exercise threshold     weight 1.0
    low       ≥ light threshold        weight = light multiplier

Each workout adds a fixed bonus.  The total is never less than the raw
workout duration.

Stand ring
----------
Hour ``h`` is credited when any of these holds:

    (a) a run of consecutive samples inside ``h``, all above
        ``resting + spike threshold``, lasts at least one minute;
    (b) a workout overlaps ``[h:00, h+1:00)``;
    (c) both ``h - 1`` and ``h + 1`` are credited.

Rule (c) is applied until nothing changes.  Each pass is evaluated
against the previous pass's set, so the result does not depend on the
order hours are visited.

Presets are a closed set of named :class:`GenerosityConfig` constants.
"""

from __future__ import annotations

import datetime
import logging
from collections import defaultdict
from enum import Enum
from typing import Iterable, Optional, Union

from pydantic import BaseModel, Field, model_validator

from app.schemas.activity import AppleStyleMetrics, MetricsBreakdown
from app.schemas.whoop import HeartRateSample, WhoopDailyPayload, Workout
from app.vigor.errors import ConfigurationError, InvalidInputError

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24

# ======================================================================
# Configuration
# ======================================================================


class GenerosityPreset(str, Enum):
    """Named generosity levels."""
    CONSERVATIVE = "conservative"
    BALANCED = "balanced"
    GENEROUS = "generous"


class GenerosityConfig(BaseModel):
    """Tunables for the transform.  Use a preset rather than building one."""

    # Move ring
    multiplier_low: float = Field(..., ge=1.0)
    multiplier_high: float = Field(..., ge=1.0)
    elevated_hr_threshold: float = Field(..., gt=0.0, lt=1.0, description="Fraction above resting HR")
    hourly_motion_bonus_kcal: float = Field(..., ge=0.0)
    default_waking_hours: float = Field(16.0, ge=0.0, le=24.0)
    max_waking_hours: float = Field(18.0, ge=0.0, le=24.0)

    # Exercise ring (fractions of max HR)
    light_hr_threshold: float = Field(..., gt=0.0, lt=1.0)
    exercise_hr_threshold: float = Field(..., gt=0.0, lt=1.0)
    high_hr_threshold: float = Field(0.75, gt=0.0, le=1.0)
    light_multiplier: float = Field(..., ge=0.0, le=1.0)
    workout_bonus_minutes: float = Field(..., ge=0.0)

    # Stand ring
    stand_spike_bpm: float = Field(..., gt=0.0)
    stand_min_duration_s: float = Field(60.0, gt=0.0)
    stand_max_gap_s: float = Field(120.0, gt=0.0)

    @model_validator(mode="after")
    def _check_ordering(self) -> GenerosityConfig:
        if self.multiplier_low > self.multiplier_high:
            raise ValueError("multiplier_low must not exceed multiplier_high")
        if not (self.light_hr_threshold <= self.exercise_hr_threshold <= self.high_hr_threshold):
            raise ValueError("HR thresholds must satisfy light <= exercise <= high")
        return self


PRESETS: dict[GenerosityPreset, GenerosityConfig] = {
    GenerosityPreset.CONSERVATIVE: GenerosityConfig(
        multiplier_low=1.05,
        multiplier_high=1.15,
        elevated_hr_threshold=0.15,
        hourly_motion_bonus_kcal=5.0,
        light_hr_threshold=0.50,
        exercise_hr_threshold=0.60,
        light_multiplier=0.3,
        workout_bonus_minutes=5.0,
        stand_spike_bpm=12.0,
    ),
    GenerosityPreset.BALANCED: GenerosityConfig(
        multiplier_low=1.15,
        multiplier_high=1.30,
        elevated_hr_threshold=0.10,
        hourly_motion_bonus_kcal=8.0,
        light_hr_threshold=0.45,
        exercise_hr_threshold=0.55,
        light_multiplier=0.5,
        workout_bonus_minutes=5.0,
        stand_spike_bpm=10.0,
    ),
    GenerosityPreset.GENEROUS: GenerosityConfig(
        multiplier_low=1.25,
        multiplier_high=1.50,
        elevated_hr_threshold=0.08,
        hourly_motion_bonus_kcal=12.0,
        light_hr_threshold=0.40,
        exercise_hr_threshold=0.50,
        light_multiplier=0.7,
        workout_bonus_minutes=8.0,
        stand_spike_bpm=8.0,
    ),
}


def get_preset(preset: Union[GenerosityPreset, str]) -> GenerosityConfig:
    """Look up a preset by enum member or name.

    Raises :class:`ConfigurationError` for an unknown name.
    """
    try:
        key = GenerosityPreset(preset)
    except ValueError:
        raise ConfigurationError(
            f"Unknown generosity preset '{preset}'. "
            f"Available: {[p.value for p in GenerosityPreset]}"
        ) from None
    return PRESETS[key]


# ======================================================================
# Helpers
# ======================================================================


def _wall_clock(ts: datetime.datetime) -> datetime.datetime:
    """Timestamp as local wall-clock time (offset already applied)."""
    return ts.replace(tzinfo=None)


def _hour_bounds(day: datetime.date, hour: int) -> tuple[datetime.datetime, datetime.datetime]:
    start = datetime.datetime.combine(day, datetime.time(hour))
    return start, start + datetime.timedelta(hours=1)


def validate_payload(payload: WhoopDailyPayload) -> None:
    """Reject structurally invalid payloads before any transform runs."""
    if payload.max_heart_rate <= payload.resting_heart_rate:
        raise InvalidInputError(
            f"max_heart_rate ({payload.max_heart_rate}) must exceed "
            f"resting_heart_rate ({payload.resting_heart_rate})"
        )
    for w in payload.workouts:
        if w.end < w.start:
            raise InvalidInputError(f"Workout ends before it starts ({w.start} > {w.end})")
    for c in payload.cycles:
        if c.end is not None and c.end < c.start:
            raise InvalidInputError(f"Cycle ends before it starts ({c.start} > {c.end})")
    for s in payload.sleep:
        if s.end < s.start:
            raise InvalidInputError(f"Sleep ends before it starts ({s.start} > {s.end})")
    for sample in payload.heart_rate_samples:
        if _wall_clock(sample.time).date() != payload.date:
            raise InvalidInputError(
                f"Heart-rate sample at {sample.time} is outside payload date {payload.date}"
            )


# ======================================================================
# Move ring
# ======================================================================


def elevation_fraction(
    samples: list[HeartRateSample],
    resting_hr: float,
    threshold: float,
) -> float:
    """Share of samples above ``resting_hr × (1 + threshold)``."""
    if not samples:
        return 0.0
    limit = resting_hr * (1.0 + threshold)
    elevated = sum(1 for s in samples if s.bpm > limit)
    return elevated / len(samples)


def calorie_multiplier(fraction: float, config: GenerosityConfig) -> float:
    """Linear interpolation between the preset's multiplier bounds."""
    fraction = max(0.0, min(1.0, fraction))
    return config.multiplier_low + (config.multiplier_high - config.multiplier_low) * fraction


def estimate_waking_hours(
    payload: WhoopDailyPayload,
    config: GenerosityConfig,
) -> float:
    """Waking hours from the night's (non-nap) sleep, else the default."""
    sleep_hours = sum(s.duration_hours for s in payload.sleep if not s.nap)
    if sleep_hours <= 0:
        return config.default_waking_hours
    waking = max(0, HOURS_PER_DAY - int(sleep_hours))
    return float(min(waking, config.max_waking_hours))


# ======================================================================
# Exercise ring
# ======================================================================


def intensity_minutes(
    samples: list[HeartRateSample],
    max_hr: float,
    config: GenerosityConfig,
) -> tuple[float, float, float]:
    """Count ``(low, moderate, high)`` minutes by each minute's peak HR."""
    peak_by_minute: dict[datetime.datetime, int] = {}
    for s in samples:
        minute = _wall_clock(s.time).replace(second=0, microsecond=0)
        peak_by_minute[minute] = max(peak_by_minute.get(minute, 0), s.bpm)

    light = max_hr * config.light_hr_threshold
    moderate = max_hr * config.exercise_hr_threshold
    high = max_hr * config.high_hr_threshold

    low_min = mod_min = high_min = 0.0
    for bpm in peak_by_minute.values():
        if bpm >= high:
            high_min += 1.0
        elif bpm >= moderate:
            mod_min += 1.0
        elif bpm >= light:
            low_min += 1.0
    return low_min, mod_min, high_min


# ======================================================================
# Stand ring
# ======================================================================


def spike_hours(
    samples: list[HeartRateSample],
    resting_hr: float,
    config: GenerosityConfig,
) -> set[int]:
    """Hours holding a sustained run of HR above ``resting + spike``.

    Samples are bucketed by clock hour and sorted inside each bucket, so
    input order does not matter.  A run breaks on a sample at or below the
    threshold or on a gap longer than ``stand_max_gap_s``.
    """
    limit = resting_hr + config.stand_spike_bpm
    min_span = datetime.timedelta(seconds=config.stand_min_duration_s)
    max_gap = datetime.timedelta(seconds=config.stand_max_gap_s)

    by_hour: dict[int, list[HeartRateSample]] = defaultdict(list)
    for s in samples:
        by_hour[_wall_clock(s.time).hour].append(s)

    credited: set[int] = set()
    for hour, bucket in by_hour.items():
        run_start: Optional[datetime.datetime] = None
        previous: Optional[datetime.datetime] = None
        for s in sorted(bucket, key=lambda s: _wall_clock(s.time)):
            t = _wall_clock(s.time)
            if s.bpm <= limit:
                run_start = None
            elif run_start is None or previous is None or t - previous > max_gap:
                run_start = t
            previous = t
            if run_start is not None and t - run_start >= min_span:
                credited.add(hour)
                break
    return credited


def workout_hours(workouts: list[Workout], day: datetime.date) -> set[int]:
    """Hours of *day* that any workout interval overlaps."""
    hours: set[int] = set()
    for w in workouts:
        start, end = _wall_clock(w.start), _wall_clock(w.end)
        for hour in range(HOURS_PER_DAY):
            h_start, h_end = _hour_bounds(day, hour)
            if start < h_end and end > h_start:
                hours.add(hour)
    return hours


def infer_adjacent_hours(credited: Iterable[int]) -> set[int]:
    """Credit every hour whose two neighbours are credited.

    Only hours 1-22 have both neighbours inside the day.

    Repeats until a pass adds nothing and returns the full credited set.
    """
    current = set(credited)
    candidates = set(range(1, HOURS_PER_DAY - 1))
    while True:
        added = {
            h for h in candidates - current
            if (h - 1) in current and (h + 1) in current
        }
        if not added:
            return current
        current |= added


# ======================================================================
# Transformer
# ======================================================================


class GenerosityTransformer:
    """Applies one :class:`GenerosityConfig` to WHOOP daily payloads."""

    def __init__(self, config: Optional[GenerosityConfig] = None):
        self.config = config or PRESETS[GenerosityPreset.BALANCED]

    @classmethod
    def for_preset(cls, preset: Union[GenerosityPreset, str]) -> GenerosityTransformer:
        return cls(get_preset(preset))

    def transform(
        self,
        payload: WhoopDailyPayload,
        waking_hours: Optional[float] = None,
    ) -> AppleStyleMetrics:
        """Transform one day of WHOOP data into activity-ring totals.

        Args:
            payload: The day's WHOOP data.
            waking_hours: Override for the motion-bonus window.  When
                ``None`` it is estimated from the payload's sleep, falling
                back to the configured default.

        Raises:
            InvalidInputError: The payload is malformed.
        """
        validate_payload(payload)
        cfg = self.config

        # --- Move ---
        source_kcal = payload.total_active_calories
        fraction = elevation_fraction(
            payload.heart_rate_samples, payload.resting_heart_rate, cfg.elevated_hr_threshold,
        )
        multiplier = calorie_multiplier(fraction, cfg)
        if waking_hours is None:
            waking_hours = estimate_waking_hours(payload, cfg)
        elif not 0.0 <= waking_hours <= HOURS_PER_DAY:
            raise InvalidInputError(f"waking_hours must be within 0-24, got {waking_hours}")
        motion_bonus = waking_hours * cfg.hourly_motion_bonus_kcal
        active_kcal = source_kcal * multiplier + motion_bonus

        # --- Exercise ---
        low_min, mod_min, high_min = intensity_minutes(
            payload.heart_rate_samples, payload.max_heart_rate, cfg,
        )
        workout_bonus = len(payload.workouts) * cfg.workout_bonus_minutes
        exercise_min = low_min * cfg.light_multiplier + mod_min + high_min + workout_bonus
        exercise_min = max(exercise_min, payload.total_workout_minutes)

        # --- Stand ---
        hr_hours = spike_hours(payload.heart_rate_samples, payload.resting_heart_rate, cfg)
        wo_hours = workout_hours(payload.workouts, payload.date)
        direct = hr_hours | wo_hours
        stand = infer_adjacent_hours(direct)

        breakdown = MetricsBreakdown(
            source_calories=source_kcal,
            elevation_fraction=fraction,
            calorie_multiplier=multiplier,
            waking_hours=waking_hours,
            motion_bonus_calories=motion_bonus,
            workout_minutes=payload.total_workout_minutes,
            workout_count=len(payload.workouts),
            workout_bonus_minutes=workout_bonus,
            low_intensity_minutes=low_min,
            moderate_intensity_minutes=mod_min,
            high_intensity_minutes=high_min,
            hours_with_hr_spike=sorted(hr_hours),
            hours_with_workout=sorted(wo_hours),
            hours_inferred=sorted(stand - direct),
        )
        metrics = AppleStyleMetrics(
            date=payload.date,
            active_energy_kcal=active_kcal,
            exercise_minutes=exercise_min,
            stand_hours=sorted(stand),
            breakdown=breakdown,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("\n%s", format_breakdown(metrics))
        return metrics


def transform(
    payload: WhoopDailyPayload,
    preset: Union[GenerosityPreset, str] = GenerosityPreset.BALANCED,
    waking_hours: Optional[float] = None,
) -> AppleStyleMetrics:
    """Transform *payload* with a named preset."""
    return GenerosityTransformer.for_preset(preset).transform(payload, waking_hours=waking_hours)


def format_breakdown(metrics: AppleStyleMetrics) -> str:
    """Human-readable derivation of each ring total."""
    b = metrics.breakdown
    lines = [
        f"GENEROSITY BREAKDOWN {metrics.date.isoformat()}",
        "Move",
        f"  source calories:   {b.source_calories:.0f} kcal",
        f"  elevation:         {b.elevation_fraction:.0%}",
        f"  multiplier:        {b.calorie_multiplier:.2f}x",
        f"  motion bonus:      +{b.motion_bonus_calories:.0f} kcal ({b.waking_hours:g} h)",
        f"  total:             {metrics.active_energy_kcal:.0f} kcal",
        "Exercise",
        f"  workouts:          {b.workout_count} ({b.workout_minutes:.0f} min, +{b.workout_bonus_minutes:.0f} bonus)",
        f"  low / mod / high:  {b.low_intensity_minutes:.0f} / "
        f"{b.moderate_intensity_minutes:.0f} / {b.high_intensity_minutes:.0f} min",
        f"  total:             {metrics.exercise_minutes:.0f} min",
        "Stand",
        f"  HR spike hours:    {b.hours_with_hr_spike}",
        f"  workout hours:     {b.hours_with_workout}",
        f"  inferred hours:    {b.hours_inferred}",
        f"  total:             {metrics.stand_hour_count} h {metrics.stand_hours}",
    ]
    return "\n".join(lines)
