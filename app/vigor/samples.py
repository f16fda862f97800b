"""
Sample synthesis: daily ring totals → discrete, time-bounded samples.

Health stores want samples rather than totals.  WHOOP gives no timing for
most of the credit, so the samples are laid out deterministically:

    Energy    equal hourly buckets across the active day
    Exercise  ``ceil(minutes / block)`` blocks, one per equal slot of the
              exercise window, shifted inside the slot by a stride so
              they do not all start on the hour
    Stand     one hour-long sample per credited hour

Samples of one type never overlap and all fall inside the metrics' date.
A zero total produces no samples for that type.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Iterable, Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.activity import SAMPLE_UNITS, AppleStyleMetrics, DiscreteSample, SampleType
from app.vigor.errors import InvalidInputError

logger = logging.getLogger(__name__)

_TYPE_ORDER = {t: i for i, t in enumerate(SampleType)}


class SynthesisConfig(BaseModel):
    """Time layout for synthesised samples (local clock hours)."""

    energy_start_hour: int = Field(6, ge=0, le=23)
    energy_end_hour: int = Field(22, ge=1, le=24)
    exercise_start_hour: int = Field(7, ge=0, le=23)
    exercise_end_hour: int = Field(21, ge=1, le=24)
    exercise_block_minutes: float = Field(10.0, gt=0.0)
    exercise_offset_stride: int = Field(17, ge=0)

    @model_validator(mode="after")
    def _check_windows(self) -> SynthesisConfig:
        if self.energy_start_hour >= self.energy_end_hour:
            raise ValueError("energy window must be non-empty")
        if self.exercise_start_hour >= self.exercise_end_hour:
            raise ValueError("exercise window must be non-empty")
        return self

    @property
    def exercise_window_minutes(self) -> float:
        return (self.exercise_end_hour - self.exercise_start_hour) * 60.0


DEFAULT_SYNTHESIS_CONFIG = SynthesisConfig()


def _at(day: datetime.date, minutes: float) -> datetime.datetime:
    """Midnight of *day* plus *minutes*."""
    return datetime.datetime.combine(day, datetime.time()) + datetime.timedelta(minutes=minutes)


def _sample(
    kind: SampleType,
    start: datetime.datetime,
    end: datetime.datetime,
    quantity: float,
) -> DiscreteSample:
    return DiscreteSample(type=kind, start=start, end=end, quantity=quantity, unit=SAMPLE_UNITS[kind])


# ======================================================================
# Per-type layout
# ======================================================================


def energy_samples(
    kcal: float,
    day: datetime.date,
    config: SynthesisConfig = DEFAULT_SYNTHESIS_CONFIG,
) -> list[DiscreteSample]:
    if kcal <= 0:
        return []
    hours = list(range(config.energy_start_hour, config.energy_end_hour))
    share = kcal / len(hours)
    samples = []
    for i, hour in enumerate(hours):
        # Last bucket absorbs rounding so the sum is exact.
        quantity = share if i < len(hours) - 1 else kcal - share * (len(hours) - 1)
        samples.append(_sample(SampleType.ENERGY, _at(day, hour * 60), _at(day, (hour + 1) * 60), quantity))
    return samples


def exercise_samples(
    minutes: float,
    day: datetime.date,
    config: SynthesisConfig = DEFAULT_SYNTHESIS_CONFIG,
) -> list[DiscreteSample]:
    """Spread *minutes* over the exercise window in short blocks.

    Block ``i`` sits in its own slot of ``window / n`` minutes and is
    offset into the slot's free time by ``(stride × i) mod 60`` sixtieths.

    The window is a hard limit.  A transform can legitimately report more
    minutes than it holds (a workout longer than the window sets the
    floor), and such totals are rejected here rather than spilled outside
    the window or truncated.

    Raises:
        InvalidInputError: *minutes* does not fit in the window.
    """
    if minutes <= 0:
        return []
    window = config.exercise_window_minutes
    if minutes > window:
        raise InvalidInputError(
            f"{minutes:g} exercise minutes do not fit in the "
            f"{config.exercise_start_hour:02d}:00-{config.exercise_end_hour:02d}:00 window"
        )

    n = math.ceil(minutes / config.exercise_block_minutes)
    slot = window / n
    block = minutes / n
    free = slot - block
    window_start = config.exercise_start_hour * 60.0

    samples = []
    for i in range(n):
        quantity = block if i < n - 1 else minutes - block * (n - 1)
        offset = free * ((config.exercise_offset_stride * i) % 60) / 60.0
        start = window_start + i * slot + offset
        samples.append(_sample(SampleType.EXERCISE, _at(day, start), _at(day, start + quantity), quantity))
    return samples


def stand_samples(hours: Iterable[int], day: datetime.date) -> list[DiscreteSample]:
    return [
        _sample(SampleType.STAND, _at(day, h * 60), _at(day, (h + 1) * 60), 1.0)
        for h in sorted(set(hours))
    ]


# ======================================================================
# Entry points
# ======================================================================


def synthesize(
    metrics: AppleStyleMetrics,
    date: Optional[datetime.date] = None,
    config: Optional[SynthesisConfig] = None,
) -> list[DiscreteSample]:
    """Turn daily totals into samples, sorted by type then start time.

    Raises:
        InvalidInputError: *date* differs from ``metrics.date`` or the
            exercise minutes exceed the window.
    """
    cfg = config or DEFAULT_SYNTHESIS_CONFIG
    day = date or metrics.date
    if day != metrics.date:
        raise InvalidInputError(f"Sample date {day} does not match metrics date {metrics.date}")

    samples = (
        energy_samples(metrics.active_energy_kcal, day, cfg)
        + exercise_samples(metrics.exercise_minutes, day, cfg)
        + stand_samples(metrics.stand_hours, day)
    )
    samples.sort(key=lambda s: (_TYPE_ORDER[s.type], s.start))
    logger.debug("Synthesised %d sample(s) for %s", len(samples), day)
    return samples


def totals(samples: Iterable[DiscreteSample]) -> dict[SampleType, float]:
    """Summed quantity per sample type (every type present, zero if empty)."""
    result = {t: 0.0 for t in SampleType}
    for s in samples:
        result[s.type] += s.quantity
    return result
