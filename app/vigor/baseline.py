"""
Personal baseline: trailing mean and standard deviation per metric.

The tracker keeps one value per calendar day for HRV, resting HR and
temperature.  A baseline queried *as of* day ``D`` uses the window

    [D - window_days, D - 1]

i.e. the ``window_days`` calendar days strictly before ``D``, so a day
is always compared against history that does not include itself.

Rules
-----
1. Only days on which a metric was recorded count for that metric.  A day
   with HRV but no temperature contributes to HRV only.
2. A metric with fewer than ``min_days`` recorded days in the window has
   no baseline (``None``), which the recovery score treats as missing.
3. Standard deviation is the *sample* standard deviation (N - 1).
4. The window is a fixed trailing duration, not a count.  Entries older
   than the window are evicted on every :meth:`BaselineTracker.record`
   and :meth:`BaselineTracker.current_baseline` call.

The tracker is the only long-lived state in :mod:`app.vigor`.  It is owned
by its caller and is not safe for concurrent writers.
"""

from __future__ import annotations

import datetime
import logging
import statistics
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from app.schemas.health import (
    BASELINE_CATEGORIES,
    Baseline,
    DailyReading,
    MetricBaseline,
    MetricCategory,
)

logger = logging.getLogger(__name__)


class BaselineConfig(BaseModel):
    """Window configuration for :class:`BaselineTracker`."""

    window_days: int = Field(30, ge=1, le=365)
    min_days: int = Field(5, ge=2)


DEFAULT_BASELINE_CONFIG = BaselineConfig()


class BaselineTracker:
    """Rolling per-metric statistics over a trailing calendar window."""

    def __init__(self, config: Optional[BaselineConfig] = None):
        self.config = config or DEFAULT_BASELINE_CONFIG
        self._values: dict[MetricCategory, dict[datetime.date, float]] = {
            c: {} for c in BASELINE_CATEGORIES
        }

    @classmethod
    def from_readings(
        cls,
        readings: Iterable[DailyReading],
        config: Optional[BaselineConfig] = None,
    ) -> BaselineTracker:
        """Build a tracker pre-loaded with *readings* (any order)."""
        tracker = cls(config)
        for r in sorted(readings, key=lambda r: r.date):
            tracker.record(
                r.date,
                hrv=r.hrv_ms,
                rhr=r.resting_hr_bpm,
                temp=r.temperature_deviation_c,
            )
        return tracker

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def record(
        self,
        day: datetime.date,
        hrv: Optional[float] = None,
        rhr: Optional[float] = None,
        temp: Optional[float] = None,
    ) -> None:
        """Store a day's readings.  ``None`` fields are not stored.

        Recording the same day twice overwrites that metric's value.
        """
        for category, value in (
            (MetricCategory.HRV, hrv),
            (MetricCategory.RESTING_HR, rhr),
            (MetricCategory.TEMPERATURE, temp),
        ):
            if value is not None:
                self._values[category][day] = float(value)

        newest = self.latest_day
        if newest is not None:
            # Keep everything a query for the day after `newest` can see.
            self._evict_before(newest - datetime.timedelta(days=self.config.window_days - 1))

    def _evict_before(self, cutoff: datetime.date) -> None:
        for category, by_day in self._values.items():
            stale = [d for d in by_day if d < cutoff]
            for d in stale:
                del by_day[d]
            if stale:
                logger.debug(
                    "Evicted %d %s reading(s) older than %s",
                    len(stale), category.value, cutoff,
                )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def latest_day(self) -> Optional[datetime.date]:
        days = [d for by_day in self._values.values() for d in by_day]
        return max(days) if days else None

    def recorded_days(self, category: MetricCategory) -> list[datetime.date]:
        """Days currently held for *category*, oldest first."""
        return sorted(self._values[category])

    def current_baseline(self, as_of: Optional[datetime.date] = None) -> Baseline:
        """Compute the baseline as of *as_of*.

        Args:
            as_of: Day being scored.  Defaults to the day after the most
                recent recorded day.

        Returns:
            :class:`Baseline`; metrics with too few days are ``None``.
        """
        if as_of is None:
            newest = self.latest_day
            if newest is None:
                return Baseline()
            as_of = newest + datetime.timedelta(days=1)

        window_start = as_of - datetime.timedelta(days=self.config.window_days)
        window_end = as_of - datetime.timedelta(days=1)
        self._evict_before(window_start)

        metrics: dict[str, Optional[MetricBaseline]] = {}
        for category in BASELINE_CATEGORIES:
            values = [
                v for d, v in self._values[category].items()
                if window_start <= d <= window_end
            ]
            metrics[category.value] = self._summarise(values, window_start, window_end)
            logger.debug(
                "Baseline %s as of %s: %d day(s)%s",
                category.value, as_of, len(values),
                "" if metrics[category.value] else " (insufficient)",
            )

        return Baseline(**metrics)

    def _summarise(
        self,
        values: list[float],
        window_start: datetime.date,
        window_end: datetime.date,
    ) -> Optional[MetricBaseline]:
        if len(values) < self.config.min_days:
            return None
        return MetricBaseline(
            mean=statistics.fmean(values),
            stddev=statistics.stdev(values),
            sample_count=len(values),
            window_start=window_start,
            window_end=window_end,
        )
