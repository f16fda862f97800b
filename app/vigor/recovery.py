"""
Recovery score: four weighted, baseline-relative signals.

Model
-----
Each metric category produces a 0-100 sub-score:

    Sleep        fixed optimal band [7, 9] h, linear falloff outside
    HRV          z = (current - mean) / sigma, higher is better
    Resting HR   z = (current - mean) / sigma, lower is better
    Temperature  |current - mean|, either direction is penalised

The overall score is the weighted mean of the sub-scores that could be
computed:

    score = sum(w_c * s_c) / sum(w_c)       over present categories c

which is the same as renormalising the nominal weights of the present
categories so that they sum to 1.0 and taking a plain weighted sum.  A
category is *present* when it has a current reading and, for HRV, resting
HR and temperature, a usable personal baseline.

Design choices
--------------
1. **Graceful degradation**: a missing category gives up its weight to
   the others in proportion to their nominal weights.  Nothing is
   imputed.
2. **Population sleep band**: sleep need is treated as a constant, so
   sleep scores without any history.  Sleep alone is enough to score.
3. **Saturating maps**: every sub-score goes through a clamp, so extreme
   z-scores saturate at 0 or 100 instead of leaking out of range.
4. **Sigma floor**: a perfectly flat history has sigma = 0; the z-score
   uses ``max(sigma, floor)`` per metric so it stays finite.
"""

from __future__ import annotations

import datetime
import logging
import math
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.health import (
    Baseline,
    HealthMetrics,
    MetricBaseline,
    MetricCategory,
    Missing,
    MissingReason,
    Present,
    Reading,
    RecoveryResult,
    ScoreCategory,
)
from app.vigor.errors import InsufficientDataError

logger = logging.getLogger(__name__)

# ======================================================================
# Configuration
# ======================================================================

_NOMINAL_WEIGHTS: dict[MetricCategory, float] = {
    MetricCategory.SLEEP: 0.30,
    MetricCategory.HRV: 0.30,
    MetricCategory.RESTING_HR: 0.25,
    MetricCategory.TEMPERATURE: 0.15,
}

# Minimum sigma used in z-scores (metric units).
_SIGMA_FLOOR: dict[MetricCategory, float] = {
    MetricCategory.HRV: 1.0,
    MetricCategory.RESTING_HR: 0.5,
    MetricCategory.TEMPERATURE: 0.05,
}

# (max |deviation| in °C, score); first band that fits wins.
_TEMPERATURE_BANDS: list[tuple[float, float]] = [
    (0.5, 100.0),
    (1.0, 85.0),
    (1.5, 70.0),
    (2.0, 50.0),
]


class ZScoreMap(BaseModel):
    """Piecewise-linear map from a signed z-score to 0-100.

    ``z`` is oriented so that positive means "better than baseline".
    """

    neutral: float = Field(..., ge=0.0, le=100.0)
    gain_per_sd: float = Field(..., ge=0.0)
    loss_per_sd: float = Field(..., ge=0.0)

    def apply(self, z: float) -> float:
        if z >= 0:
            raw = self.neutral + z * self.gain_per_sd
        else:
            raw = self.neutral + z * self.loss_per_sd
        return _clamp(raw, 0.0, 100.0)


class RecoveryConfig(BaseModel):
    """Configuration for the recovery score computation."""

    weights: dict[MetricCategory, float] = Field(
        default_factory=lambda: dict(_NOMINAL_WEIGHTS),
    )

    # Sleep band and falloff (points lost per hour outside the band).
    sleep_optimal_min: float = 7.0
    sleep_optimal_max: float = 9.0
    sleep_short_loss_per_hour: float = Field(20.0, gt=0.0)
    sleep_long_loss_per_hour: float = Field(10.0, gt=0.0)

    hrv_map: ZScoreMap = Field(
        default_factory=lambda: ZScoreMap(neutral=70.0, gain_per_sd=15.0, loss_per_sd=20.0),
    )
    rhr_map: ZScoreMap = Field(
        default_factory=lambda: ZScoreMap(neutral=80.0, gain_per_sd=10.0, loss_per_sd=20.0),
    )
    sigma_floor: dict[MetricCategory, float] = Field(
        default_factory=lambda: dict(_SIGMA_FLOOR),
    )

    temperature_bands: list[tuple[float, float]] = Field(
        default_factory=lambda: list(_TEMPERATURE_BANDS),
    )
    temperature_tail_loss_per_c: float = 10.0
    temperature_floor: float = 30.0


DEFAULT_RECOVERY_CONFIG = RecoveryConfig()


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ======================================================================
# Per-category sub-scores
# ======================================================================


def sleep_score(hours: float, config: Optional[RecoveryConfig] = None) -> float:
    """Score a sleep duration against the fixed optimal band.

    100 anywhere inside the band; linear loss outside it, floored at 0.
    """
    cfg = config or DEFAULT_RECOVERY_CONFIG
    if cfg.sleep_optimal_min <= hours <= cfg.sleep_optimal_max:
        return 100.0
    if hours < cfg.sleep_optimal_min:
        deficit = cfg.sleep_optimal_min - hours
        return max(0.0, 100.0 - deficit * cfg.sleep_short_loss_per_hour)
    excess = hours - cfg.sleep_optimal_max
    return max(0.0, 100.0 - excess * cfg.sleep_long_loss_per_hour)


def _z_score(
    current: float,
    baseline: MetricBaseline,
    sigma_floor: float,
) -> float:
    sigma = max(baseline.stddev, sigma_floor)
    return (current - baseline.mean) / sigma


def hrv_score(
    current: float,
    baseline: MetricBaseline,
    config: Optional[RecoveryConfig] = None,
) -> float:
    """Higher HRV than baseline improves the score."""
    cfg = config or DEFAULT_RECOVERY_CONFIG
    z = _z_score(current, baseline, cfg.sigma_floor[MetricCategory.HRV])
    return cfg.hrv_map.apply(z)


def resting_hr_score(
    current: float,
    baseline: MetricBaseline,
    config: Optional[RecoveryConfig] = None,
) -> float:
    """Lower resting HR than baseline improves the score."""
    cfg = config or DEFAULT_RECOVERY_CONFIG
    z = _z_score(current, baseline, cfg.sigma_floor[MetricCategory.RESTING_HR])
    return cfg.rhr_map.apply(-z)


def temperature_score(
    current: float,
    baseline: MetricBaseline,
    config: Optional[RecoveryConfig] = None,
) -> float:
    """Any deviation from the baseline mean, high or low, lowers the score."""
    cfg = config or DEFAULT_RECOVERY_CONFIG
    deviation = abs(current - baseline.mean)
    for limit, band_score in cfg.temperature_bands:
        if deviation <= limit:
            return band_score
    last_limit, last_score = cfg.temperature_bands[-1]
    tail = last_score - (deviation - last_limit) * cfg.temperature_tail_loss_per_c
    return max(cfg.temperature_floor, tail)


# ======================================================================
# Readiness of each category
# ======================================================================


def _resolve_reading(
    category: MetricCategory,
    current: HealthMetrics,
    baseline: Baseline,
) -> Reading:
    """Current reading for *category*, downgraded to Missing without baseline."""
    reading = current.reading(category)
    if isinstance(reading, Missing) or category is MetricCategory.SLEEP:
        return reading
    if baseline.for_category(category) is None:
        return Missing(reason=MissingReason.NO_BASELINE)
    return reading


def _sub_score(
    category: MetricCategory,
    value: float,
    baseline: Baseline,
    config: RecoveryConfig,
) -> float:
    if category is MetricCategory.SLEEP:
        return sleep_score(value, config)

    metric_baseline = baseline.for_category(category)
    if metric_baseline is None:
        # _resolve_reading already filters these out.
        raise ValueError(f"No baseline for {category.value}")

    if category is MetricCategory.HRV:
        return hrv_score(value, metric_baseline, config)
    if category is MetricCategory.RESTING_HR:
        return resting_hr_score(value, metric_baseline, config)
    return temperature_score(value, metric_baseline, config)


def redistribute_weights(
    present: list[MetricCategory],
    weights: dict[MetricCategory, float],
) -> dict[MetricCategory, float]:
    """Renormalise the nominal weights of *present* so they sum to 1.0.

    Relative ratios between the present categories are preserved.
    """
    total = sum(weights[c] for c in present)
    if total <= 0:
        return {}
    return {c: weights[c] / total for c in present}


# ======================================================================
# Main entry point
# ======================================================================


def score(
    current: HealthMetrics,
    baseline: Baseline,
    config: Optional[RecoveryConfig] = None,
    date: Optional[datetime.date] = None,
) -> RecoveryResult:
    """Compute the recovery score for one day.

    Args:
        current: Today's readings.
        baseline: Personal baseline (from :class:`BaselineTracker`).
        config: Optional :class:`RecoveryConfig` override.
        date: Optional day the score refers to (echoed in the result).

    Returns:
        :class:`RecoveryResult` with the overall score, sub-scores,
        missing categories and the weights actually applied.

    Raises:
        InsufficientDataError: No category could be scored.
    """
    cfg = config or DEFAULT_RECOVERY_CONFIG

    values: dict[MetricCategory, float] = {}
    missing: dict[MetricCategory, MissingReason] = {}

    for category in MetricCategory:
        reading = _resolve_reading(category, current, baseline)
        if isinstance(reading, Present):
            values[category] = reading.value
        else:
            missing[category] = reading.reason

    if not values:
        raise InsufficientDataError(c.value for c in missing)

    sub_scores = {
        c: _sub_score(c, v, baseline, cfg) for c, v in values.items()
    }
    applied = redistribute_weights(list(sub_scores), cfg.weights)
    if not applied:
        raise InsufficientDataError(c.value for c in MetricCategory)

    overall = sum(applied[c] * sub_scores[c] for c in applied)
    if math.isnan(overall):
        raise ValueError("Recovery score evaluated to NaN")
    overall = _clamp(overall, 0.0, 100.0)

    if missing:
        logger.debug(
            "Recovery score: missing %s, redistributed weights %s",
            sorted(c.value for c in missing),
            {c.value: round(w, 4) for c, w in applied.items()},
        )

    return RecoveryResult(
        date=date,
        score=overall,
        category=ScoreCategory.from_score(overall),
        sub_scores=sub_scores,
        missing=missing,
        applied_weights=applied,
        inputs=current,
        hrv_baseline=baseline.hrv.mean if baseline.hrv else None,
        rhr_baseline=baseline.resting_hr.mean if baseline.resting_hr else None,
        temperature_baseline=baseline.temperature.mean if baseline.temperature else None,
    )
