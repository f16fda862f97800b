"""Pydantic schemas for request/response validation."""

from app.schemas.health import (
    Baseline,
    DailyReading,
    HealthMetrics,
    MetricBaseline,
    MetricCategory,
    RecoveryResult,
    ScoreCategory,
)
from app.schemas.daily_metrics import (
    DailyMetricsCreate,
    DailyMetricsResponse,
    RecoveryScoreRequest,
)
from app.schemas.whoop import HeartRateSample, Workout, Cycle, Sleep, WhoopDailyPayload
from app.schemas.activity import (
    AppleStyleMetrics,
    MetricsBreakdown,
    DiscreteSample,
    SampleType,
    ActivitySamplesResponse,
)

__all__ = [
    "Baseline",
    "DailyReading",
    "HealthMetrics",
    "MetricBaseline",
    "MetricCategory",
    "RecoveryResult",
    "ScoreCategory",
    "DailyMetricsCreate",
    "DailyMetricsResponse",
    "RecoveryScoreRequest",
    "HeartRateSample",
    "Workout",
    "Cycle",
    "Sleep",
    "WhoopDailyPayload",
    "AppleStyleMetrics",
    "MetricsBreakdown",
    "DiscreteSample",
    "SampleType",
    "ActivitySamplesResponse",
]
