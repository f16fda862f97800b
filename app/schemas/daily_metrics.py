"""
Daily metrics API schemas.

Request/response models for the stored per-day recovery inputs and the
ad-hoc scoring request.
"""

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.health import Baseline, HealthMetrics


# Request schemas
class DailyMetricsCreate(HealthMetrics):
    """Readings for one day.  The date comes from the URL path.

    On upsert only the fields present in the request overwrite stored
    values; an explicit ``null`` clears a reading.
    """
    pass


# Response schemas
class DailyMetricsResponse(HealthMetrics):
    """Stored daily readings in API responses."""

    model_config = ConfigDict(from_attributes=True, allow_inf_nan=False)

    id: int
    date: datetime.date
    created_at: datetime.datetime
    updated_at: datetime.datetime


class RecoveryScoreRequest(BaseModel):
    """Score arbitrary readings against a caller-supplied baseline."""

    current: HealthMetrics
    baseline: Baseline = Field(default_factory=Baseline)
    date: Optional[datetime.date] = Field(
        None,
        description="Day the score refers to (echoed in the result)",
    )
