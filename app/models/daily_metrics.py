"""
Daily health metrics database model.

Defines the daily_metrics table: one row per calendar day with the four
recovery inputs.
"""

import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class DailyMetrics(SQLModel, table=True):
    """
    Daily health readings.

    Every reading is optional; a missing value is stored as NULL and is
    treated as a missing category when scoring.
    """
    __tablename__ = "daily_metrics"
    __table_args__ = (
        UniqueConstraint("date", name="uq_daily_metrics_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    date: datetime.date = Field(nullable=False, index=True)

    sleep_hours: Optional[float] = Field(default=None)
    hrv_ms: Optional[float] = Field(default=None)
    resting_hr_bpm: Optional[float] = Field(default=None)
    temperature_deviation_c: Optional[float] = Field(default=None)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
