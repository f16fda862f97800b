"""
Daily metrics repository.

Handles database operations for the DailyMetrics model.
"""

import datetime
from typing import Optional

from sqlmodel import Session, select

from app.models.daily_metrics import DailyMetrics


class DailyMetricsRepository:
    """Repository for DailyMetrics database operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry: DailyMetrics) -> DailyMetrics:
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def get_by_date(self, date: datetime.date) -> Optional[DailyMetrics]:
        statement = select(DailyMetrics).where(DailyMetrics.date == date)
        return self.session.exec(statement).first()

    def get_range(
        self, start: datetime.date, end: datetime.date,
    ) -> list[DailyMetrics]:
        """Get entries within a date range (inclusive), oldest first."""
        statement = (
            select(DailyMetrics)
            .where(
                DailyMetrics.date >= start,
                DailyMetrics.date <= end,
            )
            .order_by(DailyMetrics.date)
        )
        return list(self.session.exec(statement).all())

    def get_all(self, skip: int = 0, limit: int = 100) -> list[DailyMetrics]:
        """Get all entries with pagination, newest first."""
        statement = (
            select(DailyMetrics)
            .order_by(DailyMetrics.date.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(self.session.exec(statement).all())

    def update(self, entry: DailyMetrics) -> DailyMetrics:
        entry.updated_at = datetime.datetime.utcnow()
        self.session.add(entry)
        self.session.commit()
        self.session.refresh(entry)
        return entry

    def delete(self, entry: DailyMetrics) -> None:
        self.session.delete(entry)
        self.session.commit()
