"""
Daily metrics service.

Business logic for storing the per-day recovery inputs.
"""

import datetime
import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from app.db.repositories.daily_metrics import DailyMetricsRepository
from app.models.daily_metrics import DailyMetrics
from app.schemas.daily_metrics import DailyMetricsCreate, DailyMetricsResponse
from app.schemas.health import DailyReading

logger = logging.getLogger(__name__)


class DailyMetricsService:
    """Service for daily metrics business logic."""

    def __init__(self, session: Session):
        self.repository = DailyMetricsRepository(session)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def upsert(
        self, date: datetime.date, data: DailyMetricsCreate,
    ) -> tuple[DailyMetricsResponse, bool]:
        """Create or update the entry for the given date.

        Returns:
            Tuple of (response, created) where created is True if new entry.
        """
        values = data.model_dump(exclude_unset=True)
        existing = self.repository.get_by_date(date)

        if existing:
            for key, value in values.items():
                setattr(existing, key, value)
            entry = self.repository.update(existing)
            logger.info("Updated daily metrics for %s (%s)", date, sorted(values))
            return DailyMetricsResponse.model_validate(entry), False

        entry = self.repository.create(DailyMetrics(date=date, **values))
        logger.info("Created daily metrics for %s (%s)", date, sorted(values))
        return DailyMetricsResponse.model_validate(entry), True

    def get_by_date(self, date: datetime.date) -> DailyMetricsResponse:
        return DailyMetricsResponse.model_validate(self._get_entry(date))

    def get_range(
        self, start: datetime.date, end: datetime.date,
    ) -> list[DailyMetricsResponse]:
        entries = self.repository.get_range(start, end)
        return [DailyMetricsResponse.model_validate(e) for e in entries]

    def get_all(self, skip: int = 0, limit: int = 100) -> list[DailyMetricsResponse]:
        entries = self.repository.get_all(skip, limit)
        return [DailyMetricsResponse.model_validate(e) for e in entries]

    def get_readings(
        self, start: datetime.date, end: datetime.date,
    ) -> list[DailyReading]:
        """Stored days in ``[start, end]`` as scoring inputs, oldest first."""
        return [
            DailyReading(
                date=e.date,
                sleep_hours=e.sleep_hours,
                hrv_ms=e.hrv_ms,
                resting_hr_bpm=e.resting_hr_bpm,
                temperature_deviation_c=e.temperature_deviation_c,
            )
            for e in self.repository.get_range(start, end)
        ]

    def delete_by_date(self, date: datetime.date) -> None:
        entry = self._get_entry(date)
        self.repository.delete(entry)
        logger.info("Deleted daily metrics for %s", date)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_entry(self, date: datetime.date) -> DailyMetrics:
        entry = self.repository.get_by_date(date)
        if not entry:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No daily metrics for {date}",
            )
        return entry
