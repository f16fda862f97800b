"""
Recovery service.

Scores a stored day against the baseline built from the days before it.
"""

import datetime
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.config import settings
from app.schemas.health import Baseline, HealthMetrics, RecoveryResult
from app.services.daily_metrics_service import DailyMetricsService
from app.vigor.baseline import BaselineConfig, BaselineTracker
from app.vigor.errors import InsufficientDataError
from app.vigor.recovery import RecoveryConfig, score

logger = logging.getLogger(__name__)


def default_baseline_config() -> BaselineConfig:
    return BaselineConfig(
        window_days=settings.BASELINE_WINDOW_DAYS,
        min_days=settings.BASELINE_MIN_DAYS,
    )


class RecoveryService:
    """Service for recovery scoring.

    Scoring stored days needs a session; ad-hoc scoring does not.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        baseline_config: Optional[BaselineConfig] = None,
        recovery_config: Optional[RecoveryConfig] = None,
    ):
        self.metrics = DailyMetricsService(session) if session is not None else None
        self.baseline_config = baseline_config or default_baseline_config()
        self.recovery_config = recovery_config

    def score_day(self, date: datetime.date) -> RecoveryResult:
        """Score the stored readings of *date*.

        Raises:
            HTTPException: 404 if the day has no entry, 422 if nothing on it
                can be scored.
        """
        if self.metrics is None:
            raise RuntimeError("RecoveryService.score_day requires a database session")
        self.metrics.get_by_date(date)  # 404 when absent
        window_start = date - datetime.timedelta(days=self.baseline_config.window_days)
        readings = self.metrics.get_readings(window_start, date)
        history = [r for r in readings if r.date < date]
        current = readings[-1]

        tracker = BaselineTracker.from_readings(history, self.baseline_config)
        baseline = tracker.current_baseline(as_of=date)
        logger.info("Scoring %s against %d prior day(s)", date, len(history))

        return self.score_readings(current.to_health_metrics(), baseline, date)

    def score_readings(
        self,
        current: HealthMetrics,
        baseline: Baseline,
        date: Optional[datetime.date] = None,
    ) -> RecoveryResult:
        try:
            return score(current, baseline, self.recovery_config, date=date)
        except InsufficientDataError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": str(exc), "missing": exc.missing},
            ) from exc
