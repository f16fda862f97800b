"""Business logic services."""

from app.services.daily_metrics_service import DailyMetricsService
from app.services.recovery_service import RecoveryService
from app.services.activity_service import ActivityService

__all__ = [
    "DailyMetricsService",
    "RecoveryService",
    "ActivityService",
]
