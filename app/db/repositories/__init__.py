"""Database repositories."""

from app.db.repositories.daily_metrics import DailyMetricsRepository

__all__ = [
    "DailyMetricsRepository",
]
