"""SQLModel database models."""

from app.models.daily_metrics import DailyMetrics

__all__ = [
    "DailyMetrics",
]
