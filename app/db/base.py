"""
Base database configuration.

Import all models here so SQLModel.metadata knows every table.
"""

from app.models.daily_metrics import DailyMetrics  # noqa: F401
