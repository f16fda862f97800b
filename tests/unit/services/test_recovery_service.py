"""
Tests for the daily metrics and recovery services against an in-memory
SQLite database.
"""

import datetime

import pytest
from fastapi import HTTPException
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.db.init_db import init_db
from app.schemas.daily_metrics import DailyMetricsCreate
from app.schemas.health import Baseline, HealthMetrics, MetricCategory, MissingReason
from app.services.daily_metrics_service import DailyMetricsService
from app.services.recovery_service import RecoveryService
from app.vigor.baseline import BaselineConfig

DAY_1 = datetime.date(2026, 1, 1)
CONFIG = BaselineConfig(window_days=30, min_days=5)


def _day(n: int) -> datetime.date:
    return DAY_1 + datetime.timedelta(days=n - 1)


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    with Session(engine) as s:
        yield s
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def metrics(session):
    return DailyMetricsService(session)


@pytest.fixture
def recovery(session):
    return RecoveryService(session, baseline_config=CONFIG)


def _seed_history(metrics: DailyMetricsService, days: range) -> None:
    """HRV alternating 55/65 (mean 60), flat resting HR 55, no temperature."""
    for n in days:
        metrics.upsert(_day(n), DailyMetricsCreate(
            sleep_hours=7.5,
            hrv_ms=55.0 if n % 2 else 65.0,
            resting_hr_bpm=55.0,
        ))


# ======================================================================
# DailyMetricsService
# ======================================================================


class TestDailyMetricsService:
    """Date-keyed upsert and lookups."""

    def test_upsert_creates_then_updates(self, metrics):
        entry, created = metrics.upsert(_day(1), DailyMetricsCreate(sleep_hours=7.0, hrv_ms=50.0))
        assert created
        assert entry.date == _day(1)

        entry, created = metrics.upsert(_day(1), DailyMetricsCreate(hrv_ms=62.0))
        assert not created
        assert entry.hrv_ms == 62.0
        assert entry.sleep_hours == 7.0

    def test_explicit_null_clears_reading(self, metrics):
        metrics.upsert(_day(1), DailyMetricsCreate(sleep_hours=7.0, hrv_ms=50.0))
        entry, _ = metrics.upsert(_day(1), DailyMetricsCreate(hrv_ms=None))
        assert entry.hrv_ms is None
        assert entry.sleep_hours == 7.0

    def test_get_missing_date(self, metrics):
        with pytest.raises(HTTPException) as exc_info:
            metrics.get_by_date(_day(3))
        assert exc_info.value.status_code == 404

    def test_range_is_inclusive_and_ordered(self, metrics):
        _seed_history(metrics, range(1, 8))
        entries = metrics.get_range(_day(2), _day(5))
        assert [e.date for e in entries] == [_day(n) for n in range(2, 6)]

    def test_get_all_newest_first(self, metrics):
        _seed_history(metrics, range(1, 4))
        assert [e.date for e in metrics.get_all()] == [_day(3), _day(2), _day(1)]

    def test_delete(self, metrics):
        _seed_history(metrics, range(1, 2))
        metrics.delete_by_date(_day(1))
        with pytest.raises(HTTPException):
            metrics.delete_by_date(_day(1))

    def test_readings_keep_missing_fields(self, metrics):
        _seed_history(metrics, range(1, 3))
        readings = metrics.get_readings(_day(1), _day(2))
        assert [r.date for r in readings] == [_day(1), _day(2)]
        assert readings[0].temperature_deviation_c is None


# ======================================================================
# RecoveryService
# ======================================================================


class TestRecoveryService:
    """Scoring a stored day against the days before it."""

    def test_scores_against_trailing_baseline(self, metrics, recovery):
        _seed_history(metrics, range(1, 11))
        metrics.upsert(_day(11), DailyMetricsCreate(sleep_hours=8.0, hrv_ms=60.0, resting_hr_bpm=55.0))

        result = recovery.score_day(_day(11))

        assert result.date == _day(11)
        assert result.missing == {MetricCategory.TEMPERATURE: MissingReason.NO_READING}
        assert result.hrv_baseline == pytest.approx(60.0)
        assert result.rhr_baseline == pytest.approx(55.0)
        # (0.30*100 + 0.30*70 + 0.25*80) / 0.85
        assert result.score == pytest.approx(71.0 / 0.85)

    def test_short_history_scores_sleep_only(self, metrics, recovery):
        _seed_history(metrics, range(1, 4))
        metrics.upsert(_day(4), DailyMetricsCreate(sleep_hours=8.0, hrv_ms=60.0, resting_hr_bpm=55.0))

        result = recovery.score_day(_day(4))

        assert result.missing[MetricCategory.HRV] is MissingReason.NO_BASELINE
        assert result.applied_weights == {MetricCategory.SLEEP: pytest.approx(1.0)}
        assert result.score == 100.0

    def test_history_outside_window_is_ignored(self, metrics, recovery):
        _seed_history(metrics, range(1, 11))
        metrics.upsert(_day(60), DailyMetricsCreate(hrv_ms=60.0, resting_hr_bpm=55.0))

        with pytest.raises(HTTPException) as exc_info:
            recovery.score_day(_day(60))
        assert exc_info.value.status_code == 422
        assert "hrv" in exc_info.value.detail["missing"]

    def test_ad_hoc_scoring_without_session(self):
        service = RecoveryService(baseline_config=CONFIG)
        result = service.score_readings(HealthMetrics(sleep_hours=8.0), Baseline())
        assert result.score == 100.0
        with pytest.raises(HTTPException) as exc_info:
            service.score_readings(HealthMetrics(), Baseline())
        assert exc_info.value.status_code == 422

    def test_unknown_day(self, recovery):
        with pytest.raises(HTTPException) as exc_info:
            recovery.score_day(_day(1))
        assert exc_info.value.status_code == 404
