"""
Unit tests for sample synthesis.
"""

import datetime

import pytest

from app.schemas.activity import AppleStyleMetrics, SampleType
from app.vigor.errors import InvalidInputError
from app.vigor.samples import (
    SynthesisConfig,
    exercise_samples,
    synthesize,
    totals,
)


# ======================================================================
# Helpers
# ======================================================================

DAY = datetime.date(2026, 3, 14)
MIDNIGHT = datetime.datetime.combine(DAY, datetime.time())


def _make_metrics(
    kcal: float = 480.0,
    minutes: float = 31.0,
    stand: list[int] | None = None,
) -> AppleStyleMetrics:
    return AppleStyleMetrics(
        date=DAY,
        active_energy_kcal=kcal,
        exercise_minutes=minutes,
        stand_hours=[9, 10, 14] if stand is None else stand,
    )


def _of_type(samples, kind):
    return [s for s in samples if s.type is kind]


# ======================================================================
# Energy
# ======================================================================


class TestEnergy:
    """Hourly buckets from 06:00 to 22:00."""

    def test_sixteen_hourly_buckets(self):
        energy = _of_type(synthesize(_make_metrics(kcal=480.0)), SampleType.ENERGY)
        assert len(energy) == 16
        assert energy[0].start == MIDNIGHT + datetime.timedelta(hours=6)
        assert energy[-1].end == MIDNIGHT + datetime.timedelta(hours=22)
        assert all(s.duration_minutes == 60.0 for s in energy)
        assert all(s.quantity == pytest.approx(30.0) for s in energy)
        assert all(s.unit == "kcal" for s in energy)

    def test_sum_is_exact(self):
        energy = _of_type(synthesize(_make_metrics(kcal=511.76)), SampleType.ENERGY)
        assert sum(s.quantity for s in energy) == pytest.approx(511.76, abs=1e-9)

    def test_zero_energy(self):
        assert _of_type(synthesize(_make_metrics(kcal=0.0)), SampleType.ENERGY) == []


# ======================================================================
# Exercise
# ======================================================================


class TestExercise:
    """Short blocks spread across 07:00-21:00."""

    def test_block_count_and_size(self):
        blocks = exercise_samples(31.0, DAY)
        assert len(blocks) == 4
        assert all(b.quantity == pytest.approx(7.75) for b in blocks)
        assert all(b.duration_minutes == pytest.approx(b.quantity) for b in blocks)

    def test_first_block_starts_at_window_start(self):
        blocks = exercise_samples(25.0, DAY)
        assert blocks[0].start == MIDNIGHT + datetime.timedelta(hours=7)

    def test_blocks_are_offset_within_slots(self):
        blocks = exercise_samples(20.0, DAY)
        # Two 420 min slots; block 1 is 17/60 of the way into its free time.
        free = 420.0 - 10.0
        expected = MIDNIGHT + datetime.timedelta(minutes=7 * 60 + 420 + free * 17 / 60)
        assert abs((blocks[1].start - expected).total_seconds()) < 1e-3

    @pytest.mark.parametrize("minutes", [0.0, -5.0])
    def test_no_minutes_no_samples(self, minutes):
        assert exercise_samples(minutes, DAY) == []

    def test_zero_minutes_produce_no_exercise_samples(self):
        samples = synthesize(_make_metrics(minutes=0.0))
        assert _of_type(samples, SampleType.EXERCISE) == []
        assert _of_type(samples, SampleType.ENERGY) != []

    def test_too_many_minutes(self):
        with pytest.raises(InvalidInputError):
            synthesize(_make_metrics(minutes=841.0))

    def test_full_window(self):
        blocks = exercise_samples(840.0, DAY)
        assert len(blocks) == 84
        assert blocks[-1].end == MIDNIGHT + datetime.timedelta(hours=21)

    def test_custom_window(self):
        config = SynthesisConfig(exercise_start_hour=17, exercise_end_hour=19)
        blocks = exercise_samples(30.0, DAY, config)
        assert blocks[0].start == MIDNIGHT + datetime.timedelta(hours=17)
        assert all(b.end <= MIDNIGHT + datetime.timedelta(hours=19) for b in blocks)
        with pytest.raises(InvalidInputError):
            exercise_samples(121.0, DAY, config)


# ======================================================================
# Stand
# ======================================================================


class TestStand:
    """One hour-long sample per credited hour."""

    def test_hour_samples(self):
        stand = _of_type(synthesize(_make_metrics(stand=[8, 9, 23])), SampleType.STAND)
        assert [s.start.hour for s in stand] == [8, 9, 23]
        assert all(s.quantity == 1.0 and s.unit == "hr" for s in stand)
        assert stand[-1].end == MIDNIGHT + datetime.timedelta(days=1)

    def test_no_stand_hours(self):
        assert _of_type(synthesize(_make_metrics(stand=[])), SampleType.STAND) == []


# ======================================================================
# synthesize / totals
# ======================================================================


class TestSynthesize:
    """Layout invariants across all sample types."""

    @pytest.mark.parametrize("minutes", [1.0, 9.5, 10.0, 31.0, 120.0, 839.0, 840.0])
    def test_no_overlap_within_type_and_inside_day(self, minutes):
        samples = synthesize(_make_metrics(minutes=minutes, stand=list(range(24))))
        day_end = MIDNIGHT + datetime.timedelta(days=1)
        for kind in SampleType:
            of_kind = _of_type(samples, kind)
            for a, b in zip(of_kind, of_kind[1:]):
                assert a.end <= b.start
            for s in of_kind:
                assert MIDNIGHT <= s.start < s.end <= day_end

    @pytest.mark.parametrize("kcal,minutes,stand", [
        (480.0, 31.0, [9, 10, 14]),
        (511.76, 47.3, list(range(7, 22))),
        (0.0, 0.0, []),
        (1.0, 840.0, [0, 23]),
    ])
    def test_totals_reconstruct_metrics(self, kcal, minutes, stand):
        metrics = _make_metrics(kcal=kcal, minutes=minutes, stand=stand)
        summed = totals(synthesize(metrics))
        assert summed[SampleType.ENERGY] == pytest.approx(metrics.active_energy_kcal)
        assert summed[SampleType.EXERCISE] == pytest.approx(metrics.exercise_minutes)
        assert summed[SampleType.STAND] == pytest.approx(metrics.stand_hour_count)

    def test_sorted_by_type_then_start(self):
        samples = synthesize(_make_metrics())
        kinds = [s.type for s in samples]
        order = list(SampleType)
        assert kinds == sorted(kinds, key=order.index)
        for kind in SampleType:
            starts = [s.start for s in _of_type(samples, kind)]
            assert starts == sorted(starts)

    def test_date_defaults_to_metrics_date(self):
        samples = synthesize(_make_metrics(), date=DAY)
        assert all(s.start.date() == DAY for s in samples)

    def test_mismatched_date(self):
        with pytest.raises(InvalidInputError):
            synthesize(_make_metrics(), date=DAY + datetime.timedelta(days=1))

    def test_totals_of_nothing(self):
        assert totals([]) == {t: 0.0 for t in SampleType}
