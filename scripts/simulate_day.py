"""What would Vigor report for a typical day?

Builds a synthetic 30-day history plus one WHOOP day, then prints the
recovery score and the activity rings for every generosity preset.

Usage:
    python scripts/simulate_day.py
"""

import datetime
import math
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.schemas.health import DailyReading, HealthMetrics
from app.schemas.whoop import (
    KJ_PER_KCAL,
    Cycle,
    CycleScore,
    HeartRateSample,
    Sleep,
    WhoopDailyPayload,
    Workout,
    WorkoutScore,
)
from app.vigor.baseline import BaselineTracker
from app.vigor.generosity import GenerosityPreset, format_breakdown, transform
from app.vigor.recovery import score
from app.vigor.samples import synthesize, totals

TODAY = datetime.date(2026, 3, 14)
RESTING_HR = 55
MAX_HR = 185


def build_history(days: int = 30) -> list[DailyReading]:
    """Smooth synthetic history: weekly HRV wave, stable RHR and temperature."""
    history = []
    for i in range(days, 0, -1):
        day = TODAY - datetime.timedelta(days=i)
        history.append(DailyReading(
            date=day,
            sleep_hours=7.5 + 0.5 * math.sin(i),
            hrv_ms=60.0 + 6.0 * math.sin(2 * math.pi * i / 7),
            resting_hr_bpm=55.0 + 1.5 * math.cos(2 * math.pi * i / 7),
            # A few days without temperature
            temperature_deviation_c=None if i % 9 == 0 else 0.1 * math.sin(i),
        ))
    return history


def build_payload() -> WhoopDailyPayload:
    """One WHOOP day: a 45 min morning run, restless afternoon, 7 h sleep."""
    samples = []
    start = datetime.datetime.combine(TODAY, datetime.time(6, 0))
    for minute in range(16 * 60):
        t = start + datetime.timedelta(minutes=minute)
        if datetime.time(7, 0) <= t.time() < datetime.time(7, 45):
            bpm = 150
        elif t.minute < 3 and 9 <= t.hour <= 19 and t.hour % 2 == 1:
            bpm = 72
        else:
            bpm = 60
        samples.append(HeartRateSample(time=t, bpm=bpm))

    run = Workout(
        id=1,
        sport_id=0,
        start=datetime.datetime.combine(TODAY, datetime.time(7, 0)),
        end=datetime.datetime.combine(TODAY, datetime.time(7, 45)),
        score=WorkoutScore(kilojoule=180 * KJ_PER_KCAL, average_heart_rate=150, max_heart_rate=168),
    )
    cycle = Cycle(
        id=1,
        start=datetime.datetime.combine(TODAY - datetime.timedelta(days=1), datetime.time(23, 0)),
        score=CycleScore(kilojoule=312 * KJ_PER_KCAL),
    )
    night = Sleep(
        id=1,
        start=datetime.datetime.combine(TODAY - datetime.timedelta(days=1), datetime.time(23, 0)),
        end=datetime.datetime.combine(TODAY, datetime.time(6, 0)),
    )
    return WhoopDailyPayload(
        date=TODAY,
        resting_heart_rate=RESTING_HR,
        max_heart_rate=MAX_HR,
        heart_rate_samples=samples,
        workouts=[run],
        cycles=[cycle],
        sleep=[night],
    )


def main():
    # ── Recovery ────────────────────────────────────────────────────
    tracker = BaselineTracker.from_readings(build_history())
    baseline = tracker.current_baseline(as_of=TODAY)
    today = HealthMetrics(sleep_hours=6.5, hrv_ms=68.0, resting_hr_bpm=53.0, temperature_deviation_c=0.2)
    result = score(today, baseline, date=TODAY)

    print()
    print("=" * 65)
    print(f"  Vigor: {TODAY.strftime('%A %d %B %Y')}")
    print("=" * 65)
    print()
    print(f"  Recovery: {result.score:.0f} ({result.category.value})")
    for category, sub in result.sub_scores.items():
        weight = result.applied_weights[category]
        print(f"    {category.value:<12} {sub:>6.1f}  weight {weight:.2f}")
    for category, reason in result.missing.items():
        print(f"    {category.value:<12} missing ({reason.value})")
    print()

    # ── Activity rings ──────────────────────────────────────────────
    payload = build_payload()
    for preset in GenerosityPreset:
        metrics = transform(payload, preset)
        print("  " + "-" * 63)
        print(f"  Preset: {preset.value}")
        print("  " + "-" * 63)
        for line in format_breakdown(metrics).splitlines():
            print(f"  {line}")
        summed = totals(synthesize(metrics))
        print("  samples: " + ", ".join(f"{t.value}={v:.1f}" for t, v in summed.items()))
        print()


if __name__ == "__main__":
    main()
