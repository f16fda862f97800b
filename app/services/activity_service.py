"""
Activity service.

Runs the generosity transform and sample synthesis for API requests.
"""

import logging
from typing import Optional

from fastapi import HTTPException, status

from app.core.config import settings
from app.schemas.activity import ActivitySamplesResponse, AppleStyleMetrics
from app.schemas.whoop import WhoopDailyPayload
from app.vigor.errors import ConfigurationError, InvalidInputError
from app.vigor.generosity import PRESETS, GenerosityConfig, GenerosityTransformer
from app.vigor.samples import synthesize

logger = logging.getLogger(__name__)


class ActivityService:
    """Service for the WHOOP → activity-ring transform."""

    def __init__(self, preset: Optional[str] = None):
        name = preset or settings.DEFAULT_GENEROSITY_PRESET
        try:
            self.transformer = GenerosityTransformer.for_preset(name)
        except ConfigurationError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(exc),
            ) from exc
        self.preset = name

    def transform(
        self, payload: WhoopDailyPayload, waking_hours: Optional[float] = None,
    ) -> AppleStyleMetrics:
        try:
            metrics = self.transformer.transform(payload, waking_hours=waking_hours)
        except InvalidInputError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(exc),
            ) from exc
        logger.info(
            "Transformed %s with preset %s: %.0f kcal, %.0f min, %d stand h",
            payload.date, self.preset, metrics.active_energy_kcal,
            metrics.exercise_minutes, metrics.stand_hour_count,
        )
        return metrics

    def samples(
        self, payload: WhoopDailyPayload, waking_hours: Optional[float] = None,
    ) -> ActivitySamplesResponse:
        metrics = self.transform(payload, waking_hours)
        try:
            samples = synthesize(metrics)
        except InvalidInputError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(exc),
            ) from exc
        return ActivitySamplesResponse(metrics=metrics, samples=samples)

    @staticmethod
    def list_presets() -> dict[str, GenerosityConfig]:
        return {preset.value: config for preset, config in PRESETS.items()}
