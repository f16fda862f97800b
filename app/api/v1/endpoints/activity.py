"""
Activity endpoints.

WHOOP daily payload → activity-ring totals and synthesised samples.
"""

from typing import Optional

from fastapi import APIRouter, Query

from app.schemas.activity import ActivitySamplesResponse, AppleStyleMetrics
from app.schemas.whoop import WhoopDailyPayload
from app.services.activity_service import ActivityService
from app.vigor.generosity import GenerosityConfig

router = APIRouter()


@router.get("/presets", summary="List generosity presets.", response_model=dict[str, GenerosityConfig], )
def list_presets():
    return ActivityService.list_presets()


@router.post("/transform", summary="Transform a WHOOP day into ring totals.", response_model=AppleStyleMetrics, )
def transform(payload: WhoopDailyPayload,
              preset: Optional[str] = Query(None, description="conservative | balanced | generous"),
              waking_hours: Optional[float] = Query(None, ge=0, le=24, description="Override waking hours"), ):
    service = ActivityService(preset)
    return service.transform(payload, waking_hours)


@router.post("/samples", summary="Transform a WHOOP day into discrete samples.",
             response_model=ActivitySamplesResponse, )
def samples(payload: WhoopDailyPayload,
            preset: Optional[str] = Query(None, description="conservative | balanced | generous"),
            waking_hours: Optional[float] = Query(None, ge=0, le=24, description="Override waking hours"), ):
    service = ActivityService(preset)
    return service.samples(payload, waking_hours)
