"""
Recovery endpoints.

Score a stored day against its trailing baseline, or score ad-hoc readings.
"""

import datetime

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.db.session import get_db
from app.schemas.daily_metrics import RecoveryScoreRequest
from app.schemas.health import RecoveryResult
from app.services.recovery_service import RecoveryService

router = APIRouter()


@router.post("/score", summary="Score readings against a supplied baseline.", response_model=RecoveryResult, )
def score_readings(request: RecoveryScoreRequest, ):
    """Pure computation; no stored data is read."""
    service = RecoveryService()
    return service.score_readings(request.current, request.baseline, request.date)


@router.get("/{date}", summary="Score a stored day.", response_model=RecoveryResult, )
def score_day(date: datetime.date, db: Session = Depends(get_db), ):
    """
    Uses the stored readings of `date` and a baseline built from the stored
    days before it. Returns 422 when no category can be scored.
    """
    service = RecoveryService(db)
    return service.score_day(date)
