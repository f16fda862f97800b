"""
Daily metrics endpoints.

Per-day recovery input CRUD with date-based upsert.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from app.db.session import get_db
from app.schemas.daily_metrics import DailyMetricsCreate, DailyMetricsResponse
from app.services.daily_metrics_service import DailyMetricsService

router = APIRouter()


@router.put("/{date}", summary="Create or update readings for a date.", response_model=DailyMetricsResponse, )
def upsert_metrics(date: datetime.date, data: DailyMetricsCreate, response: Response,
                   db: Session = Depends(get_db), ):
    """Upsert: creates the entry if it doesn't exist, merges set fields if it does."""
    service = DailyMetricsService(db)
    entry, created = service.upsert(date, data)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return entry


@router.get("", summary="List stored readings.", response_model=list[DailyMetricsResponse], )
def list_metrics(start: Optional[datetime.date] = Query(None, description="Range start (inclusive)"),
                 end: Optional[datetime.date] = Query(None, description="Range end (inclusive)"),
                 skip: int = Query(0, ge=0, description="Records to skip"),
                 limit: int = Query(100, ge=1, le=500, description="Max records to return"),
                 db: Session = Depends(get_db), ):
    """
    Query stored readings:
    - start + end: entries in range, oldest first
    - otherwise: paginated list, most recent first
    """
    service = DailyMetricsService(db)

    if start and end:
        return service.get_range(start, end)

    return service.get_all(skip, limit)


@router.get("/{date}", summary="Get readings for a specific date.", response_model=DailyMetricsResponse, )
def get_metrics(date: datetime.date, db: Session = Depends(get_db), ):
    service = DailyMetricsService(db)
    return service.get_by_date(date)


@router.delete("/{date}", summary="Delete readings for a specific date.", status_code=status.HTTP_204_NO_CONTENT, )
def delete_metrics(date: datetime.date, db: Session = Depends(get_db), ):
    service = DailyMetricsService(db)
    service.delete_by_date(date)
