"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import activity, metrics, recovery

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    metrics.router, prefix="/metrics", tags=["Daily metrics"]
)
api_router.include_router(
    recovery.router, prefix="/recovery", tags=["Recovery"]
)
api_router.include_router(
    activity.router, prefix="/activity", tags=["Activity rings"]
)
