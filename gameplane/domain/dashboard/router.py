"""Dashboard router - analytics endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import Identity, require_token
from ...cache import Cache, get_cache
from ...database import get_db
from .service import DashboardService

router = APIRouter(tags=["Dashboard"])


def get_dashboard_service(
    db: Session = Depends(get_db),
    cache: Optional[Cache] = Depends(get_cache),
) -> DashboardService:
    """Dependency injection for DashboardService"""
    return DashboardService(db, cache)


@router.get("/dashboard/stats")
async def get_dashboard_stats(
    range_name: str = Query("week", alias="range"),
    identity: Identity = Depends(require_token),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Admin analytics for the last week, month or year"""
    return service.get_admin_stats(range_name)


@router.get("/member/dashboard")
async def get_member_dashboard(
    identity: Identity = Depends(require_token),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Analytics for the signed-in user"""
    if not identity.email:
        raise HTTPException(status_code=400, detail="Token has no email claim")
    return service.get_member_stats(identity.email)
