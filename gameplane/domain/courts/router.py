"""Court router - FastAPI endpoints for court inventory"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Identity, require_admin
from ...database import get_db
from .schemas import CourtCreate, CourtPage, CourtResponse, CourtUpdate
from .service import CourtService

router = APIRouter(prefix="/courts", tags=["Courts"])


def get_court_service(db: Session = Depends(get_db)) -> CourtService:
    """Dependency injection for CourtService"""
    return CourtService(db)


@router.get("", response_model=list[CourtResponse])
async def list_courts(
    search: Optional[str] = Query(None),
    service: CourtService = Depends(get_court_service),
):
    return service.list_courts(search)


@router.get("/pagination", response_model=CourtPage)
async def paginate_courts(
    page: int = Query(1, ge=1),
    limit: int = Query(6, ge=1, le=100),
    search: Optional[str] = Query(None),
    service: CourtService = Depends(get_court_service),
):
    """Paged court listing for the public courts page"""
    return service.paginate_courts(page, limit, search)


@router.get("/{court_id}", response_model=Optional[CourtResponse])
async def get_court(
    court_id: int,
    service: CourtService = Depends(get_court_service),
):
    return service.get_court(court_id)


@router.post("")
async def create_court(
    data: CourtCreate,
    identity: Identity = Depends(require_admin),
    service: CourtService = Depends(get_court_service),
):
    return service.create_court(data)


@router.patch("/{court_id}")
async def update_court(
    court_id: int,
    data: CourtUpdate,
    identity: Identity = Depends(require_admin),
    service: CourtService = Depends(get_court_service),
):
    return service.update_court(court_id, data)


@router.delete("/{court_id}")
async def delete_court(
    court_id: int,
    identity: Identity = Depends(require_admin),
    service: CourtService = Depends(get_court_service),
):
    return service.delete_court(court_id)
