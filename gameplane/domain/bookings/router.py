"""Booking router - FastAPI endpoints for bookings"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Identity, require_admin, require_owner, require_token
from ...cache import Cache, get_cache
from ...database import get_db
from .schemas import BookingCreate, BookingResponse, BookingStatusUpdate, CancelRequest
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bookings"])


def get_booking_service(
    db: Session = Depends(get_db),
    cache: Optional[Cache] = Depends(get_cache),
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db, cache)


# ============================================================================
# MEMBER ROUTES
# ============================================================================


@router.post("/bookings")
async def create_booking(
    data: BookingCreate,
    identity: Identity = Depends(require_token),
    service: BookingService = Depends(get_booking_service),
):
    """Request one or more slots on a court"""
    return service.create_booking(data)


@router.get("/bookings", response_model=list[BookingResponse])
async def get_my_bookings(
    email: str = Query(...),
    status: Optional[str] = Query(None),
    identity: Identity = Depends(require_owner),
    service: BookingService = Depends(get_booking_service),
):
    return service.list_user_bookings(email, status)


@router.delete("/bookings/{booking_id}")
async def withdraw_booking(
    booking_id: int,
    email: str = Query(...),
    identity: Identity = Depends(require_owner),
    service: BookingService = Depends(get_booking_service),
):
    return service.cancel_own_booking(booking_id, email)


# ============================================================================
# ADMIN ROUTES
# ============================================================================


@router.get("/manage/bookings", response_model=list[BookingResponse])
async def search_bookings(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    identity: Identity = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    return service.search_bookings(status, search)


@router.patch("/bookings/{booking_id}")
async def review_booking(
    booking_id: int,
    data: BookingStatusUpdate,
    identity: Identity = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Approve or reject a pending booking"""
    return service.review_booking(booking_id, data.status)


@router.delete("/manage/booking/{booking_id}")
async def cancel_booking(
    booking_id: int,
    data: Optional[CancelRequest] = Body(None),
    identity: Identity = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Release the booking's court slots and delete it"""
    return service.cancel_booking(booking_id, data)
