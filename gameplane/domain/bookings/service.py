"""Booking service - Business logic for booking requests and their review"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...cache import Cache, invalidate_dashboard_cache
from ..users.service import UserService
from .reconciliation import SlotReconciler
from .repository import BookingRepository
from .schemas import REVIEW_STATUSES, BookingCreate, BookingResponse, CancelRequest

logger = logging.getLogger(__name__)

# A member may withdraw a booking until it is paid for
SELF_CANCELLABLE_STATUSES = ("pending", "approved")


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session, cache: Optional[Cache] = None):
        self.db = db
        self.cache = cache
        self.repo = BookingRepository()

    def create_booking(self, data: BookingCreate) -> dict:
        booking = self.repo.create_booking(
            self.db,
            user=data.user,
            court_id=data.courtId,
            court_name=data.courtName,
            court_type=data.courtType,
            slots=[s.model_dump() for s in data.slots],
            price=data.price,
            date=data.date,
            status=data.status,
        )
        logger.info(f"📅 Booking {booking.id} created by {booking.user} for court {booking.court_id}")
        invalidate_dashboard_cache(self.cache)
        return {"insertedId": booking.id}

    def list_user_bookings(self, email: str, status: Optional[str] = None) -> list[BookingResponse]:
        return [BookingResponse.from_model(b) for b in self.repo.get_user_bookings(self.db, email, status)]

    def search_bookings(
        self, status: Optional[str] = None, search: Optional[str] = None
    ) -> list[BookingResponse]:
        return [BookingResponse.from_model(b) for b in self.repo.search_bookings(self.db, status, search)]

    def cancel_own_booking(self, booking_id: int, email: str) -> dict:
        """Withdraw a booking that has not reserved any slot yet"""
        deleted = self.repo.delete_user_booking(
            self.db, booking_id, email, SELF_CANCELLABLE_STATUSES
        )
        if deleted:
            logger.info(f"Booking {booking_id} withdrawn by {email}")
            invalidate_dashboard_cache(self.cache)
        return {"deletedCount": deleted}

    def review_booking(self, booking_id: int, status: str) -> dict:
        """Approve or reject a pending booking; approval makes the booker a member"""
        status = status.strip().lower()
        if status not in REVIEW_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid status. Allowed values: {', '.join(sorted(REVIEW_STATUSES))}",
            )

        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if not booking:
            return {"modifiedCount": 0}
        if booking.status != "pending":
            raise HTTPException(
                status_code=400,
                detail=f"Only pending bookings can be {status}; booking is {booking.status}",
            )

        modified = self.repo.update_status(self.db, booking, status)
        promoted = 0
        if status == "approved":
            promoted = UserService(self.db).promote_to_member(booking.user)

        logger.info(f"📋 Booking {booking_id} {status}")
        invalidate_dashboard_cache(self.cache)
        return {"modifiedCount": modified, "promoted": bool(promoted)}

    def cancel_booking(self, booking_id: int, data: Optional[CancelRequest] = None) -> dict:
        """Admin cancellation: release the court slots, then delete the booking"""
        court_id = data.courtId if data else None
        slots = [s.model_dump() for s in data.slots] if data and data.slots is not None else None
        result = SlotReconciler(self.db).cancel_booking(booking_id, court_id, slots)
        invalidate_dashboard_cache(self.cache)
        return result
