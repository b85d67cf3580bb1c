"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import Booking
from ...shared.validators import validate_email
from ..courts.schemas import SlotRef

BOOKING_STATUSES = {"pending", "approved", "rejected", "confirmed"}
# Statuses an admin may set by hand; "confirmed" only comes from a payment
REVIEW_STATUSES = {"approved", "rejected"}


class BookingCreate(BaseModel):
    user: str
    courtId: int
    courtName: Optional[str] = None
    courtType: Optional[str] = None
    slots: list[SlotRef]
    price: float = 0
    date: Optional[str] = None
    status: str = "pending"

    @field_validator("user")
    @classmethod
    def validate_user(cls, v: str) -> str:
        return validate_email(v)


class BookingStatusUpdate(BaseModel):
    status: str


class CancelRequest(BaseModel):
    """Slots to release when an admin cancels; defaults to the booking's own"""

    courtId: Optional[int] = None
    slots: Optional[list[SlotRef]] = None


class BookingResponse(BaseModel):
    id: int
    user: str
    courtId: int
    courtName: Optional[str] = None
    courtType: Optional[str] = None
    slots: list[SlotRef]
    price: float
    date: Optional[str] = None
    status: str
    booking_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            user=booking.user,
            courtId=booking.court_id,
            courtName=booking.court_name,
            courtType=booking.court_type,
            slots=booking.slots or [],
            price=booking.price or 0,
            date=booking.date,
            status=booking.status,
            booking_at=booking.booking_at,
        )
