"""
Slot reconciliation between courts, bookings, coupons and payments.

Cancelling a confirmed booking and confirming a payment both touch several
records. Each step is committed on its own, so every step that succeeds
records an undo action; if a later step fails the undo actions run in reverse
order and the request fails. Nothing here prevents two confirmations from
reserving the same slot concurrently.
"""

import logging
from typing import Callable, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Booking
from ..courts.repository import CourtRepository
from ..courts.slots import keys_to_slots
from ..coupons.repository import CouponRepository
from ..payments.repository import PaymentRepository
from ..payments.schemas import PaymentCreate
from .repository import BookingRepository

logger = logging.getLogger(__name__)

# Rejected bookings are closed and confirmed ones already carry their payment
PAYABLE_STATUSES = ("pending", "approved")


class CompensationLog:
    """Undo actions for the steps of one multi-record update"""

    def __init__(self, name: str):
        self.name = name
        self._steps: list[tuple[str, Callable[[], object]]] = []

    def record(self, description: str, undo: Callable[[], object]) -> None:
        self._steps.append((description, undo))

    def unwind(self) -> None:
        for description, undo in reversed(self._steps):
            try:
                undo()
                logger.warning(f"↩️ {self.name}: compensated '{description}'")
            except Exception as e:
                # Keep unwinding; the remaining steps are independent records
                logger.error(f"❌ {self.name}: compensation for '{description}' failed: {e}")
        self._steps.clear()


class SlotReconciler:
    """Keeps court slot availability consistent with bookings and payments"""

    def __init__(self, db: Session):
        self.db = db
        self.courts = CourtRepository()
        self.bookings = BookingRepository()
        self.coupons = CouponRepository()
        self.payments = PaymentRepository()

    def _get_booking(self, booking_id: int) -> Booking:
        booking = self.bookings.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    def cancel_booking(
        self,
        booking_id: int,
        court_id: Optional[int] = None,
        slots: Optional[list[dict]] = None,
    ) -> dict:
        """
        Free the booking's court slots, then delete the booking.
        The booking is only deleted when at least one slot actually flipped.
        """
        booking = self._get_booking(booking_id)
        court_id = court_id if court_id is not None else booking.court_id
        targets = slots if slots is not None else (booking.slots or [])

        released = self.courts.set_slot_availability(self.db, court_id, targets, True)
        if not released:
            logger.warning(
                f"⚠️ Booking {booking_id}: no slots on court {court_id} were released, booking kept"
            )
            raise HTTPException(
                status_code=400,
                detail="No matching reserved slots on the court; booking was not cancelled",
            )

        log = CompensationLog(f"cancel booking {booking_id}")
        log.record(
            f"release {len(released)} slot(s) on court {court_id}",
            lambda: self.courts.set_slot_availability(
                self.db, court_id, keys_to_slots(released), False
            ),
        )
        try:
            deleted = self.bookings.delete_booking(self.db, booking)
        except Exception as e:
            logger.error(f"❌ Cancelling booking {booking_id} failed: {e}")
            self.db.rollback()
            log.unwind()
            raise HTTPException(status_code=500, detail="Failed to cancel booking") from e

        logger.info(f"✅ Booking {booking_id} cancelled, {len(released)} slot(s) released")
        return {"deletedCount": deleted, "releasedSlots": len(released)}

    def confirm_payment(self, data: PaymentCreate) -> dict:
        """
        Reserve the slots, consume the coupon, confirm the booking and record
        the payment, in that order.
        """
        booking = self._get_booking(data.bookingId)
        if booking.status not in PAYABLE_STATUSES:
            logger.warning(f"⚠️ Payment refused for booking {booking.id} in status {booking.status}")
            raise HTTPException(
                status_code=400,
                detail=f"Booking cannot be paid for; booking is {booking.status}",
            )
        court_id = data.courtId if data.courtId is not None else booking.court_id
        targets = (
            [s.model_dump() for s in data.slots] if data.slots is not None else (booking.slots or [])
        )
        email = data.email or booking.user

        log = CompensationLog(f"confirm payment for booking {booking.id}")
        try:
            reserved = self.courts.set_slot_availability(self.db, court_id, targets, False)
            if reserved:
                log.record(
                    f"reserve {len(reserved)} slot(s) on court {court_id}",
                    lambda: self.courts.set_slot_availability(
                        self.db, court_id, keys_to_slots(reserved), True
                    ),
                )

            if data.couponCode and data.couponMaxUses is not None:
                coupon = self.coupons.get_coupon_by_code(self.db, data.couponCode)
                if coupon:
                    previous_max_uses = coupon.max_uses
                    # Client computes the remaining uses; stored as sent
                    self.coupons.set_max_uses(self.db, coupon, data.couponMaxUses)
                    log.record(
                        f"set maxUses of coupon {coupon.code}",
                        lambda: self.coupons.set_max_uses(self.db, coupon, previous_max_uses),
                    )

            previous_status = booking.status
            if self.bookings.update_status(self.db, booking, "confirmed"):
                log.record(
                    f"confirm booking {booking.id}",
                    lambda: self.bookings.update_status(self.db, booking, previous_status),
                )

            payment = self.payments.create_payment(
                self.db,
                court_name=data.courtName or booking.court_name,
                email=email,
                amount=data.amount,
                coupon_code=data.couponCode,
                discount_amount=data.discountAmount,
                transaction_id=data.transactionId,
            )
        except Exception as e:
            logger.error(f"❌ Payment confirmation for booking {booking.id} failed: {e}")
            self.db.rollback()
            log.unwind()
            raise HTTPException(status_code=500, detail="Payment confirmation failed") from e

        logger.info(
            f"💳 Payment {payment.id} recorded for booking {booking.id} "
            f"({len(reserved)} slot(s) reserved, amount={payment.amount})"
        )
        return {"insertedId": payment.id, "reservedSlots": len(reserved), "bookingStatus": "confirmed"}
