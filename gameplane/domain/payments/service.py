"""Payment service - Checkout, confirmation and payment history"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...cache import Cache, invalidate_dashboard_cache
from ..bookings.reconciliation import SlotReconciler
from .gateway import DodoPaymentsService, PaymentGatewayError
from .repository import PaymentRepository
from .schemas import PaymentCreate, PaymentIntentRequest, PaymentResponse

logger = logging.getLogger(__name__)


class PaymentService:
    """Service layer for payment business logic"""

    def __init__(
        self,
        db: Session,
        gateway: Optional[DodoPaymentsService] = None,
        cache: Optional[Cache] = None,
    ):
        self.db = db
        self.gateway = gateway
        self.cache = cache
        self.repo = PaymentRepository()

    async def create_payment_intent(self, data: PaymentIntentRequest, email: Optional[str]) -> dict:
        if data.price <= 0:
            raise HTTPException(status_code=400, detail="Price must be greater than 0")

        if not self.gateway or not self.gateway.is_available():
            raise HTTPException(status_code=500, detail="Payment system not configured")

        metadata = {"email": email or ""}
        if data.bookingId is not None:
            metadata["booking_id"] = data.bookingId

        try:
            return await self.gateway.create_payment_intent(data.price, email, metadata)
        except PaymentGatewayError as e:
            logger.error(f"❌ Payment intent failed for {email}: {e}")
            raise HTTPException(status_code=502, detail="Payment provider error") from e

    def confirm_payment(self, data: PaymentCreate) -> dict:
        result = SlotReconciler(self.db).confirm_payment(data)
        invalidate_dashboard_cache(self.cache)
        return result

    def list_user_payments(self, email: str, search: Optional[str] = None) -> list[PaymentResponse]:
        return [PaymentResponse.from_model(p) for p in self.repo.get_user_payments(self.db, email, search)]

    def search_payments(self, search: Optional[str] = None) -> list[PaymentResponse]:
        return [PaymentResponse.from_model(p) for p in self.repo.search_payments(self.db, search)]
