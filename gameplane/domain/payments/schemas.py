"""Payment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ...models import Payment
from ..courts.schemas import SlotRef


class PaymentIntentRequest(BaseModel):
    """Schema for starting a checkout with the payment processor"""

    price: float
    bookingId: Optional[int] = None


class PaymentCreate(BaseModel):
    """
    Payment confirmation sent by the front-end once the processor reports success.
    couponMaxUses is the remaining-use count computed by the client.
    """

    bookingId: int
    courtId: Optional[int] = None
    slots: Optional[list[SlotRef]] = None
    courtName: Optional[str] = None
    email: Optional[str] = None
    amount: float = Field(..., ge=0)
    couponCode: Optional[str] = None
    discountAmount: float = 0
    couponMaxUses: Optional[int] = None
    transactionId: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    courtName: Optional[str] = None
    email: str
    amount: float
    couponCode: Optional[str] = None
    discountAmount: float
    transactionId: Optional[str] = None
    pay_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, payment: Payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            courtName=payment.court_name,
            email=payment.email,
            amount=payment.amount,
            couponCode=payment.coupon_code,
            discountAmount=payment.discount_amount or 0,
            transactionId=payment.transaction_id,
            pay_at=payment.pay_at,
        )
