"""Coupon domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import Coupon
from ...shared.validators import normalize_coupon_code


class CouponCreate(BaseModel):
    code: str
    description: Optional[str] = None
    active: bool = True
    maxUses: int = Field(0, ge=0)
    discountAmount: float = Field(0, ge=0)
    expiryDate: Optional[datetime] = None

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        return normalize_coupon_code(v)


class CouponUpdate(BaseModel):
    code: Optional[str] = None
    description: Optional[str] = None
    active: Optional[bool] = None
    maxUses: Optional[int] = Field(None, ge=0)
    discountAmount: Optional[float] = Field(None, ge=0)
    expiryDate: Optional[datetime] = None

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: Optional[str]) -> Optional[str]:
        return normalize_coupon_code(v)


class CouponValidateRequest(BaseModel):
    code: str


class CouponResponse(BaseModel):
    id: int
    code: str
    description: Optional[str] = None
    active: bool
    maxUses: int
    discountAmount: float
    expiryDate: Optional[datetime] = None

    @classmethod
    def from_model(cls, coupon: Coupon) -> "CouponResponse":
        return cls(
            id=coupon.id,
            code=coupon.code,
            description=coupon.description,
            active=coupon.active,
            maxUses=coupon.max_uses,
            discountAmount=coupon.discount_amount,
            expiryDate=coupon.expiry_date,
        )
