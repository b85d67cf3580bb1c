"""Coupon service - Business logic for coupon management and validation"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...shared.clock import to_naive_utc, utcnow
from .repository import CouponRepository
from .schemas import CouponCreate, CouponResponse, CouponUpdate

logger = logging.getLogger(__name__)


class CouponService:
    """Service layer for coupon business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CouponRepository()

    def list_active(self) -> list[CouponResponse]:
        return [CouponResponse.from_model(c) for c in self.repo.get_active_coupons(self.db, utcnow())]

    def search_coupons(self, search: Optional[str] = None) -> list[CouponResponse]:
        return [CouponResponse.from_model(c) for c in self.repo.search_coupons(self.db, search)]

    def validate_coupon(self, code: str) -> dict:
        """Check a code before checkout; usage is only consumed by the payment"""
        coupon = self.repo.get_coupon_by_code(self.db, code)
        if not coupon:
            raise HTTPException(status_code=400, detail="Invalid coupon code")
        if not coupon.active:
            raise HTTPException(status_code=400, detail="Coupon is not active")
        if coupon.expiry_date and coupon.expiry_date < utcnow():
            raise HTTPException(status_code=400, detail="Coupon has expired")
        if coupon.max_uses <= 0:
            raise HTTPException(status_code=400, detail="Coupon usage limit reached")

        return {"valid": True, "coupon": CouponResponse.from_model(coupon)}

    def create_coupon(self, data: CouponCreate) -> dict:
        coupon = self.repo.create_coupon(
            self.db,
            code=data.code,
            description=data.description,
            active=data.active,
            max_uses=data.maxUses,
            discount_amount=data.discountAmount,
            expiry_date=to_naive_utc(data.expiryDate),
        )
        logger.info(f"🎟️ Coupon created: {coupon.code}")
        return {"insertedId": coupon.id}

    def update_coupon(self, coupon_id: int, data: CouponUpdate) -> dict:
        coupon = self.repo.get_coupon_by_id(self.db, coupon_id)
        if not coupon:
            return {"modifiedCount": 0}

        updates = {}
        if data.code is not None:
            updates["code"] = data.code
        if data.description is not None:
            updates["description"] = data.description
        if data.active is not None:
            updates["active"] = data.active
        if data.maxUses is not None:
            updates["max_uses"] = data.maxUses
        if data.discountAmount is not None:
            updates["discount_amount"] = data.discountAmount
        if data.expiryDate is not None:
            updates["expiry_date"] = to_naive_utc(data.expiryDate)

        return {"modifiedCount": self.repo.update_coupon(self.db, coupon, **updates)}

    def delete_coupon(self, coupon_id: int) -> dict:
        return {"deletedCount": self.repo.delete_coupon(self.db, coupon_id)}
