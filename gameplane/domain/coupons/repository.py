"""Coupon repository - Database operations for coupons"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Coupon


class CouponRepository:
    """Repository for coupon database operations"""

    @staticmethod
    def get_active_coupons(db: Session, now: datetime) -> list[Coupon]:
        """Active coupons that have not expired"""
        return (
            db.query(Coupon)
            .filter(
                Coupon.active.is_(True),
                (Coupon.expiry_date.is_(None)) | (Coupon.expiry_date >= now),
            )
            .order_by(Coupon.created_at.desc())
            .all()
        )

    @staticmethod
    def search_coupons(db: Session, search: Optional[str] = None) -> list[Coupon]:
        query = db.query(Coupon)
        if search:
            query = query.filter(Coupon.code.ilike(f"%{search.lower()}%"))
        return query.order_by(Coupon.created_at.desc()).all()

    @staticmethod
    def get_coupon_by_id(db: Session, coupon_id: int) -> Optional[Coupon]:
        return db.query(Coupon).filter(Coupon.id == coupon_id).first()

    @staticmethod
    def get_coupon_by_code(db: Session, code: str) -> Optional[Coupon]:
        return db.query(Coupon).filter(func.upper(Coupon.code) == code.strip().upper()).first()

    @staticmethod
    def create_coupon(db: Session, **coupon_data) -> Coupon:
        coupon = Coupon(**coupon_data)
        db.add(coupon)
        db.commit()
        db.refresh(coupon)
        return coupon

    @staticmethod
    def update_coupon(db: Session, coupon: Coupon, **updates) -> int:
        changed = False
        for key, value in updates.items():
            if hasattr(coupon, key) and getattr(coupon, key) != value:
                setattr(coupon, key, value)
                changed = True

        if changed:
            db.commit()
            db.refresh(coupon)
        return 1 if changed else 0

    @staticmethod
    def set_max_uses(db: Session, coupon: Coupon, max_uses: int) -> None:
        coupon.max_uses = max_uses
        db.commit()

    @staticmethod
    def delete_coupon(db: Session, coupon_id: int) -> int:
        deleted = db.query(Coupon).filter(Coupon.id == coupon_id).delete(synchronize_session=False)
        db.commit()
        return deleted
