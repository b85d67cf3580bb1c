"""Coupon router - FastAPI endpoints for coupons"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Identity, require_admin, require_token
from ...database import get_db
from .schemas import CouponCreate, CouponResponse, CouponUpdate, CouponValidateRequest
from .service import CouponService

router = APIRouter(tags=["Coupons"])


def get_coupon_service(db: Session = Depends(get_db)) -> CouponService:
    """Dependency injection for CouponService"""
    return CouponService(db)


@router.get("/coupons", response_model=list[CouponResponse])
async def list_active_coupons(service: CouponService = Depends(get_coupon_service)):
    """Coupons currently on offer (shown on the home page)"""
    return service.list_active()


@router.post("/coupons/validate")
async def validate_coupon(
    data: CouponValidateRequest,
    identity: Identity = Depends(require_token),
    service: CouponService = Depends(get_coupon_service),
):
    return service.validate_coupon(data.code)


@router.get("/manage/coupons", response_model=list[CouponResponse])
async def search_coupons(
    search: Optional[str] = Query(None),
    identity: Identity = Depends(require_admin),
    service: CouponService = Depends(get_coupon_service),
):
    return service.search_coupons(search)


@router.post("/coupons")
async def create_coupon(
    data: CouponCreate,
    identity: Identity = Depends(require_admin),
    service: CouponService = Depends(get_coupon_service),
):
    return service.create_coupon(data)


@router.patch("/coupons/{coupon_id}")
async def update_coupon(
    coupon_id: int,
    data: CouponUpdate,
    identity: Identity = Depends(require_admin),
    service: CouponService = Depends(get_coupon_service),
):
    return service.update_coupon(coupon_id, data)


@router.delete("/coupons/{coupon_id}")
async def delete_coupon(
    coupon_id: int,
    identity: Identity = Depends(require_admin),
    service: CouponService = Depends(get_coupon_service),
):
    return service.delete_coupon(coupon_id)
