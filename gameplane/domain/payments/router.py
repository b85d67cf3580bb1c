"""Payment router - FastAPI endpoints for payments"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ...auth import Identity, require_admin, require_owner, require_token
from ...cache import Cache, get_cache
from ...database import get_db
from .schemas import PaymentCreate, PaymentIntentRequest, PaymentResponse
from .service import PaymentService

router = APIRouter(tags=["Payments"])


def get_payment_service(
    request: Request,
    db: Session = Depends(get_db),
    cache: Optional[Cache] = Depends(get_cache),
) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db, getattr(request.app.state, "payments", None), cache)


@router.post("/create-payment-intent")
async def create_payment_intent(
    data: PaymentIntentRequest,
    identity: Identity = Depends(require_token),
    service: PaymentService = Depends(get_payment_service),
):
    """Start a checkout with the payment processor"""
    return await service.create_payment_intent(data, identity.email)


@router.post("/payments")
async def confirm_payment(
    data: PaymentCreate,
    identity: Identity = Depends(require_token),
    service: PaymentService = Depends(get_payment_service),
):
    """Reserve the slots, confirm the booking and record the payment"""
    return service.confirm_payment(data)


@router.get("/payments", response_model=list[PaymentResponse])
async def get_my_payments(
    email: str = Query(...),
    search: Optional[str] = Query(None),
    identity: Identity = Depends(require_owner),
    service: PaymentService = Depends(get_payment_service),
):
    return service.list_user_payments(email, search)


@router.get("/manage/payments", response_model=list[PaymentResponse])
async def search_payments(
    search: Optional[str] = Query(None),
    identity: Identity = Depends(require_admin),
    service: PaymentService = Depends(get_payment_service),
):
    return service.search_payments(search)
