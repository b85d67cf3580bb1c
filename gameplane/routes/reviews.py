import logging

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ..auth import Identity, require_token
from ..database import get_db
from ..models import Review

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def serialize_review(review: Review) -> dict:
    # Free-form fields first so the stored identity fields win
    return {
        **(review.data or {}),
        "id": review.id,
        "email": review.email,
        "created_at": review.created_at.isoformat() if review.created_at else None,
    }


@router.get("")
async def list_reviews(db: Session = Depends(get_db)):
    reviews = db.query(Review).order_by(Review.created_at.desc(), Review.id.desc()).all()
    return [serialize_review(r) for r in reviews]


@router.post("")
async def create_review(
    data: dict = Body(...),
    identity: Identity = Depends(require_token),
    db: Session = Depends(get_db),
):
    fields = {k: v for k, v in data.items() if k not in ("id", "email", "created_at")}
    review = Review(email=identity.email, data=fields)
    db.add(review)
    db.commit()
    db.refresh(review)
    logger.info(f"⭐ Review {review.id} posted by {identity.email}")
    return {"insertedId": review.id}
