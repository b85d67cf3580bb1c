"""
Announcements API Routes

Club-wide notices posted by admins and shown on the member dashboard.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..auth import Identity, require_admin, require_token
from ..database import get_db
from ..models import Announcement

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/announcements", tags=["Announcements"])


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None


class AnnouncementResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


@router.get("", response_model=list[AnnouncementResponse])
async def list_announcements(
    search: Optional[str] = Query(None),
    identity: Identity = Depends(require_token),
    db: Session = Depends(get_db),
):
    query = db.query(Announcement)
    if search:
        query = query.filter(Announcement.title.ilike(f"%{search.lower()}%"))
    return query.order_by(Announcement.created_at.desc(), Announcement.id.desc()).all()


@router.post("")
async def create_announcement(
    data: AnnouncementCreate,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    announcement = Announcement(title=data.title, description=data.description)
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    logger.info(f"📢 Announcement {announcement.id} posted by {identity.email}")
    return {"insertedId": announcement.id}


@router.patch("/{announcement_id}")
async def update_announcement(
    announcement_id: int,
    data: AnnouncementUpdate,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    announcement = db.query(Announcement).filter(Announcement.id == announcement_id).first()
    if not announcement:
        return {"modifiedCount": 0}

    changed = False
    for key, value in data.model_dump(exclude_none=True).items():
        if getattr(announcement, key) != value:
            setattr(announcement, key, value)
            changed = True

    if changed:
        db.commit()
    return {"modifiedCount": 1 if changed else 0}


@router.delete("/{announcement_id}")
async def delete_announcement(
    announcement_id: int,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    deleted = (
        db.query(Announcement)
        .filter(Announcement.id == announcement_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return {"deletedCount": deleted}
