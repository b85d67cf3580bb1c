"""Court repository - Database operations for courts and their slots"""

from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Court
from .slots import SlotKey, set_availability


class CourtRepository:
    """Repository for court database operations"""

    @staticmethod
    def _search(db: Session, search: Optional[str] = None):
        query = db.query(Court)
        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter((Court.name.ilike(search_term)) | (Court.sport_type.ilike(search_term)))
        return query

    @staticmethod
    def get_courts(db: Session, search: Optional[str] = None) -> list[Court]:
        return CourtRepository._search(db, search).order_by(Court.id).all()

    @staticmethod
    def get_courts_page(
        db: Session, page: int, limit: int, search: Optional[str] = None
    ) -> tuple[list[Court], int]:
        """Return one page of courts and the total number of matches"""
        query = CourtRepository._search(db, search)
        total = query.count()
        courts = query.order_by(Court.id).offset((page - 1) * limit).limit(limit).all()
        return courts, total

    @staticmethod
    def get_court_by_id(db: Session, court_id: int) -> Optional[Court]:
        return db.query(Court).filter(Court.id == court_id).first()

    @staticmethod
    def create_court(db: Session, **court_data) -> Court:
        court = Court(**court_data)
        db.add(court)
        db.commit()
        db.refresh(court)
        return court

    @staticmethod
    def update_court(db: Session, court: Court, **updates) -> int:
        changed = False
        for key, value in updates.items():
            if hasattr(court, key) and getattr(court, key) != value:
                setattr(court, key, value)
                changed = True

        if changed:
            db.commit()
            db.refresh(court)
        return 1 if changed else 0

    @staticmethod
    def delete_court(db: Session, court_id: int) -> int:
        deleted = db.query(Court).filter(Court.id == court_id).delete(synchronize_session=False)
        db.commit()
        return deleted

    @staticmethod
    def set_slot_availability(
        db: Session, court_id: int, targets: Iterable[dict], available: bool
    ) -> list[SlotKey]:
        """
        Flip matching slots on a court and persist them.
        Returns the keys that actually changed (empty when the court is missing).
        """
        court = db.query(Court).filter(Court.id == court_id).first()
        if not court:
            return []

        updated, changed = set_availability(court.slots or [], targets, available)
        if changed:
            # Reassign so the JSON column is flagged dirty
            court.slots = updated
            db.commit()
        return changed

    @staticmethod
    def count_courts(db: Session) -> int:
        return db.query(func.count(Court.id)).scalar() or 0
