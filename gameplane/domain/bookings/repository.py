"""Booking repository - Database operations for bookings"""

from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Booking


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def create_booking(db: Session, **booking_data) -> Booking:
        booking = Booking(**booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: int) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def get_user_bookings(db: Session, email: str, status: Optional[str] = None) -> list[Booking]:
        query = db.query(Booking).filter(func.lower(Booking.user) == email.strip().lower())
        if status:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.booking_at.desc()).all()

    @staticmethod
    def search_bookings(
        db: Session, status: Optional[str] = None, search: Optional[str] = None
    ) -> list[Booking]:
        """Search bookings by booker email or court name"""
        query = db.query(Booking)

        if status:
            query = query.filter(Booking.status == status)

        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                (Booking.user.ilike(search_term)) | (Booking.court_name.ilike(search_term))
            )

        return query.order_by(Booking.booking_at.desc()).all()

    @staticmethod
    def update_status(db: Session, booking: Booking, status: str) -> int:
        if booking.status == status:
            return 0
        booking.status = status
        db.commit()
        db.refresh(booking)
        return 1

    @staticmethod
    def delete_booking(db: Session, booking: Booking) -> int:
        db.delete(booking)
        db.commit()
        return 1

    @staticmethod
    def delete_user_booking(
        db: Session, booking_id: int, email: str, statuses: Iterable[str]
    ) -> int:
        """Delete a booking only if it belongs to ``email`` and is in one of ``statuses``"""
        deleted = (
            db.query(Booking)
            .filter(
                Booking.id == booking_id,
                func.lower(Booking.user) == email.strip().lower(),
                Booking.status.in_(list(statuses)),
            )
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted

    # Dashboard aggregates
    @staticmethod
    def count_bookings(
        db: Session,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        email: Optional[str] = None,
    ) -> int:
        query = db.query(func.count(Booking.id))
        if start is not None:
            query = query.filter(Booking.booking_at >= start)
        if end is not None:
            query = query.filter(Booking.booking_at < end)
        if email:
            query = query.filter(func.lower(Booking.user) == email.strip().lower())
        return query.scalar() or 0

    @staticmethod
    def count_by_status(db: Session, email: Optional[str] = None) -> dict[str, int]:
        query = db.query(Booking.status, func.count(Booking.id))
        if email:
            query = query.filter(func.lower(Booking.user) == email.strip().lower())
        return {status: count for status, count in query.group_by(Booking.status).all()}

    @staticmethod
    def count_by_court_type(db: Session) -> list[tuple[Optional[str], int]]:
        return (
            db.query(Booking.court_type, func.count(Booking.id))
            .group_by(Booking.court_type)
            .order_by(func.count(Booking.id).desc())
            .all()
        )

    @staticmethod
    def booking_times_since(db: Session, start: datetime) -> list[datetime]:
        rows = db.query(Booking.booking_at).filter(Booking.booking_at >= start).all()
        return [row[0] for row in rows if row[0] is not None]
