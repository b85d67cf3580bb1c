"""Payment repository - Database operations for payments"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Payment


class PaymentRepository:
    """Repository for payment database operations"""

    @staticmethod
    def create_payment(db: Session, **payment_data) -> Payment:
        payment = Payment(**payment_data)
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment

    @staticmethod
    def get_user_payments(db: Session, email: str, search: Optional[str] = None) -> list[Payment]:
        query = db.query(Payment).filter(func.lower(Payment.email) == email.strip().lower())
        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                (Payment.court_name.ilike(search_term)) | (Payment.transaction_id.ilike(search_term))
            )
        return query.order_by(Payment.pay_at.desc()).all()

    @staticmethod
    def search_payments(db: Session, search: Optional[str] = None) -> list[Payment]:
        query = db.query(Payment)
        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                (Payment.email.ilike(search_term))
                | (Payment.court_name.ilike(search_term))
                | (Payment.transaction_id.ilike(search_term))
            )
        return query.order_by(Payment.pay_at.desc()).all()

    # Dashboard aggregates
    @staticmethod
    def total_revenue(
        db: Session,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        email: Optional[str] = None,
    ) -> float:
        query = db.query(func.sum(Payment.amount))
        if start is not None:
            query = query.filter(Payment.pay_at >= start)
        if end is not None:
            query = query.filter(Payment.pay_at < end)
        if email:
            query = query.filter(func.lower(Payment.email) == email.strip().lower())
        return float(query.scalar() or 0)

    @staticmethod
    def payments_since(
        db: Session, start: datetime, email: Optional[str] = None
    ) -> list[tuple[datetime, float]]:
        query = db.query(Payment.pay_at, Payment.amount).filter(Payment.pay_at >= start)
        if email:
            query = query.filter(func.lower(Payment.email) == email.strip().lower())
        return [(pay_at, float(amount or 0)) for pay_at, amount in query.all() if pay_at is not None]
