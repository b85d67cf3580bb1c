"""Dashboard service - Read-only aggregates for the admin and member views"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...cache import Cache
from ...config import DASHBOARD_CACHE_TTL
from ...shared.clock import utcnow
from ..bookings.repository import BookingRepository
from ..bookings.schemas import BOOKING_STATUSES
from ..courts.repository import CourtRepository
from ..payments.repository import PaymentRepository
from ..payments.schemas import PaymentResponse
from ..users.repository import UserRepository
from .analytics import (
    RANGE_DAYS,
    calculate_growth,
    fill_trend,
    monthly_buckets,
    range_windows,
    trend_buckets,
)

logger = logging.getLogger(__name__)


class DashboardService:
    """Service layer for analytics dashboards"""

    def __init__(self, db: Session, cache: Optional[Cache] = None):
        self.db = db
        self.cache = cache
        self.users = UserRepository()
        self.courts = CourtRepository()
        self.bookings = BookingRepository()
        self.payments = PaymentRepository()

    def _status_counts(self, email: Optional[str] = None) -> dict:
        counts = {status: 0 for status in sorted(BOOKING_STATUSES)}
        counts.update(self.bookings.count_by_status(self.db, email))
        return counts

    def get_admin_stats(self, range_name: str, now: Optional[datetime] = None) -> dict:
        """Totals, windowed figures, growth and trend for the admin overview"""
        if range_name not in RANGE_DAYS:
            raise HTTPException(
                status_code=400, detail="Invalid range. Allowed values: week, month, year"
            )

        cache_key = f"dashboard:stats:{range_name}"
        use_cache = self.cache is not None and now is None
        if use_cache:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        now = now or utcnow()
        start, previous_start = range_windows(range_name, now)

        current = {
            "newMembers": self.users.count_members_since(self.db, start),
            "bookings": self.bookings.count_bookings(self.db, start=start),
            "revenue": round(self.payments.total_revenue(self.db, start=start), 2),
        }
        previous = {
            "newMembers": self.users.count_members_since(self.db, previous_start, start),
            "bookings": self.bookings.count_bookings(self.db, start=previous_start, end=start),
            "revenue": round(
                self.payments.total_revenue(self.db, start=previous_start, end=start), 2
            ),
        }

        buckets = trend_buckets(range_name, now)
        trend = fill_trend(
            buckets,
            self.bookings.booking_times_since(self.db, buckets[0].start),
            self.payments.payments_since(self.db, buckets[0].start),
        )

        stats = {
            "range": range_name,
            "startDate": start.isoformat(),
            "totals": {
                "users": self.users.count_users(self.db),
                "members": self.users.count_users(self.db, role="member"),
                "courts": self.courts.count_courts(self.db),
                "bookings": self.bookings.count_bookings(self.db),
                "revenue": round(self.payments.total_revenue(self.db), 2),
            },
            "current": current,
            "previous": previous,
            "growth": {
                "members": calculate_growth(current["newMembers"], previous["newMembers"]),
                "bookings": calculate_growth(current["bookings"], previous["bookings"]),
                "revenue": calculate_growth(current["revenue"], previous["revenue"]),
            },
            "bookingStatus": self._status_counts(),
            "courtTypes": [
                {"type": court_type or "unknown", "count": count}
                for court_type, count in self.bookings.count_by_court_type(self.db)
            ],
            "trend": trend,
        }

        if use_cache:
            self.cache.set(cache_key, stats, ttl=DASHBOARD_CACHE_TTL)
        return stats

    def get_member_stats(self, email: str, now: Optional[datetime] = None) -> dict:
        """Booking and spending summary for one user"""
        now = now or utcnow()
        user = self.users.get_user_by_email(self.db, email)

        status_counts = self._status_counts(email)
        payments = self.payments.get_user_payments(self.db, email)

        buckets = monthly_buckets(6, now)
        spending = fill_trend(buckets, [], self.payments.payments_since(self.db, buckets[0].start, email))

        return {
            "email": email,
            "role": user.role if user else None,
            "memberSince": user.member_since.isoformat() if user and user.member_since else None,
            "bookings": {"total": sum(status_counts.values()), **status_counts},
            "payments": {
                "count": len(payments),
                "totalSpent": round(sum(p.amount or 0 for p in payments), 2),
            },
            "recentPayments": [PaymentResponse.from_model(p) for p in payments[:5]],
            "monthlySpending": [{"label": p["label"], "amount": p["revenue"]} for p in spending],
        }
