from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)

from .database import Base
from .shared.clock import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    photo = Column(String(500), nullable=True)  # Profile picture URL from the identity provider
    role = Column(String(20), default="user", nullable=False)  # user, member, admin
    last_login = Column(DateTime, nullable=True)
    member_since = Column(DateTime, nullable=True)  # Set when a booking is approved
    created_at = Column(DateTime, default=utcnow)


class Court(Base):
    __tablename__ = "courts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    sport_type = Column(String(100), nullable=True)
    image = Column(String(500), nullable=True)
    price = Column(Float, default=0, nullable=False)  # Per slot
    # Ordered list of {"startTime", "endTime", "available"}
    slots = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=utcnow)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user = Column(String(255), index=True, nullable=False)  # Booker's email
    # No foreign key: bookings and courts are reconciled by the handlers
    court_id = Column(Integer, index=True, nullable=False)
    court_name = Column(String(255), nullable=True)
    court_type = Column(String(100), nullable=True)
    slots = Column(JSON, default=list, nullable=False)  # [{"startTime", "endTime"}]
    price = Column(Float, default=0, nullable=False)
    date = Column(String(20), nullable=True)  # Day the slots are played, as sent by the client
    status = Column(String(20), default="pending", index=True, nullable=False)
    booking_at = Column(DateTime, default=utcnow, index=True)


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    court_name = Column(String(255), nullable=True)
    email = Column(String(255), index=True, nullable=False)
    amount = Column(Float, nullable=False)
    coupon_code = Column(String(50), nullable=True)
    discount_amount = Column(Float, default=0, nullable=False)
    transaction_id = Column(String(255), nullable=True)
    pay_at = Column(DateTime, default=utcnow, index=True)


class Coupon(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), index=True, nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    max_uses = Column(Integer, default=0, nullable=False)
    discount_amount = Column(Float, default=0, nullable=False)
    expiry_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=True)
    data = Column(JSON, default=dict, nullable=False)  # Free-form fields sent by the client
    created_at = Column(DateTime, default=utcnow, index=True)
