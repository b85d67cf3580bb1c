"""User repository - Database operations for users"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)"""
        return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> int:
        """Apply updates and return 1 if any field actually changed"""
        changed = False
        for key, value in updates.items():
            if hasattr(user, key) and getattr(user, key) != value:
                setattr(user, key, value)
                changed = True

        if changed:
            db.commit()
            db.refresh(user)
        return 1 if changed else 0

    @staticmethod
    def search_users(
        db: Session, search: Optional[str] = None, role: Optional[str] = None
    ) -> list[User]:
        """Search users by name or email, optionally restricted to a role"""
        query = db.query(User)

        if role:
            query = query.filter(User.role == role)

        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter((User.name.ilike(search_term)) | (User.email.ilike(search_term)))

        return query.order_by(User.created_at.desc()).all()

    @staticmethod
    def count_users(db: Session, role: Optional[str] = None) -> int:
        query = db.query(func.count(User.id))
        if role:
            query = query.filter(User.role == role)
        return query.scalar() or 0

    @staticmethod
    def count_members_since(db: Session, start: datetime, end: Optional[datetime] = None) -> int:
        """Members whose membership started inside [start, end)"""
        query = db.query(func.count(User.id)).filter(
            User.role == "member", User.member_since >= start
        )
        if end is not None:
            query = query.filter(User.member_since < end)
        return query.scalar() or 0
