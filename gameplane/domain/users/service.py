"""User service - Business logic for user accounts and roles"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import User
from ...shared.clock import to_naive_utc, utcnow
from .repository import UserRepository
from .schemas import ALLOWED_ROLES, RoleUpdate, UserUpdate, UserUpsert

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def upsert_user(self, data: UserUpsert) -> dict:
        """Create the user on first sign-in, otherwise only touch last_login"""
        last_login = to_naive_utc(data.last_login) or utcnow()
        existing = self.repo.get_user_by_email(self.db, data.email)

        if existing:
            return self._touch_existing(existing, last_login)

        try:
            user = self.repo.create_user(
                self.db,
                email=data.email,
                name=data.name,
                photo=data.photo,
                role="user",
                last_login=last_login,
            )
        except IntegrityError:
            # A concurrent first sign-in inserted the same email
            self.db.rollback()
            existing = self.repo.get_user_by_email(self.db, data.email)
            if not existing:
                raise
            logger.info(f"🔁 Concurrent first sign-in for {data.email}")
            return self._touch_existing(existing, last_login)

        logger.info(f"🆕 New user created: {user.email}")
        return {"inserted": True, "insertedId": user.id}

    def _touch_existing(self, user: User, last_login) -> dict:
        modified = self.repo.update_user(self.db, user, last_login=last_login)
        logger.info(f"🔄 Existing user signed in: {user.email}")
        return {"message": "user already exists", "inserted": False, "modifiedCount": modified}

    def update_profile(self, email: str, data: UserUpdate) -> dict:
        user = self.repo.get_user_by_email(self.db, email)
        if not user:
            return {"modifiedCount": 0}
        updates = data.model_dump(exclude_none=True)
        return {"modifiedCount": self.repo.update_user(self.db, user, **updates)}

    def get_role(self, email: str) -> dict:
        user = self.repo.get_user_by_email(self.db, email)
        return {"role": user.role if user else None}

    def get_profile(self, email: str) -> Optional[User]:
        return self.repo.get_user_by_email(self.db, email)

    def search_users(self, search: Optional[str] = None) -> list[User]:
        return self.repo.search_users(self.db, search=search)

    def search_members(self, search: Optional[str] = None) -> list[User]:
        return self.repo.search_users(self.db, search=search, role="member")

    def revoke_membership(self, user_id: int) -> dict:
        """Drop a member back to a regular user"""
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user or user.role != "member":
            return {"modifiedCount": 0}
        modified = self.repo.update_user(self.db, user, role="user", member_since=None)
        logger.info(f"Membership revoked for {user.email}")
        return {"modifiedCount": modified}

    def change_role(self, data: RoleUpdate) -> dict:
        role = data.role.strip().lower()
        if role not in ALLOWED_ROLES:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid role. Allowed values: {', '.join(sorted(ALLOWED_ROLES))}",
            )

        user = self.repo.get_user_by_email(self.db, data.email)
        if not user:
            return {"modifiedCount": 0}

        updates = {"role": role}
        if role == "member" and user.member_since is None:
            updates["member_since"] = utcnow()
        modified = self.repo.update_user(self.db, user, **updates)
        logger.info(f"👤 Role of {user.email} set to {role}")
        return {"modifiedCount": modified}

    def promote_to_member(self, email: str) -> int:
        """Booking approval turns a regular user into a member"""
        user = self.repo.get_user_by_email(self.db, email)
        if not user or user.role != "user":
            return 0
        modified = self.repo.update_user(self.db, user, role="member", member_since=utcnow())
        logger.info(f"⭐ {email} promoted to member")
        return modified
