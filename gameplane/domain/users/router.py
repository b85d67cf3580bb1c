"""User router - FastAPI endpoints for accounts and roles"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Identity, require_admin, require_owner
from ...database import get_db
from .schemas import RoleUpdate, UserResponse, UserUpdate, UserUpsert
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


# ============================================================================
# SELF-SERVICE
# ============================================================================


@router.post("/users")
async def create_or_touch_user(
    data: UserUpsert,
    service: UserService = Depends(get_user_service),
):
    """Create a user on first sign-in, otherwise record the login"""
    return service.upsert_user(data)


@router.patch("/users")
async def update_own_profile(
    data: UserUpdate,
    email: str = Query(...),
    identity: Identity = Depends(require_owner),
    service: UserService = Depends(get_user_service),
):
    return service.update_profile(email, data)


@router.get("/users/role")
async def get_own_role(
    email: str = Query(...),
    identity: Identity = Depends(require_owner),
    service: UserService = Depends(get_user_service),
):
    return service.get_role(email)


@router.get("/users/profile", response_model=Optional[UserResponse])
async def get_own_profile(
    email: str = Query(...),
    identity: Identity = Depends(require_owner),
    service: UserService = Depends(get_user_service),
):
    return service.get_profile(email)


# ============================================================================
# ADMIN
# ============================================================================


@router.get("/allUsers", response_model=list[UserResponse])
async def list_users(
    search: Optional[str] = Query(None),
    identity: Identity = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """All users, searchable by name or email"""
    return service.search_users(search)


@router.get("/members", response_model=list[UserResponse])
async def list_members(
    search: Optional[str] = Query(None),
    identity: Identity = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return service.search_members(search)


@router.delete("/members/{user_id}")
async def revoke_membership(
    user_id: int,
    identity: Identity = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return service.revoke_membership(user_id)


@router.patch("/anyUser/role")
async def change_user_role(
    data: RoleUpdate,
    identity: Identity = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Change another user's role (admin, user or member)"""
    return service.change_role(data)
