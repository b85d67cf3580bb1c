"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email

ALLOWED_ROLES = {"admin", "user", "member"}


class UserUpsert(BaseModel):
    """Schema sent by the front-end after every sign-in"""

    email: str
    name: Optional[str] = None
    photo: Optional[str] = None
    last_login: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v: str) -> str:
        return validate_email(v)


class UserUpdate(BaseModel):
    name: Optional[str] = None
    photo: Optional[str] = None


class RoleUpdate(BaseModel):
    """Admin request to change another user's role"""

    email: str
    role: str

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v: str) -> str:
        return validate_email(v)


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    photo: Optional[str] = None
    role: str
    last_login: Optional[datetime] = None
    member_since: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
