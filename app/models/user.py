"""
SQLModel-based User models with inheritance for security

UserBase (shared public fields)
    ├─> Users (database table, adds internal fields)
    └─> UserResponse/UserProfileUpdate (API schemas, defined in app/schemas)

Credentials are owned by the authentication service and never stored here.
"""

from datetime import datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from app.config import UserRole
from app.utils.timestamps import utc_now


class UserBase(SQLModel):
    """
    Base model with shared public fields for Users.

    These fields are safe to expose via the API.
    """

    name: str = Field(max_length=100)
    role: str = Field(default=UserRole.STUDENT, max_length=20)
    bio: str = Field(default="", max_length=300)


class Users(UserBase, table=True):
    """
    Database table for users.

    Internal fields (should NOT be exposed via public API):
    - email: Privacy-sensitive
    """

    __tablename__ = "users"

    __table_args__ = (Index("idx_users_email", "email", unique=True),)

    user_id: int | None = Field(default=None, primary_key=True)

    email: str = Field(max_length=120)

    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
