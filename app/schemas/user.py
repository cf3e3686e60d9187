"""
Pydantic schemas for User endpoints
"""

from pydantic import BaseModel, Field

from app.models.user import UserBase
from app.schemas.base import UTCDatetime


class UserResponse(UserBase):
    """Public profile. Email stays private."""

    user_id: int
    created_at: UTCDatetime

    model_config = {"from_attributes": True}


class UserProfileUpdate(BaseModel):
    """Schema for updating one's own profile"""

    name: str | None = Field(default=None, max_length=100)
    # Longer bios are truncated rather than rejected
    bio: str | None = None


class BookmarkToggleResponse(BaseModel):
    bookmarked: bool
    bookmarks: list[int]
