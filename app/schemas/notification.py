"""
Pydantic schemas for Notification endpoints
"""

from pydantic import BaseModel

from app.schemas.base import UTCDatetime
from app.schemas.common import UserSummary


class PostSummary(BaseModel):
    """Minimal post information for embedding in notifications."""

    post_id: int
    title: str


class NotificationResponse(BaseModel):
    """A single notification as shown in the user's inbox."""

    notification_id: int
    type: str
    read: bool
    created_at: UTCDatetime
    sender: UserSummary | None = None
    post: PostSummary | None = None
    comment_id: int | None = None


class NotificationListResponse(BaseModel):
    """Most recent notifications plus the total unread count (not capped by the list size)."""

    notifications: list[NotificationResponse]
    unread_count: int
