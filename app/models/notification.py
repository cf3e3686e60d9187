"""
SQLModel-based Notification models with inheritance for security

NotificationBase (shared public fields)
    ├─> Notifications (database table)
    └─> NotificationResponse (API schema, defined in app/schemas)

Notifications are never deleted and only their read flag changes. When the
post or comment they point at is deleted the reference becomes null and the
notification itself stays.
"""

from datetime import datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from app.utils.timestamps import utc_now


class NotificationBase(SQLModel):
    """Base model with shared public fields for Notifications."""

    recipient_id: int
    sender_id: int

    # One of app.config.NotificationType
    type: str = Field(max_length=20)

    post_id: int | None = Field(default=None)
    comment_id: int | None = Field(default=None)

    read: bool = Field(default=False)


class Notifications(NotificationBase, table=True):
    """
    Database table for notifications.

    The (recipient_id, read, created_at) index serves both the newest-first
    list and the unread count, which clients poll.
    """

    __tablename__ = "notifications"

    __table_args__ = (
        Index("idx_notifications_recipient_read_created", "recipient_id", "read", "created_at"),
        Index("idx_notifications_sender_id", "sender_id"),
    )

    notification_id: int | None = Field(default=None, primary_key=True)

    recipient_id: int = Field(foreign_key="users.user_id", ondelete="CASCADE")
    sender_id: int = Field(foreign_key="users.user_id", ondelete="CASCADE")

    post_id: int | None = Field(default=None, foreign_key="posts.post_id", ondelete="SET NULL")
    comment_id: int | None = Field(
        default=None, foreign_key="comments.comment_id", ondelete="SET NULL"
    )

    created_at: datetime = Field(default_factory=utc_now)
