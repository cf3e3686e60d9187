"""
SQLModel-based Bookmark model.

Junction table between users and the posts they saved.
"""

from datetime import datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from app.utils.timestamps import utc_now


class Bookmarks(SQLModel, table=True):
    """Database table for bookmarks."""

    __tablename__ = "bookmarks"

    __table_args__ = (Index("idx_bookmarks_post_id", "post_id"),)

    user_id: int = Field(foreign_key="users.user_id", primary_key=True, ondelete="CASCADE")
    post_id: int = Field(foreign_key="posts.post_id", primary_key=True, ondelete="CASCADE")

    created_at: datetime = Field(default_factory=utc_now)
