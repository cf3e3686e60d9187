"""
Upvote junction tables.

An upvote is set membership: one row per (entity, user). The composite
primary key is what guarantees a user is counted at most once, which lets
the toggle run as a single DELETE or INSERT IGNORE instead of
read-modify-write.
"""

from datetime import datetime

from sqlmodel import Field, SQLModel

from app.utils.timestamps import utc_now


class PostUpvotes(SQLModel, table=True):
    """Database table for post upvotes."""

    __tablename__ = "post_upvotes"

    post_id: int = Field(foreign_key="posts.post_id", primary_key=True, ondelete="CASCADE")
    user_id: int = Field(foreign_key="users.user_id", primary_key=True, ondelete="CASCADE")

    created_at: datetime = Field(default_factory=utc_now)


class CommentUpvotes(SQLModel, table=True):
    """Database table for comment upvotes."""

    __tablename__ = "comment_upvotes"

    comment_id: int = Field(
        foreign_key="comments.comment_id", primary_key=True, ondelete="CASCADE"
    )
    user_id: int = Field(foreign_key="users.user_id", primary_key=True, ondelete="CASCADE")

    created_at: datetime = Field(default_factory=utc_now)
