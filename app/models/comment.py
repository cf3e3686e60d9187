"""
SQLModel-based Comment models with inheritance for security

CommentBase (shared public fields)
    ├─> Comments (database table, adds ownership and threading fields)
    └─> CommentCreate/CommentResponse (API schemas, defined in app/schemas)

Threading: parent_comment_id is null for top-level comments and points at
another comment of the same post for replies. The same-post rule is checked
when a reply is created (the database cannot express it).
"""

from datetime import datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from app.utils.timestamps import utc_now


class CommentBase(SQLModel):
    """
    Base model with shared public fields for Comments.

    These fields are safe to expose via the API.
    """

    content: str

    # Threading: null for top-level, comment_id of parent for replies
    parent_comment_id: int | None = Field(default=None)


class Comments(CommentBase, table=True):
    """
    Database table for comments.

    post_id is set on creation and never changed afterwards.
    """

    __tablename__ = "comments"

    __table_args__ = (
        Index("idx_comments_post_id", "post_id"),
        Index("idx_comments_author_id", "author_id"),
        Index("idx_comments_parent_comment_id", "parent_comment_id"),
    )

    comment_id: int | None = Field(default=None, primary_key=True)

    post_id: int = Field(foreign_key="posts.post_id", ondelete="CASCADE")
    author_id: int = Field(foreign_key="users.user_id", ondelete="CASCADE")

    # Replies survive their parent's deletion and surface as top-level comments
    parent_comment_id: int | None = Field(
        default=None, foreign_key="comments.comment_id", ondelete="SET NULL"
    )

    created_at: datetime = Field(default_factory=utc_now)
