"""
SQLModel-based Post models with inheritance for security

PostBase (shared public fields)
    ├─> Posts (database table, adds moderation and counter fields)
    └─> PostCreate/PostUpdate/PostResponse (API schemas, defined in app/schemas)

Posts do not keep a list of their comment ids. Comment count and the reply
tree are always derived from the comments table (comments.post_id), so there
is no second copy of that relation to keep in sync.

Accepted answer invariant: solved is True exactly when accepted_answer_id is
set, and accepted_answer_id always names a comment of this post. Both fields
are only written together by app.services.accepted_answer and cleared by
app.services.moderation when the accepted comment is deleted.
"""

from datetime import datetime

from sqlalchemy import JSON, Column, Index
from sqlmodel import Field, SQLModel

from app.utils.timestamps import utc_now


class PostBase(SQLModel):
    """
    Base model with shared public fields for Posts.

    These fields are safe to expose via the API.
    """

    title: str = Field(max_length=200)
    content: str

    category_id: int = Field(foreign_key="categories.category_id")


class Posts(PostBase, table=True):
    """
    Database table for posts.

    Extends PostBase with:
    - Primary key and author reference
    - Tags (ordered, lowercase, stored as JSON)
    - View counter, admin pin flag, accepted-answer state
    """

    __tablename__ = "posts"

    __table_args__ = (
        Index("idx_posts_author_id", "author_id"),
        Index("idx_posts_category_id", "category_id"),
        Index("idx_posts_pinned_created", "pinned", "created_at"),
    )

    post_id: int | None = Field(default=None, primary_key=True)

    author_id: int = Field(foreign_key="users.user_id", ondelete="CASCADE")

    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    views: int = Field(default=0)
    pinned: bool = Field(default=False)

    solved: bool = Field(default=False)
    # Not a foreign key: posts and comments would reference each other.
    accepted_answer_id: int | None = Field(default=None, index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
