"""
Pydantic schemas for Comment endpoints
"""

from pydantic import BaseModel, Field, field_validator

from app.models.comment import CommentBase
from app.schemas.base import UTCDatetime
from app.schemas.common import UserSummary


class CommentCreate(BaseModel):
    """Schema for creating a new comment"""

    post_id: int = Field(description="ID of post to comment on")
    content: str = Field(min_length=1, description="Comment text")
    parent_comment_id: int | None = Field(
        default=None,
        description="Parent comment ID for replies (null = top-level comment)",
    )

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        """Trim surrounding whitespace; blank comments are rejected by the endpoint."""
        return v.strip()


class CommentResponse(CommentBase):
    """
    Schema for comment response - what API returns.

    Inherits public fields from CommentBase and adds author and vote data.
    """

    comment_id: int
    post_id: int
    created_at: UTCDatetime
    author: UserSummary | None = None
    upvotes: int = 0


class CommentNode(CommentResponse):
    """A comment together with its direct replies, oldest first."""

    replies: list["CommentNode"] = Field(default_factory=list)


CommentNode.model_rebuild()
