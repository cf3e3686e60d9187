"""
Pydantic schemas for Post endpoints
"""

from pydantic import BaseModel, Field, field_validator

from app.schemas.base import UTCDatetime
from app.schemas.comment import CommentNode
from app.schemas.common import CategorySummary, UserSummary
from app.utils.text import normalize_tags


class PostCreate(BaseModel):
    """Schema for creating a new post"""

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    category_id: int
    tags: list[str] = Field(default_factory=list)

    @field_validator("title", "content")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)


class PostUpdate(BaseModel):
    """Schema for updating a post; omitted fields keep their value"""

    title: str | None = Field(default=None, max_length=200)
    content: str | None = None
    category_id: int | None = None
    tags: list[str] | None = None

    @field_validator("title", "content")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        return normalize_tags(v) if v is not None else v


class PostResponse(BaseModel):
    """Schema for post response - what API returns."""

    post_id: int
    title: str
    content: str
    tags: list[str]
    author: UserSummary | None = None
    category: CategorySummary | None = None
    views: int
    pinned: bool
    solved: bool
    accepted_answer_id: int | None = None
    upvotes: int = 0
    comment_count: int = 0
    created_at: UTCDatetime
    updated_at: UTCDatetime


class PostDetailResponse(PostResponse):
    """Post detail with viewer state and the nested comment tree."""

    upvoted: bool = False
    bookmarked: bool = False
    comments: list[CommentNode] = Field(default_factory=list)


class PostListResponse(BaseModel):
    """Schema for paginated post list"""

    total: int
    page: int
    per_page: int
    pages: int
    posts: list[PostResponse]


class UserPostsResponse(BaseModel):
    """A user's posts with aggregate stats for profile pages."""

    posts: list[PostResponse]
    total_upvotes: int
    total_comments: int


class UpvoteResponse(BaseModel):
    """Result of an upvote toggle."""

    count: int
    upvoted: bool


class PinResponse(BaseModel):
    pinned: bool


class SolveResponse(BaseModel):
    """Accepted-answer state after a solve/unsolve request."""

    solved: bool
    accepted_answer: int | None = None
