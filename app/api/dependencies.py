"""
Common query parameter models for API endpoints.

Routes take these as a single `Annotated[Model, Query()]` parameter, so the
constraints below are enforced as ordinary query validation (400 naming the
offending parameter).
"""

from pydantic import BaseModel, Field

from app.config import settings


class PaginationParams(BaseModel):
    """Common pagination query parameters."""

    page: int = Field(default=1, ge=1, description="Page number")
    per_page: int = Field(
        default=settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page",
    )


class PostListParams(PaginationParams):
    """Pagination plus the post listing filters."""

    search: str | None = Field(default=None, description="Substring of title or content")
    category_id: int | None = Field(default=None, description="Only posts in this category")
    tag: str | None = Field(default=None, description="Only posts carrying this tag")
