"""
Pydantic schemas for content reporting.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.config import settings
from app.models.report import ReportBase
from app.schemas.base import UTCDatetime
from app.schemas.common import UserSummary


class ReportCreate(BaseModel):
    """Schema for reporting a post or a comment."""

    target_type: Literal["post", "comment"] = Field(description="What is being reported")
    target_id: int = Field(description="ID of the reported post or comment")
    reason: str = Field(
        min_length=1,
        max_length=settings.REPORT_REASON_MAX_LENGTH,
        description="Why the content is being reported",
    )

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        """Trim whitespace; a blank reason is rejected by the report service."""
        return v.strip()


class ReportResponse(ReportBase):
    """Response schema for a report."""

    report_id: int
    reporter_id: int
    resolved: bool
    created_at: UTCDatetime

    model_config = {"from_attributes": True}


class ReportListItem(ReportResponse):
    """Extended response for admin listing."""

    reporter: UserSummary | None = None
    target_exists: bool = True
