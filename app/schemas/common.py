"""
Shared/common Pydantic schemas used across multiple endpoints
"""

from pydantic import BaseModel


class UserSummary(BaseModel):
    """
    Minimal user information for embedding in responses.

    Used by post, comment, notification and report responses so clients do
    not need a second request for author names.
    """

    user_id: int
    name: str

    # Allow Pydantic to read from SQLModel attributes (not just dicts)
    model_config = {"from_attributes": True}


class CategorySummary(BaseModel):
    """Minimal category information for embedding in post responses."""

    category_id: int
    name: str

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Simple message response for success operations."""

    message: str


class SuccessResponse(BaseModel):
    """Acknowledgement for idempotent updates."""

    success: bool = True
