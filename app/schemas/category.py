"""
Pydantic schemas for Category endpoints
"""

from pydantic import BaseModel, Field, field_validator

from app.models.category import CategoryBase
from app.schemas.base import UTCDatetime


class CategoryCreate(BaseModel):
    """Schema for creating a category"""

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class CategoryResponse(CategoryBase):
    """Schema for category response"""

    category_id: int
    created_at: UTCDatetime

    model_config = {"from_attributes": True}
