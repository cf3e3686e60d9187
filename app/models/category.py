"""
SQLModel-based Category models.

Categories are managed by admins; posts reference them. Names are unique
regardless of case, enforced through the lowercase name_key column.
"""

from datetime import datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from app.utils.timestamps import utc_now


class CategoryBase(SQLModel):
    """Base model with shared public fields for Categories."""

    name: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)


class Categories(CategoryBase, table=True):
    """Database table for categories."""

    __tablename__ = "categories"

    __table_args__ = (Index("idx_categories_name_key", "name_key", unique=True),)

    category_id: int | None = Field(default=None, primary_key=True)

    # Lowercased name, carries the case-insensitive uniqueness
    name_key: str = Field(max_length=100)

    created_at: datetime = Field(default_factory=utc_now)
