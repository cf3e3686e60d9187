"""
Categories API endpoints

Anyone can list categories; creating and deleting them is admin-only.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AdminUser
from app.core.database import get_db
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models import Categories, Posts
from app.schemas.category import CategoryCreate, CategoryResponse
from app.schemas.common import MessageResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)) -> list[CategoryResponse]:
    """All categories sorted by name."""
    result = await db.execute(select(Categories).order_by(Categories.name_key))  # type: ignore[arg-type]
    return [CategoryResponse.model_validate(c) for c in result.scalars().all()]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    current_user: AdminUser,
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """
    Create a category. Admin only.

    Names are unique regardless of case ("Exams" and "exams" clash).
    """
    if not category_data.name:
        raise ValidationError("name is required", field="name")

    name_key = category_data.name.lower()
    existing = await db.execute(
        select(Categories.category_id).where(Categories.name_key == name_key)  # type: ignore[call-overload]
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Category already exists")

    category = Categories(
        name=category_data.name,
        name_key=name_key,
        description=category_data.description,
    )
    db.add(category)
    try:
        await db.flush()
    except IntegrityError as e:
        raise ConflictError("Category already exists") from e
    await db.refresh(category)

    logger.info(
        "category_created",
        category_id=category.category_id,
        name=category.name,
        created_by=current_user.user_id,
    )
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: Annotated[int, Path(description="Category ID")],
    current_user: AdminUser,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """
    Delete a category. Admin only.

    A category that still has posts cannot be deleted; move or delete the
    posts first.
    """
    category = await db.get(Categories, category_id)
    if category is None:
        raise NotFoundError("Category not found")

    in_use = await db.execute(
        select(func.count()).select_from(Posts).where(Posts.category_id == category_id)  # type: ignore[arg-type]
    )
    post_count = in_use.scalar() or 0
    if post_count:
        raise ConflictError(f"Category still has {post_count} post(s)")

    await db.delete(category)
    await db.flush()

    logger.info("category_deleted", category_id=category_id, deleted_by=current_user.user_id)
    return MessageResponse(message="Category deleted")
