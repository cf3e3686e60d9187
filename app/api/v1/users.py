"""
Users API endpoints

Public profiles, the current user's profile edits and bookmarks.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.auth import CurrentUser
from app.core.database import get_db
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models import Bookmarks, Posts, Users
from app.schemas.post import PostResponse, UserPostsResponse
from app.schemas.user import BookmarkToggleResponse, UserProfileUpdate, UserResponse
from app.services.posts import build_post_responses, list_user_posts
from app.services.upvotes import insert_ignore
from app.utils.timestamps import utc_now

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


async def _bookmarked_post_ids(db: AsyncSession, user_id: int) -> list[int]:
    result = await db.execute(
        select(Bookmarks.post_id)  # type: ignore[call-overload]
        .where(Bookmarks.user_id == user_id)
        .order_by(desc(Bookmarks.created_at), desc(Bookmarks.post_id))
    )
    return list(result.scalars().all())


@router.get("/bookmarks", response_model=list[PostResponse])
async def list_bookmarks(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> list[PostResponse]:
    """The current user's bookmarked posts, most recently bookmarked first."""
    assert current_user.user_id is not None
    post_ids = await _bookmarked_post_ids(db, current_user.user_id)
    if not post_ids:
        return []

    result = await db.execute(select(Posts).where(Posts.post_id.in_(post_ids)))  # type: ignore[union-attr]
    by_id = {post.post_id: post for post in result.scalars().all()}
    return await build_post_responses(db, [by_id[pid] for pid in post_ids if pid in by_id])


@router.post("/bookmarks/{post_id}", response_model=BookmarkToggleResponse)
async def toggle_bookmark(
    post_id: Annotated[int, Path(description="Post ID")],
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> BookmarkToggleResponse:
    """
    Bookmark a post, or remove the bookmark if it is already there.

    Returns the new state and the full list of bookmarked post IDs.
    """
    if await db.get(Posts, post_id) is None:
        raise NotFoundError("Post not found")

    assert current_user.user_id is not None
    removed = await db.execute(
        delete(Bookmarks).where(
            Bookmarks.user_id == current_user.user_id,  # type: ignore[arg-type]
            Bookmarks.post_id == post_id,  # type: ignore[arg-type]
        )
    )
    bookmarked = not removed.rowcount
    if bookmarked:
        await db.execute(
            insert_ignore(
                Bookmarks, user_id=current_user.user_id, post_id=post_id, created_at=utc_now()
            )
        )

    logger.info(
        "bookmark_toggled", user_id=current_user.user_id, post_id=post_id, bookmarked=bookmarked
    )
    return BookmarkToggleResponse(
        bookmarked=bookmarked,
        bookmarks=await _bookmarked_post_ids(db, current_user.user_id),
    )


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    profile_data: UserProfileUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """
    Update the current user's name and bio.

    The name is trimmed and must not be empty. Bios longer than the limit
    are cut off rather than rejected.
    """
    if profile_data.name is not None:
        name = profile_data.name.strip()
        if not name:
            raise ValidationError("name cannot be empty", field="name")
        current_user.name = name
    if profile_data.bio is not None:
        current_user.bio = profile_data.bio[: settings.BIO_MAX_LENGTH]

    db.add(current_user)
    await db.flush()

    logger.info("profile_updated", user_id=current_user.user_id)
    return UserResponse.model_validate(current_user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: Annotated[int, Path(description="User ID")],
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Public profile of a user. Email is never included."""
    user = await db.get(Users, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return UserResponse.model_validate(user)


@router.get("/{user_id}/posts", response_model=UserPostsResponse)
async def get_user_posts(
    user_id: Annotated[int, Path(description="User ID")],
    db: AsyncSession = Depends(get_db),
) -> UserPostsResponse:
    """A user's posts, newest first, with their total upvotes and comments received."""
    return await list_user_posts(db, user_id)
