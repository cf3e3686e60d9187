"""
Posts API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import PostListParams
from app.core.auth import AdminUser, CurrentUser, OptionalCurrentUser
from app.core.database import get_db
from app.core.json_response import UTCJSONResponse
from app.schemas.common import MessageResponse
from app.schemas.post import (
    PinResponse,
    PostCreate,
    PostDetailResponse,
    PostListResponse,
    PostResponse,
    PostUpdate,
    SolveResponse,
    UpvoteResponse,
)
from app.services import posts as post_service
from app.services.accepted_answer import solve
from app.services.moderation import delete_post, toggle_pin
from app.services.upvotes import toggle_post_upvote

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=PostListResponse)
async def list_posts(
    params: Annotated[PostListParams, Query()],
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    """
    List posts with optional filtering.

    **Ordering:** pinned posts first, then newest first.

    **Filters:**
    - `search`: case-insensitive substring of title or content
    - `category_id`: posts in one category
    - `tag`: posts carrying a tag (matched after lowercasing)

    **Examples:**
    - `/posts?search=exam` - Posts mentioning "exam"
    - `/posts?category_id=2&page=2` - Second page of category 2
    - `/posts?tag=python` - Posts tagged "python"
    """
    return await post_service.list_posts(
        db,
        page=params.page,
        per_page=params.per_page,
        search=params.search,
        category_id=params.category_id,
        tag=params.tag,
    )


@router.get("/mine", response_model=list[PostResponse])
async def list_my_posts(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> list[PostResponse]:
    """Posts written by the current user, newest first."""
    assert current_user.user_id is not None
    return await post_service.posts_by_author(db, current_user.user_id)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    """
    Create a post in a category.

    Tags are trimmed, lowercased and de-duplicated; empty tags are dropped.

    Requires authentication.
    """
    return await post_service.create_post(db, current_user, post_data)


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(
    post_id: Annotated[int, Path(description="Post ID")],
    viewer: OptionalCurrentUser,
    db: AsyncSession = Depends(get_db),
) -> UTCJSONResponse:
    """
    Get a post with its comment tree. Every call counts as one view.

    For signed-in viewers `upvoted` and `bookmarked` reflect their own state;
    anonymous viewers always get false.

    Comments are nested under `replies`, oldest first at every level.
    Replies whose parent was deleted appear at the top level.
    """
    detail = await post_service.get_post_detail(db, post_id, viewer)
    return UTCJSONResponse(content=detail)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: Annotated[int, Path(description="Post ID")],
    post_data: PostUpdate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    """Edit a post. Author or admin only; omitted fields are left unchanged."""
    return await post_service.update_post(db, post_id, current_user, post_data)


@router.delete("/{post_id}", response_model=MessageResponse)
async def remove_post(
    post_id: Annotated[int, Path(description="Post ID")],
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """
    Delete a post with all of its comments, upvotes and bookmarks.

    Author or admin only. Notifications about the post are kept but no
    longer link to it.
    """
    await delete_post(db, post_id, current_user)
    return MessageResponse(message="Post deleted")


@router.post("/{post_id}/upvote", response_model=UpvoteResponse)
async def upvote_post(
    post_id: Annotated[int, Path(description="Post ID")],
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> UpvoteResponse:
    """
    Toggle the current user's upvote on a post.

    Adding an upvote notifies the post author, unless it is their own post.
    """
    result = await toggle_post_upvote(db, post_id, current_user)
    return UpvoteResponse(count=result.count, upvoted=result.upvoted)


@router.post("/{post_id}/pin", response_model=PinResponse)
async def pin_post(
    post_id: Annotated[int, Path(description="Post ID")],
    _admin: AdminUser,
    db: AsyncSession = Depends(get_db),
) -> PinResponse:
    """Pin or unpin a post. Admin only."""
    pinned = await toggle_pin(db, post_id)
    return PinResponse(pinned=pinned)


@router.post("/{post_id}/solve/{comment_id}", response_model=SolveResponse)
async def solve_post(
    post_id: Annotated[int, Path(description="Post ID")],
    comment_id: Annotated[int, Path(description="Comment to accept as the answer")],
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> SolveResponse:
    """
    Mark a comment as the accepted answer, or unmark it.

    Only the post author may do this. Sending the current accepted answer
    again marks the post as unsolved.
    """
    state = await solve(db, post_id, comment_id, current_user)
    return SolveResponse(solved=state.solved, accepted_answer=state.accepted_answer)
