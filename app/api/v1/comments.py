"""
Comments API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import NotificationType
from app.core.auth import CurrentUser
from app.core.database import get_db
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models import Comments, Posts
from app.schemas.comment import CommentCreate, CommentResponse
from app.schemas.common import MessageResponse, UserSummary
from app.schemas.post import UpvoteResponse
from app.schemas.report import ReportCreate, ReportResponse
from app.services.moderation import delete_comment
from app.services.notifications import notify
from app.services.reports import submit_report
from app.services.upvotes import toggle_comment_upvote

logger = get_logger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    """
    Add a comment to a post, or a reply to another comment.

    A top-level comment notifies the post author. A reply notifies the
    author of the parent comment only; the post author is not told about
    replies. Nobody is notified about their own actions.

    Requires authentication.
    """
    post = await db.get(Posts, comment_data.post_id)
    if post is None:
        raise NotFoundError("Post not found")

    if not comment_data.content:
        raise ValidationError("content is required", field="content")

    parent: Comments | None = None
    if comment_data.parent_comment_id is not None:
        parent = await db.get(Comments, comment_data.parent_comment_id)
        if parent is None or parent.post_id != post.post_id:
            raise ValidationError(
                "Parent comment does not exist on this post", field="parent_comment_id"
            )

    assert current_user.user_id is not None
    comment = Comments(
        post_id=comment_data.post_id,
        author_id=current_user.user_id,
        content=comment_data.content,
        parent_comment_id=comment_data.parent_comment_id,
    )
    db.add(comment)
    await db.flush()
    await db.refresh(comment)

    logger.info(
        "comment_created",
        comment_id=comment.comment_id,
        post_id=comment.post_id,
        parent_comment_id=comment.parent_comment_id,
        author_id=current_user.user_id,
    )

    if parent is None:
        await notify(
            db,
            recipient_id=post.author_id,
            sender_id=current_user.user_id,
            notification_type=NotificationType.COMMENT,
            post_id=post.post_id,
            comment_id=comment.comment_id,
        )
    else:
        await notify(
            db,
            recipient_id=parent.author_id,
            sender_id=current_user.user_id,
            notification_type=NotificationType.REPLY,
            post_id=post.post_id,
            comment_id=comment.comment_id,
        )

    response = CommentResponse.model_validate(comment)
    response.author = UserSummary(user_id=current_user.user_id, name=current_user.name)
    return response


@router.post("/report", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def report_content(
    report_data: ReportCreate,
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> ReportResponse:
    """
    Report a post or a comment for moderator review.

    Each user can report a given post or comment once.

    Requires authentication.
    """
    report = await submit_report(
        db,
        reporter=current_user,
        target_type=report_data.target_type,
        target_id=report_data.target_id,
        reason=report_data.reason,
    )
    return ReportResponse.model_validate(report)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def remove_comment(
    comment_id: Annotated[int, Path(description="Comment ID")],
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """
    Delete a comment. Author or admin only.

    Replies to the deleted comment stay and are shown as top-level comments.
    """
    await delete_comment(db, comment_id, current_user)
    return MessageResponse(message="Comment deleted")


@router.post("/{comment_id}/upvote", response_model=UpvoteResponse)
async def upvote_comment(
    comment_id: Annotated[int, Path(description="Comment ID")],
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> UpvoteResponse:
    """Toggle the current user's upvote on a comment."""
    result = await toggle_comment_upvote(db, comment_id, current_user)
    return UpvoteResponse(count=result.count, upvoted=result.upvoted)
