"""
Moderation surface: pin toggling and cascading deletes.

Deletes run as a sequence of statements inside the request's transaction,
so they commit together or not at all. If a statement fails we log the ids
involved and raise InternalError; get_db() then rolls the whole cascade back.
"""

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import is_owner_or_admin
from app.core.errors import AuthorizationError, InternalError, NotFoundError
from app.core.logging import get_logger
from app.models import (
    Bookmarks,
    Comments,
    CommentUpvotes,
    Notifications,
    Posts,
    PostUpvotes,
    Users,
)
from app.services.accepted_answer import set_accepted_answer

logger = get_logger(__name__)


async def toggle_pin(db: AsyncSession, post_id: int) -> bool:
    """
    Flip the pinned flag of a post. Admin-only; callers enforce the role.

    Returns:
        The new pinned value
    """
    post = await db.get(Posts, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    post.pinned = not post.pinned
    db.add(post)
    await db.flush()

    logger.info("post_pinned" if post.pinned else "post_unpinned", post_id=post_id)
    return post.pinned


async def delete_post(db: AsyncSession, post_id: int, user: Users) -> None:
    """
    Delete a post and everything hanging off it.

    Order: notifications are detached, then comment upvotes, comments, post
    upvotes and bookmarks are removed, and the post goes last. No comment of
    the post survives.

    Raises:
        NotFoundError: post does not exist
        AuthorizationError: user is neither the author nor an admin
        InternalError: the cascade failed part way (nothing is committed)
    """
    post = await db.get(Posts, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    if not is_owner_or_admin(user, post.author_id):
        raise AuthorizationError("Not authorized to delete this post")

    comment_ids = select(Comments.comment_id).where(Comments.post_id == post_id)  # type: ignore[call-overload]

    try:
        await db.execute(
            update(Notifications)
            .where(
                (Notifications.post_id == post_id)  # type: ignore[arg-type]
                | (Notifications.comment_id.in_(comment_ids))  # type: ignore[union-attr]
            )
            .values(post_id=None, comment_id=None)
        )
        await db.execute(
            delete(CommentUpvotes).where(CommentUpvotes.comment_id.in_(comment_ids))  # type: ignore[attr-defined]
        )
        # Replies point at siblings being deleted; detach first so the bulk
        # delete does not trip the self-referencing foreign key
        await db.execute(
            update(Comments)
            .where(Comments.post_id == post_id)  # type: ignore[arg-type]
            .values(parent_comment_id=None)
        )
        removed = await db.execute(
            delete(Comments).where(Comments.post_id == post_id)  # type: ignore[arg-type]
        )
        await db.execute(delete(PostUpvotes).where(PostUpvotes.post_id == post_id))  # type: ignore[arg-type]
        await db.execute(delete(Bookmarks).where(Bookmarks.post_id == post_id))  # type: ignore[arg-type]
        await db.delete(post)
        await db.flush()
    except SQLAlchemyError as e:
        logger.error(
            "post_delete_cascade_failed",
            post_id=post_id,
            user_id=user.user_id,
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise InternalError("Could not delete post") from e

    logger.info(
        "post_deleted", post_id=post_id, deleted_by=user.user_id, comments_removed=removed.rowcount
    )


async def delete_comment(db: AsyncSession, comment_id: int, user: Users) -> None:
    """
    Delete a comment.

    Direct replies are kept and become top-level comments. If the comment
    was the post's accepted answer the post goes back to unsolved.

    Raises:
        NotFoundError: comment does not exist
        AuthorizationError: user is neither the author nor an admin
        InternalError: a storage step failed (nothing is committed)
    """
    comment = await db.get(Comments, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")

    if not is_owner_or_admin(user, comment.author_id):
        raise AuthorizationError("Not authorized to delete this comment")

    post_id = comment.post_id

    try:
        post = await db.get(Posts, post_id)
        if post is not None and post.accepted_answer_id == comment_id:
            set_accepted_answer(post, None)
            db.add(post)
            logger.info("accepted_answer_cleared", post_id=post_id, comment_id=comment_id)

        await db.execute(
            update(Comments)
            .where(Comments.parent_comment_id == comment_id)  # type: ignore[arg-type]
            .values(parent_comment_id=None)
        )
        await db.execute(
            update(Notifications)
            .where(Notifications.comment_id == comment_id)  # type: ignore[arg-type]
            .values(comment_id=None)
        )
        await db.execute(
            delete(CommentUpvotes).where(CommentUpvotes.comment_id == comment_id)  # type: ignore[arg-type]
        )
        await db.delete(comment)
        await db.flush()
    except SQLAlchemyError as e:
        logger.error(
            "comment_delete_failed",
            comment_id=comment_id,
            post_id=post_id,
            user_id=user.user_id,
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise InternalError("Could not delete comment") from e

    logger.info("comment_deleted", comment_id=comment_id, post_id=post_id, deleted_by=user.user_id)
