"""
Upvote toggle engine for posts and comments.

A toggle is one conditional DELETE of the (entity, user) row; only when that
removed nothing do we INSERT IGNORE the row. Membership is never read first
and written back, so two concurrent toggles from the same user cannot leave
a duplicate vote, and votes from different users never overwrite each other.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import NotificationType
from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.models import Comments, CommentUpvotes, Posts, PostUpvotes, Users
from app.services.notifications import notify
from app.utils.timestamps import utc_now

logger = get_logger(__name__)


@dataclass(frozen=True)
class UpvoteResult:
    count: int
    upvoted: bool


def insert_ignore(table: Any, **values: Any) -> Any:
    """INSERT that silently skips rows violating the primary key."""
    return (
        insert(table)
        .values(**values)
        .prefix_with("IGNORE", dialect="mysql")
        .prefix_with("OR IGNORE", dialect="sqlite")
    )


async def _toggle(
    db: AsyncSession, table: Any, key_column: Any, key_name: str, entity_id: int, user_id: int
) -> bool:
    """Flip membership of user_id in the upvote set; True if the user now upvotes."""
    removed = await db.execute(
        delete(table).where(key_column == entity_id, table.user_id == user_id)
    )
    if removed.rowcount:
        return False

    await db.execute(
        insert_ignore(table, **{key_name: entity_id, "user_id": user_id, "created_at": utc_now()})
    )
    return True


async def count_post_upvotes(db: AsyncSession, post_id: int) -> int:
    result = await db.execute(
        select(func.count()).select_from(PostUpvotes).where(PostUpvotes.post_id == post_id)  # type: ignore[arg-type]
    )
    return result.scalar() or 0


async def count_comment_upvotes(db: AsyncSession, comment_id: int) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(CommentUpvotes)
        .where(CommentUpvotes.comment_id == comment_id)  # type: ignore[arg-type]
    )
    return result.scalar() or 0


async def toggle_post_upvote(db: AsyncSession, post_id: int, user: Users) -> UpvoteResult:
    """
    Toggle the user's upvote on a post.

    Adding an upvote notifies the post author (never for their own post).

    Raises:
        NotFoundError: post does not exist
    """
    post = await db.get(Posts, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    assert user.user_id is not None
    upvoted = await _toggle(db, PostUpvotes, PostUpvotes.post_id, "post_id", post_id, user.user_id)
    count = await count_post_upvotes(db, post_id)

    logger.info("upvote_toggled", target="post", post_id=post_id, upvoted=upvoted, count=count)

    if upvoted:
        await notify(
            db,
            recipient_id=post.author_id,
            sender_id=user.user_id,
            notification_type=NotificationType.UPVOTE,
            post_id=post_id,
        )

    return UpvoteResult(count=count, upvoted=upvoted)


async def toggle_comment_upvote(db: AsyncSession, comment_id: int, user: Users) -> UpvoteResult:
    """
    Toggle the user's upvote on a comment. Comment upvotes do not notify.

    Raises:
        NotFoundError: comment does not exist
    """
    comment = await db.get(Comments, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")

    assert user.user_id is not None
    upvoted = await _toggle(
        db, CommentUpvotes, CommentUpvotes.comment_id, "comment_id", comment_id, user.user_id
    )
    count = await count_comment_upvotes(db, comment_id)

    logger.info(
        "upvote_toggled", target="comment", comment_id=comment_id, upvoted=upvoted, count=count
    )

    return UpvoteResult(count=count, upvoted=upvoted)
