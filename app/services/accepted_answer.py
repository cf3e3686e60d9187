"""
Accepted-answer state machine.

A post is either unsolved or solved(comment_id). Only the post author can
move it. Submitting the current accepted answer again un-solves the post;
any other comment of the post becomes the new accepted answer.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models import Comments, Posts, Users
from app.utils.timestamps import utc_now

logger = get_logger(__name__)


@dataclass(frozen=True)
class AcceptedAnswerState:
    solved: bool
    accepted_answer: int | None


def set_accepted_answer(post: Posts, comment_id: int | None) -> None:
    """Write solved and accepted_answer_id together so they can never disagree."""
    post.accepted_answer_id = comment_id
    post.solved = comment_id is not None


async def solve(
    db: AsyncSession, post_id: int, comment_id: int, user: Users
) -> AcceptedAnswerState:
    """
    Toggle comment_id as the accepted answer of post_id.

    Raises:
        NotFoundError: post does not exist
        AuthorizationError: user is not the post author (state unchanged)
        ValidationError: comment does not exist or belongs to another post
    """
    post = await db.get(Posts, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    if post.author_id != user.user_id:
        raise AuthorizationError("Only the post author can accept an answer")

    if post.accepted_answer_id == comment_id:
        set_accepted_answer(post, None)
    else:
        comment = await db.get(Comments, comment_id)
        if comment is None or comment.post_id != post_id:
            raise ValidationError("Comment does not belong to this post", field="comment_id")
        set_accepted_answer(post, comment_id)

    post.updated_at = utc_now()
    db.add(post)
    await db.flush()

    logger.info(
        "post_solved" if post.solved else "post_unsolved",
        post_id=post_id,
        accepted_answer_id=post.accepted_answer_id,
    )

    return AcceptedAnswerState(solved=post.solved, accepted_answer=post.accepted_answer_id)
