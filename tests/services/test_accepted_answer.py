"""
Tests for the accepted-answer state machine.

These tests verify:
- solved is true exactly when an accepted answer is set
- Re-submitting the accepted answer un-solves the post
- Only the post author can change the state
- The comment must belong to the post
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.models import Categories, Posts, Users
from app.services.accepted_answer import solve
from tests.factories import create_comment, create_post


def assert_consistent(post: Posts) -> None:
    assert post.solved == (post.accepted_answer_id is not None)


@pytest.mark.unit
class TestSolve:
    async def test_accept_then_unaccept(
        self, db_session: AsyncSession, alice: Users, bob: Users, post: Posts
    ):
        comment = await create_comment(db_session, post, bob)

        state = await solve(db_session, post.post_id, comment.comment_id, alice)
        assert (state.solved, state.accepted_answer) == (True, comment.comment_id)
        assert_consistent(post)

        state = await solve(db_session, post.post_id, comment.comment_id, alice)
        assert (state.solved, state.accepted_answer) == (False, None)
        assert_consistent(post)

    async def test_switch_accepted_answer(
        self, db_session: AsyncSession, alice: Users, bob: Users, carol: Users, post: Posts
    ):
        first = await create_comment(db_session, post, bob)
        second = await create_comment(db_session, post, carol)

        await solve(db_session, post.post_id, first.comment_id, alice)
        state = await solve(db_session, post.post_id, second.comment_id, alice)

        assert (state.solved, state.accepted_answer) == (True, second.comment_id)
        assert post.accepted_answer_id == second.comment_id

    async def test_non_author_rejected_state_unchanged(
        self, db_session: AsyncSession, alice: Users, bob: Users, post: Posts
    ):
        comment = await create_comment(db_session, post, bob)
        await solve(db_session, post.post_id, comment.comment_id, alice)

        with pytest.raises(AuthorizationError):
            await solve(db_session, post.post_id, comment.comment_id, bob)

        assert post.solved is True
        assert post.accepted_answer_id == comment.comment_id

    async def test_admin_is_not_the_author(
        self, db_session: AsyncSession, admin: Users, bob: Users, post: Posts
    ):
        comment = await create_comment(db_session, post, bob)

        with pytest.raises(AuthorizationError):
            await solve(db_session, post.post_id, comment.comment_id, admin)

        assert post.solved is False

    async def test_comment_from_other_post_rejected(
        self,
        db_session: AsyncSession,
        alice: Users,
        bob: Users,
        category: Categories,
        post: Posts,
    ):
        other_post = await create_post(db_session, bob, category, title="Other")
        foreign_comment = await create_comment(db_session, other_post, bob)

        with pytest.raises(ValidationError) as exc_info:
            await solve(db_session, post.post_id, foreign_comment.comment_id, alice)

        assert exc_info.value.field == "comment_id"
        assert post.solved is False
        assert post.accepted_answer_id is None

    async def test_missing_comment_rejected(
        self, db_session: AsyncSession, alice: Users, post: Posts
    ):
        with pytest.raises(ValidationError):
            await solve(db_session, post.post_id, 999999, alice)

    async def test_missing_post(self, db_session: AsyncSession, alice: Users):
        with pytest.raises(NotFoundError):
            await solve(db_session, 999999, 1, alice)
