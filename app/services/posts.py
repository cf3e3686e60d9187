"""
Post queries and mutations.

Post responses are assembled in batches: one query each for authors,
categories, upvote counts and comment counts, keyed by post_id, instead of
per-post lookups.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import String, cast, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.auth import is_owner_or_admin
from app.core.database import dump_json
from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models import Bookmarks, Categories, Comments, CommentUpvotes, Posts, PostUpvotes, Users
from app.schemas.common import CategorySummary, UserSummary
from app.schemas.post import PostCreate, PostListResponse, PostResponse, PostUpdate, UserPostsResponse
from app.services.comment_tree import CommentNode, build_comment_tree, iter_comment_tree
from app.utils.timestamps import utc_now

logger = get_logger(__name__)


async def _require_category(db: AsyncSession, category_id: int) -> Categories:
    category = await db.get(Categories, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


async def _user_names(db: AsyncSession, user_ids: set[int]) -> dict[int, str]:
    if not user_ids:
        return {}
    result = await db.execute(
        select(Users.user_id, Users.name).where(Users.user_id.in_(user_ids))  # type: ignore[call-overload,union-attr]
    )
    return {user_id: name for user_id, name in result.all()}


async def _grouped_counts(db: AsyncSession, key_column: Any, ids: set[int]) -> dict[int, int]:
    if not ids:
        return {}
    result = await db.execute(
        select(key_column, func.count()).where(key_column.in_(ids)).group_by(key_column)
    )
    return {key: count for key, count in result.all()}


async def build_post_responses(db: AsyncSession, posts: Sequence[Posts]) -> list[PostResponse]:
    """Turn Posts rows into responses with author, category and counters filled in."""
    post_ids = {post.post_id for post in posts if post.post_id is not None}
    authors = await _user_names(db, {post.author_id for post in posts})

    category_ids = {post.category_id for post in posts}
    categories: dict[int, str] = {}
    if category_ids:
        result = await db.execute(
            select(Categories.category_id, Categories.name).where(  # type: ignore[call-overload]
                Categories.category_id.in_(category_ids)  # type: ignore[union-attr]
            )
        )
        categories = {category_id: name for category_id, name in result.all()}

    upvotes = await _grouped_counts(db, PostUpvotes.post_id, post_ids)
    comment_counts = await _grouped_counts(db, Comments.post_id, post_ids)

    responses: list[PostResponse] = []
    for post in posts:
        assert post.post_id is not None
        author_name = authors.get(post.author_id)
        category_name = categories.get(post.category_id)
        responses.append(
            PostResponse(
                post_id=post.post_id,
                title=post.title,
                content=post.content,
                tags=list(post.tags or []),
                author=UserSummary(user_id=post.author_id, name=author_name)
                if author_name is not None
                else None,
                # Category may have been removed out from under the post
                category=CategorySummary(category_id=post.category_id, name=category_name)
                if category_name is not None
                else None,
                views=post.views,
                pinned=post.pinned,
                solved=post.solved,
                accepted_answer_id=post.accepted_answer_id,
                upvotes=upvotes.get(post.post_id, 0),
                comment_count=comment_counts.get(post.post_id, 0),
                created_at=post.created_at,
                updated_at=post.updated_at,
            )
        )
    return responses


async def create_post(db: AsyncSession, author: Users, data: PostCreate) -> PostResponse:
    """
    Create a post.

    Raises:
        ValidationError: title or content blank after trimming
        NotFoundError: category does not exist
    """
    if not data.title:
        raise ValidationError("title is required", field="title")
    if not data.content:
        raise ValidationError("content is required", field="content")
    await _require_category(db, data.category_id)

    assert author.user_id is not None
    post = Posts(
        title=data.title,
        content=data.content,
        category_id=data.category_id,
        author_id=author.user_id,
        tags=data.tags,
    )
    db.add(post)
    await db.flush()
    await db.refresh(post)

    logger.info("post_created", post_id=post.post_id, author_id=author.user_id)
    return (await build_post_responses(db, [post]))[0]


async def update_post(
    db: AsyncSession, post_id: int, user: Users, data: PostUpdate
) -> PostResponse:
    """
    Partially update a post. Only the author or an admin may edit.

    Raises:
        NotFoundError: post or new category does not exist
        AuthorizationError: user is neither the author nor an admin
        ValidationError: title or content given but blank
    """
    post = await db.get(Posts, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    if not is_owner_or_admin(user, post.author_id):
        raise AuthorizationError("Not authorized to edit this post")

    if data.title is not None:
        if not data.title:
            raise ValidationError("title cannot be empty", field="title")
        post.title = data.title
    if data.content is not None:
        if not data.content:
            raise ValidationError("content cannot be empty", field="content")
        post.content = data.content
    if data.category_id is not None and data.category_id != post.category_id:
        await _require_category(db, data.category_id)
        post.category_id = data.category_id
    if data.tags is not None:
        post.tags = data.tags

    post.updated_at = utc_now()
    db.add(post)
    await db.flush()

    logger.info("post_updated", post_id=post_id, updated_by=user.user_id)
    return (await build_post_responses(db, [post]))[0]


async def get_post_detail(db: AsyncSession, post_id: int, viewer: Users | None) -> dict[str, Any]:
    """
    Load a post for display and count the view.

    The view counter is bumped with a single UPDATE (views = views + 1) so
    concurrent readers never lose increments.

    Returns:
        PostDetailResponse-shaped dict. Comments are nested dicts produced
        without recursion and capped at MAX_THREAD_DEPTH levels of nesting.

    Raises:
        NotFoundError: post does not exist
    """
    bumped = await db.execute(
        update(Posts)
        .where(Posts.post_id == post_id)  # type: ignore[arg-type]
        .values(views=Posts.views + 1)
        .execution_options(synchronize_session=False)
    )
    if not bumped.rowcount:
        raise NotFoundError("Post not found")

    post = await db.get(Posts, post_id, populate_existing=True)
    assert post is not None

    detail = (await build_post_responses(db, [post]))[0].model_dump(mode="json")

    upvoted = False
    bookmarked = False
    if viewer is not None:
        upvoted = (
            await db.execute(
                select(PostUpvotes.post_id).where(  # type: ignore[call-overload]
                    PostUpvotes.post_id == post_id, PostUpvotes.user_id == viewer.user_id
                )
            )
        ).first() is not None
        bookmarked = (
            await db.execute(
                select(Bookmarks.post_id).where(  # type: ignore[call-overload]
                    Bookmarks.post_id == post_id, Bookmarks.user_id == viewer.user_id
                )
            )
        ).first() is not None

    detail["upvoted"] = upvoted
    detail["bookmarked"] = bookmarked
    detail["comments"] = await load_comment_tree(db, post_id)
    return detail


async def load_comment_tree(db: AsyncSession, post_id: int) -> list[dict[str, Any]]:
    """Comments of a post as a nested reply forest, oldest first at every level."""
    result = await db.execute(
        select(Comments)
        .where(Comments.post_id == post_id)  # type: ignore[arg-type]
        .order_by(Comments.comment_id)  # type: ignore[arg-type]
    )
    comments = result.scalars().all()

    authors = await _user_names(db, {comment.author_id for comment in comments})
    upvotes = await _grouped_counts(
        db, CommentUpvotes.comment_id, {c.comment_id for c in comments if c.comment_id is not None}
    )

    return serialize_comment_tree(build_comment_tree(comments), authors, upvotes)


def serialize_comment_tree(
    roots: Sequence[CommentNode],
    authors: dict[int, str],
    upvotes: dict[int, int],
    max_depth: int | None = None,
) -> list[dict[str, Any]]:
    """
    Render a built tree as CommentNode-shaped dicts.

    Nesting stops at max_depth levels (MAX_THREAD_DEPTH by default). Replies
    below that are listed, in thread order, alongside the comment at the last
    level and keep their own parent_comment_id. The JSON encoder recurses
    per level, so the cap keeps any thread renderable.
    """
    max_depth = max(max_depth or settings.MAX_THREAD_DEPTH, 1)
    forest: list[dict[str, Any]] = []
    # levels[d] receives the next comment shown at depth d
    levels: list[list[dict[str, Any]]] = [forest]
    for node, depth in iter_comment_tree(roots):
        shown = min(depth, max_depth - 1)
        comment = node.comment
        author_name = authors.get(comment.author_id)
        item: dict[str, Any] = {
            "comment_id": comment.comment_id,
            "post_id": comment.post_id,
            "content": comment.content,
            "parent_comment_id": comment.parent_comment_id,
            "created_at": comment.created_at,
            "author": {"user_id": comment.author_id, "name": author_name}
            if author_name is not None
            else None,
            "upvotes": upvotes.get(comment.comment_id, 0),
            "replies": [],
        }
        levels[shown].append(item)
        del levels[shown + 1 :]
        if shown + 1 < max_depth:
            levels.append(item["replies"])
    return forest


async def list_posts(
    db: AsyncSession,
    page: int,
    per_page: int,
    search: str | None = None,
    category_id: int | None = None,
    tag: str | None = None,
) -> PostListResponse:
    """
    List posts, pinned first and then newest first.

    search is a case-insensitive substring match on title and content.
    tag matches one normalized tag exactly.
    """
    query = select(Posts)

    if search and search.strip():
        term = search.strip()
        query = query.where(
            Posts.title.icontains(term, autoescape=True)  # type: ignore[attr-defined]
            | Posts.content.icontains(term, autoescape=True)  # type: ignore[attr-defined]
        )
    if category_id is not None:
        query = query.where(Posts.category_id == category_id)  # type: ignore[arg-type]
    if tag and tag.strip():
        # Tags are stored as a JSON array of strings; match the encoded element
        needle = dump_json(tag.strip().lower())
        query = query.where(cast(Posts.tags, String).contains(needle, autoescape=True))

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar() or 0

    query = (
        query.order_by(desc(Posts.pinned), desc(Posts.created_at), desc(Posts.post_id))  # type: ignore[arg-type]
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    posts = (await db.execute(query)).scalars().all()

    return PostListResponse(
        total=total,
        page=page,
        per_page=per_page,
        pages=(total + per_page - 1) // per_page,
        posts=await build_post_responses(db, posts),
    )


async def posts_by_author(db: AsyncSession, author_id: int) -> list[PostResponse]:
    """All posts of one author, newest first."""
    result = await db.execute(
        select(Posts)
        .where(Posts.author_id == author_id)  # type: ignore[arg-type]
        .order_by(desc(Posts.created_at), desc(Posts.post_id))  # type: ignore[arg-type]
    )
    return await build_post_responses(db, result.scalars().all())


async def list_user_posts(db: AsyncSession, user_id: int) -> UserPostsResponse:
    """
    A user's posts with totals for their profile page.

    Raises:
        NotFoundError: user does not exist
    """
    if await db.get(Users, user_id) is None:
        raise NotFoundError("User not found")

    posts = await posts_by_author(db, user_id)
    return UserPostsResponse(
        posts=posts,
        total_upvotes=sum(post.upvotes for post in posts),
        total_comments=sum(post.comment_count for post in posts),
    )
