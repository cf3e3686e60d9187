"""
Builders for test data and request headers.

Rows are committed so they behave like pre-existing data when an API call
runs against the shared test session.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import UserRole
from app.core.security import create_access_token
from app.models import Categories, Comments, Posts, Users


def auth_headers(user: Users) -> dict[str, str]:
    """Bearer header for a user, as the auth service would issue it."""
    assert user.user_id is not None
    return {"Authorization": f"Bearer {create_access_token(user.user_id)}"}


async def create_user(
    db_session: AsyncSession,
    name: str,
    email: str,
    role: str = UserRole.STUDENT,
) -> Users:
    user = Users(name=name, email=email, role=role)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def create_category(
    db_session: AsyncSession, name: str = "Academics", description: str = "Courses and exams"
) -> Categories:
    category = Categories(name=name, name_key=name.lower(), description=description)
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


async def create_post(
    db_session: AsyncSession,
    author: Users,
    category: Categories,
    title: str = "How do I prepare for finals?",
    content: str = "Looking for study tips.",
    tags: list[str] | None = None,
) -> Posts:
    assert author.user_id is not None and category.category_id is not None
    post = Posts(
        title=title,
        content=content,
        author_id=author.user_id,
        category_id=category.category_id,
        tags=tags or [],
    )
    db_session.add(post)
    await db_session.commit()
    await db_session.refresh(post)
    return post


async def create_comment(
    db_session: AsyncSession,
    post: Posts,
    author: Users,
    content: str = "Start early and sleep well.",
    parent: Comments | None = None,
) -> Comments:
    assert post.post_id is not None and author.user_id is not None
    comment = Comments(
        post_id=post.post_id,
        author_id=author.user_id,
        content=content,
        parent_comment_id=parent.comment_id if parent is not None else None,
    )
    db_session.add(comment)
    await db_session.commit()
    await db_session.refresh(comment)
    return comment
