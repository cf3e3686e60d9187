"""
API tests for posts.

Tests cover:
- Listing, searching and paging posts (GET /posts)
- Creating, reading, editing and deleting posts
- Post upvotes, pinning and accepted answers
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import NotificationType, settings
from app.models import Categories, Comments, Notifications, Posts, Users
from tests.factories import auth_headers, create_comment, create_post


@pytest.mark.api
class TestListPosts:
    """Tests for GET /api/v1/posts"""

    async def test_list_shape(self, client: AsyncClient, post: Posts):
        response = await client.get("/api/v1/posts")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["page"] == 1
        assert data["per_page"] == 10
        assert data["pages"] == 1
        item = data["posts"][0]
        assert item["post_id"] == post.post_id
        assert item["author"]["name"] == "Alice"
        assert item["category"]["name"] == "Academics"
        assert item["tags"] == ["exams", "study"]
        assert item["created_at"].endswith("Z")

    async def test_search_and_tag(
        self, client: AsyncClient, db_session: AsyncSession, alice: Users, category: Categories
    ):
        await create_post(db_session, alice, category, title="Library hours", tags=["campus"])
        await create_post(db_session, alice, category, title="Gym hours", tags=["sports"])

        by_search = await client.get("/api/v1/posts", params={"search": "LIBRARY"})
        by_tag = await client.get("/api/v1/posts", params={"tag": "sports"})

        assert [p["title"] for p in by_search.json()["posts"]] == ["Library hours"]
        assert [p["title"] for p in by_tag.json()["posts"]] == ["Gym hours"]

    async def test_per_page_bounds(self, client: AsyncClient):
        response = await client.get("/api/v1/posts", params={"per_page": 1000})

        assert response.status_code == 400
        assert response.json()["field"] == "per_page"

    async def test_my_posts(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        alice: Users,
        bob: Users,
        category: Categories,
        post: Posts,
    ):
        await create_post(db_session, bob, category, title="Bob's post")

        response = await client.get("/api/v1/posts/mine", headers=auth_headers(alice))

        assert response.status_code == 200
        assert [p["post_id"] for p in response.json()] == [post.post_id]


@pytest.mark.api
class TestCreatePost:
    """Tests for POST /api/v1/posts"""

    async def test_create(self, client: AsyncClient, alice: Users, category: Categories):
        response = await client.post(
            "/api/v1/posts",
            json={
                "title": "Selling textbooks",
                "content": "Organic chemistry, 2nd edition",
                "category_id": category.category_id,
                "tags": ["Books", "books", "", "Chem"],
            },
            headers=auth_headers(alice),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["tags"] == ["books", "chem"]
        assert data["author"]["user_id"] == alice.user_id
        assert data["pinned"] is False
        assert data["solved"] is False

    async def test_unknown_category(self, client: AsyncClient, alice: Users):
        response = await client.post(
            "/api/v1/posts",
            json={"title": "t", "content": "c", "category_id": 999999},
            headers=auth_headers(alice),
        )

        assert response.status_code == 404

    async def test_missing_title(self, client: AsyncClient, alice: Users, category: Categories):
        response = await client.post(
            "/api/v1/posts",
            json={"content": "c", "category_id": category.category_id},
            headers=auth_headers(alice),
        )

        assert response.status_code == 400
        assert response.json() == {
            "kind": "validation_error",
            "detail": response.json()["detail"],
            "field": "title",
        }

    async def test_requires_auth(self, client: AsyncClient, category: Categories):
        response = await client.post(
            "/api/v1/posts",
            json={"title": "t", "content": "c", "category_id": category.category_id},
        )

        assert response.status_code == 401


@pytest.mark.api
class TestGetPost:
    """Tests for GET /api/v1/posts/{post_id}"""

    async def test_detail_counts_views(self, client: AsyncClient, post: Posts):
        await client.get(f"/api/v1/posts/{post.post_id}")
        response = await client.get(f"/api/v1/posts/{post.post_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["views"] == 2
        assert data["upvoted"] is False
        assert data["bookmarked"] is False
        assert data["comments"] == []

    async def test_nested_comments(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        bob: Users,
        carol: Users,
        post: Posts,
    ):
        top = await create_comment(db_session, post, bob, content="Top")
        mid = await create_comment(db_session, post, carol, content="Mid", parent=top)
        await create_comment(db_session, post, bob, content="Deep", parent=mid)

        data = (await client.get(f"/api/v1/posts/{post.post_id}")).json()

        assert data["comment_count"] == 3
        top_node = data["comments"][0]
        assert top_node["content"] == "Top"
        assert top_node["replies"][0]["content"] == "Mid"
        assert top_node["replies"][0]["replies"][0]["content"] == "Deep"
        assert top_node["created_at"].endswith("Z")

    async def test_deep_reply_chain_renders(
        self, client: AsyncClient, db_session: AsyncSession, bob: Users, post: Posts
    ):
        """A reply chain far deeper than the nesting cap still renders in full."""
        depth = 600
        parent_id = None
        for i in range(depth):
            comment = Comments(
                post_id=post.post_id,
                author_id=bob.user_id,
                content=f"reply {i}",
                parent_comment_id=parent_id,
            )
            db_session.add(comment)
            await db_session.flush()
            parent_id = comment.comment_id
        await db_session.commit()

        response = await client.get(f"/api/v1/posts/{post.post_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["comment_count"] == depth

        seen, nesting = 0, 0
        level = data["comments"]
        while level:
            nesting += 1
            seen += len(level)
            level = level[0]["replies"]
        assert seen == depth
        assert nesting == settings.MAX_THREAD_DEPTH

    async def test_viewer_state(self, client: AsyncClient, bob: Users, post: Posts):
        await client.post(f"/api/v1/posts/{post.post_id}/upvote", headers=auth_headers(bob))
        await client.post(f"/api/v1/users/bookmarks/{post.post_id}", headers=auth_headers(bob))

        data = (await client.get(f"/api/v1/posts/{post.post_id}", headers=auth_headers(bob))).json()

        assert data["upvoted"] is True
        assert data["bookmarked"] is True
        assert data["upvotes"] == 1

    async def test_missing(self, client: AsyncClient):
        response = await client.get("/api/v1/posts/999999")

        assert response.status_code == 404
        assert response.json() == {"kind": "not_found", "detail": "Post not found"}


@pytest.mark.api
class TestUpdatePost:
    """Tests for PUT /api/v1/posts/{post_id}"""

    async def test_author_updates(self, client: AsyncClient, alice: Users, post: Posts):
        response = await client.put(
            f"/api/v1/posts/{post.post_id}",
            json={"content": "Updated details"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 200
        assert response.json()["content"] == "Updated details"
        assert response.json()["title"] == post.title

    async def test_other_user_forbidden(self, client: AsyncClient, bob: Users, post: Posts):
        response = await client.put(
            f"/api/v1/posts/{post.post_id}",
            json={"title": "Hijacked"},
            headers=auth_headers(bob),
        )

        assert response.status_code == 403

    async def test_blank_title_rejected(self, client: AsyncClient, alice: Users, post: Posts):
        response = await client.put(
            f"/api/v1/posts/{post.post_id}",
            json={"title": "   "},
            headers=auth_headers(alice),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "title"


@pytest.mark.api
class TestDeletePost:
    """Tests for DELETE /api/v1/posts/{post_id}"""

    async def test_delete_removes_every_comment(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        alice: Users,
        bob: Users,
        carol: Users,
        post: Posts,
    ):
        post_id = post.post_id
        top = await create_comment(db_session, post, bob)
        await create_comment(db_session, post, carol, parent=top)
        await create_comment(db_session, post, carol)

        response = await client.delete(f"/api/v1/posts/{post_id}", headers=auth_headers(alice))

        assert response.status_code == 200
        assert response.json() == {"message": "Post deleted"}
        remaining = await db_session.execute(
            select(func.count()).select_from(Comments).where(Comments.post_id == post_id)
        )
        assert remaining.scalar() == 0
        assert (await client.get(f"/api/v1/posts/{post_id}")).status_code == 404

    async def test_other_user_forbidden(self, client: AsyncClient, bob: Users, post: Posts):
        response = await client.delete(f"/api/v1/posts/{post.post_id}", headers=auth_headers(bob))

        assert response.status_code == 403
        assert (await client.get(f"/api/v1/posts/{post.post_id}")).status_code == 200

    async def test_admin_deletes(self, client: AsyncClient, admin: Users, post: Posts):
        response = await client.delete(
            f"/api/v1/posts/{post.post_id}", headers=auth_headers(admin)
        )

        assert response.status_code == 200


@pytest.mark.api
class TestPostUpvote:
    """Tests for POST /api/v1/posts/{post_id}/upvote"""

    async def test_own_post_upvote(
        self, client: AsyncClient, db_session: AsyncSession, alice: Users, post: Posts
    ):
        response = await client.post(
            f"/api/v1/posts/{post.post_id}/upvote", headers=auth_headers(alice)
        )

        assert response.status_code == 200
        assert response.json() == {"count": 1, "upvoted": True}
        count = await db_session.execute(select(func.count()).select_from(Notifications))
        assert count.scalar() == 0

    async def test_upvote_twice_restores_state(
        self, client: AsyncClient, db_session: AsyncSession, alice: Users, bob: Users, post: Posts
    ):
        url = f"/api/v1/posts/{post.post_id}/upvote"

        first = await client.post(url, headers=auth_headers(bob))
        second = await client.post(url, headers=auth_headers(bob))

        assert first.json() == {"count": 1, "upvoted": True}
        assert second.json() == {"count": 0, "upvoted": False}
        result = await db_session.execute(
            select(Notifications).where(Notifications.recipient_id == alice.user_id)
        )
        assert [n.type for n in result.scalars().all()] == [NotificationType.UPVOTE]

    async def test_missing_post(self, client: AsyncClient, bob: Users):
        response = await client.post("/api/v1/posts/999999/upvote", headers=auth_headers(bob))

        assert response.status_code == 404


@pytest.mark.api
class TestPinPost:
    """Tests for POST /api/v1/posts/{post_id}/pin"""

    async def test_admin_pins_and_unpins(self, client: AsyncClient, admin: Users, post: Posts):
        url = f"/api/v1/posts/{post.post_id}/pin"

        assert (await client.post(url, headers=auth_headers(admin))).json() == {"pinned": True}
        assert (await client.post(url, headers=auth_headers(admin))).json() == {"pinned": False}

    async def test_non_admin_forbidden(self, client: AsyncClient, alice: Users, post: Posts):
        response = await client.post(
            f"/api/v1/posts/{post.post_id}/pin", headers=auth_headers(alice)
        )

        assert response.status_code == 403
        assert response.json()["kind"] == "forbidden"
        detail = (await client.get(f"/api/v1/posts/{post.post_id}")).json()
        assert detail["pinned"] is False

    async def test_pinned_post_listed_first(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        admin: Users,
        alice: Users,
        category: Categories,
        post: Posts,
    ):
        newer = await create_post(db_session, alice, category, title="Newer")

        await client.post(f"/api/v1/posts/{post.post_id}/pin", headers=auth_headers(admin))

        listed = (await client.get("/api/v1/posts")).json()["posts"]
        assert [p["post_id"] for p in listed] == [post.post_id, newer.post_id]


@pytest.mark.api
class TestSolvePost:
    """Tests for POST /api/v1/posts/{post_id}/solve/{comment_id}"""

    async def test_accept_and_unaccept(
        self, client: AsyncClient, db_session: AsyncSession, alice: Users, bob: Users, post: Posts
    ):
        comment = await create_comment(db_session, post, bob)
        url = f"/api/v1/posts/{post.post_id}/solve/{comment.comment_id}"

        first = await client.post(url, headers=auth_headers(alice))
        second = await client.post(url, headers=auth_headers(alice))

        assert first.json() == {"solved": True, "accepted_answer": comment.comment_id}
        assert second.json() == {"solved": False, "accepted_answer": None}

    async def test_non_author_forbidden(
        self, client: AsyncClient, db_session: AsyncSession, bob: Users, post: Posts
    ):
        comment = await create_comment(db_session, post, bob)

        response = await client.post(
            f"/api/v1/posts/{post.post_id}/solve/{comment.comment_id}",
            headers=auth_headers(bob),
        )

        assert response.status_code == 403
        detail = (await client.get(f"/api/v1/posts/{post.post_id}")).json()
        assert detail["solved"] is False
        assert detail["accepted_answer_id"] is None

    async def test_comment_of_other_post(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        alice: Users,
        category: Categories,
        post: Posts,
    ):
        other = await create_post(db_session, alice, category, title="Other")
        comment = await create_comment(db_session, other, alice)

        response = await client.post(
            f"/api/v1/posts/{post.post_id}/solve/{comment.comment_id}",
            headers=auth_headers(alice),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "comment_id"
