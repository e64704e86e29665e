"""
Bloglist Backend: Blog API Endpoint Tests
==========================================

What:  End-to-end tests for /api/blogs through the FastAPI app.
How:   HTTPX AsyncClient over ASGITransport; the app serves an in-memory
       SQLite database seeded with three blogs (see conftest.py).

What we test:
    ✅ GET returns JSON with public `id` and no internal keys
    ✅ POST creates (201), defaults likes, rejects blank title/url (400)
    ✅ likes outside the stored column's range → 400; a failed commit → 500
    ✅ DELETE removes (204), absorbs unknown ids (204), rejects malformed ids (400)
    ✅ Storage outage → 500 per request, process keeps serving
    ✅ Unknown endpoints, request IDs, health check
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import Database
from bloglist.main import create_app
from bloglist.schemas.blog import LIKES_MAX


class TestListBlogs:

    @pytest.mark.asyncio
    async def test_blogs_are_returned_as_json(self, test_client):
        response = await test_client.get("/api/blogs")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")

    @pytest.mark.asyncio
    async def test_all_blogs_are_returned(self, test_client, initial_blogs):
        response = await test_client.get("/api/blogs")

        assert len(response.json()) == len(initial_blogs)
        assert [b["title"] for b in response.json()] == [b["title"] for b in initial_blogs]

    @pytest.mark.asyncio
    async def test_identifier_property_is_named_id(self, test_client):
        blogs = (await test_client.get("/api/blogs")).json()

        for blog in blogs:
            assert uuid.UUID(blog["id"])
            assert "pk" not in blog
            assert "public_id" not in blog
            assert "_id" not in blog
            assert "created_at" not in blog

    @pytest.mark.asyncio
    async def test_absent_author_is_omitted(self, test_client):
        blogs = (await test_client.get("/api/blogs")).json()
        type_wars = next(b for b in blogs if b["title"] == "Type wars")

        assert "author" not in type_wars
        assert type_wars["likes"] == 2

    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_list(self, database):
        app = create_app(database=database)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/blogs")

        assert response.status_code == 200
        assert response.json() == []


class TestCreateBlog:

    @pytest.mark.asyncio
    async def test_succeeds_with_valid_data(self, test_client, seeded_database, blogs_in_db, initial_blogs):
        new_blog = {
            "title": "Canonical string reduction",
            "author": "Edsger W. Dijkstra",
            "url": "http://www.cs.utexas.edu/~EWD/transcriptions/EWD08xx/EWD808.html",
            "likes": 12,
        }

        response = await test_client.post("/api/blogs", json=new_blog)

        assert response.status_code == 201
        assert response.headers["content-type"].startswith("application/json")
        body = response.json()
        assert uuid.UUID(body["id"])
        assert {k: body[k] for k in new_blog} == new_blog

        blogs_at_end = await blogs_in_db(seeded_database)
        assert len(blogs_at_end) == len(initial_blogs) + 1
        saved = next(b for b in blogs_at_end if b.title == new_blog["title"])
        assert saved.author == new_blog["author"]
        assert saved.url == new_blog["url"]
        assert saved.likes == new_blog["likes"]

    @pytest.mark.asyncio
    async def test_likes_default_to_zero(self, test_client, seeded_database, blogs_in_db):
        new_blog = {"title": "First class tests", "author": "Robert C. Martin", "url": "http://example.com/tests"}

        response = await test_client.post("/api/blogs", json=new_blog)

        assert response.status_code == 201
        assert response.json()["likes"] == 0
        saved = next(b for b in await blogs_in_db(seeded_database) if b.title == new_blog["title"])
        assert saved.likes == 0

    @pytest.mark.asyncio
    async def test_caller_supplied_id_is_ignored(self, test_client):
        supplied = str(uuid.uuid4())

        response = await test_client.post("/api/blogs", json={"id": supplied, "title": "T", "url": "u"})

        assert response.status_code == 201
        assert response.json()["id"] != supplied

    @pytest.mark.parametrize(
        "new_blog",
        [
            {"title": "La pittance", "author": "Dorian", "likes": 3},
            {"title": "La pittance", "author": "Dorian", "url": "", "likes": 3},
            {"author": "Dorian", "url": "www.ohnon.fr", "likes": 3},
            {"title": "", "author": "Dorian", "url": "www.ohnon.fr", "likes": 3},
            {"title": None, "url": "www.ohnon.fr"},
            {},
        ],
        ids=["url-missing", "url-empty", "title-missing", "title-empty", "title-null", "empty-body"],
    )
    @pytest.mark.asyncio
    async def test_blank_required_field_is_400(
        self, test_client, seeded_database, blogs_in_db, initial_blogs, new_blog
    ):
        response = await test_client.post("/api/blogs", json=new_blog)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert len(await blogs_in_db(seeded_database)) == len(initial_blogs)

    @pytest.mark.asyncio
    async def test_wrongly_typed_likes_is_400(self, test_client):
        response = await test_client.post(
            "/api/blogs", json={"title": "T", "url": "u", "likes": "plenty"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.parametrize("likes", [2**63, 10**30, -1], ids=["int64-overflow", "huge", "negative"])
    @pytest.mark.asyncio
    async def test_out_of_range_likes_is_400(
        self, test_client, seeded_database, blogs_in_db, initial_blogs, likes
    ):
        response = await test_client.post(
            "/api/blogs", json={"title": "T", "url": "u", "likes": likes}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert len(await blogs_in_db(seeded_database)) == len(initial_blogs)

    @pytest.mark.asyncio
    async def test_largest_likes_is_stored(self, test_client, seeded_database, blogs_in_db):
        response = await test_client.post(
            "/api/blogs", json={"title": "Viral", "url": "u", "likes": LIKES_MAX}
        )

        assert response.status_code == 201
        assert response.json()["likes"] == LIKES_MAX
        saved = next(b for b in await blogs_in_db(seeded_database) if b.title == "Viral")
        assert saved.likes == LIKES_MAX

    @pytest.mark.asyncio
    async def test_long_author_is_stored_intact(self, test_client, seeded_database, blogs_in_db):
        author = "Anonymous " * 100

        response = await test_client.post(
            "/api/blogs", json={"title": "Long byline", "author": author, "url": "u"}
        )

        assert response.status_code == 201
        saved = next(b for b in await blogs_in_db(seeded_database) if b.title == "Long byline")
        assert saved.author == author

    @pytest.mark.asyncio
    async def test_failed_commit_is_500_and_nothing_is_stored(
        self, test_client, seeded_database, blogs_in_db, initial_blogs
    ):
        db_down = OperationalError("COMMIT", {}, Exception("disk I/O error"))

        with patch.object(AsyncSession, "commit", new_callable=AsyncMock, side_effect=db_down):
            response = await test_client.post("/api/blogs", json={"title": "T", "url": "u"})

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"
        assert "disk" not in response.text
        assert len(await blogs_in_db(seeded_database)) == len(initial_blogs)

    @pytest.mark.asyncio
    async def test_body_that_is_not_json_is_400(self, test_client):
        response = await test_client.post(
            "/api/blogs",
            content=b"title=T&url=u",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400


class TestDeleteBlog:

    @pytest.mark.asyncio
    async def test_succeeds_with_204_if_id_is_valid(self, test_client):
        blog_to_delete = (await test_client.get("/api/blogs")).json()[0]

        response = await test_client.delete(f"/api/blogs/{blog_to_delete['id']}")

        assert response.status_code == 204
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_removes_the_targeted_blog(self, test_client, seeded_database, blogs_in_db, initial_blogs):
        blog_to_delete = (await test_client.get("/api/blogs")).json()[0]

        await test_client.delete(f"/api/blogs/{blog_to_delete['id']}")

        blogs_at_end = await blogs_in_db(seeded_database)
        assert len(blogs_at_end) == len(initial_blogs) - 1
        assert blog_to_delete["id"] not in [b.id for b in blogs_at_end]
        assert blog_to_delete["title"] not in [b.title for b in blogs_at_end]

    @pytest.mark.asyncio
    async def test_fails_with_400_if_id_is_malformed(self, test_client, seeded_database, blogs_in_db, initial_blogs):
        response = await test_client.delete("/api/blogs/0555424424242422")

        assert response.status_code == 400
        assert response.json()["error"] == "malformatted_id"
        assert len(await blogs_in_db(seeded_database)) == len(initial_blogs)

    @pytest.mark.asyncio
    async def test_unknown_but_valid_id_is_absorbed(self, test_client, seeded_database, blogs_in_db, initial_blogs):
        before = await blogs_in_db(seeded_database)

        response = await test_client.delete(f"/api/blogs/{uuid.uuid4()}")

        assert response.status_code == 204
        assert await blogs_in_db(seeded_database) == before
        assert len(before) == len(initial_blogs)

    @pytest.mark.asyncio
    async def test_deleting_twice_succeeds_both_times(self, test_client):
        blog_id = (await test_client.get("/api/blogs")).json()[0]["id"]

        first = await test_client.delete(f"/api/blogs/{blog_id}")
        second = await test_client.delete(f"/api/blogs/{blog_id}")

        assert (first.status_code, second.status_code) == (204, 204)


class TestScenario:
    """The full list → create → reject → delete walk-through."""

    @pytest.mark.asyncio
    async def test_lifecycle(self, test_client):
        blogs = (await test_client.get("/api/blogs")).json()
        assert len(blogs) == 3

        response = await test_client.post("/api/blogs", json={"title": "T", "author": "A", "url": "u", "likes": 3})
        assert response.status_code == 201
        assert response.json()["likes"] == 3
        assert response.json()["id"]
        assert len((await test_client.get("/api/blogs")).json()) == 4

        response = await test_client.post("/api/blogs", json={"title": "T2", "author": "A2", "url": "u2"})
        assert response.status_code == 201
        assert response.json()["likes"] == 0

        response = await test_client.post("/api/blogs", json={"title": "T3", "url": ""})
        assert response.status_code == 400
        assert len((await test_client.get("/api/blogs")).json()) == 5

        first_id = blogs[0]["id"]
        response = await test_client.delete(f"/api/blogs/{first_id}")
        assert response.status_code == 204
        remaining = (await test_client.get("/api/blogs")).json()
        assert len(remaining) == 4
        assert first_id not in [b["id"] for b in remaining]

        response = await test_client.delete("/api/blogs/bad-id-too-short")
        assert response.status_code == 400
        assert len((await test_client.get("/api/blogs")).json()) == 4


class TestStorageOutage:
    """A store that cannot be opened fails each request with 500, nothing more."""

    @pytest.mark.asyncio
    async def test_requests_fail_with_500_and_app_keeps_serving(self, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'blogs.db'}")
        app = create_app(database=database)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            listed = await client.get("/api/blogs")
            created = await client.post("/api/blogs", json={"title": "T", "url": "u"})
            health = await client.get("/health")

        await database.dispose()

        assert listed.status_code == 500
        assert listed.json()["error"] == "server_error"
        assert "sqlite" not in listed.text.lower()
        assert created.status_code == 500
        assert health.status_code == 503
        assert health.json()["database"] == "disconnected"


class TestAmbient:

    @pytest.mark.asyncio
    async def test_unknown_endpoint(self, test_client):
        response = await test_client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json()["error"] == "unknown_endpoint"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/blogs")

        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_request_id_echoed_in_errors(self, test_client):
        response = await test_client.delete(
            "/api/blogs/not-an-id", headers={"X-Request-ID": "trace-123"}
        )

        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"
