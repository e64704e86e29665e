"""
Bloglist Backend: Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for failure-path unit tests
    ├── database:        In-memory SQLite Database handle with tables created
    ├── db_session:      Session on that database
    ├── initial_blogs:   Seed records
    ├── seeded_database: database fixture pre-loaded with initial_blogs
    └── test_client:     HTTPX AsyncClient talking to an app on seeded_database
"""

import os

# Must be set before any bloglist import reads the settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import List  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from bloglist.database import Database  # noqa: E402
from bloglist.main import create_app  # noqa: E402
from bloglist.models.blog import Blog  # noqa: E402
from bloglist.schemas.blog import BlogResponse  # noqa: E402
from bloglist.services.blog_repository import blog_repository  # noqa: E402

IN_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


async def _fetch_blogs(database: Database) -> List[BlogResponse]:
    async with database.session() as session:
        return await blog_repository.list_blogs(session)


@pytest.fixture
def blogs_in_db():
    """
    Async helper reading everything currently stored through a fresh session.

    Usage:
        blogs = await blogs_in_db(seeded_database)
    """
    return _fetch_blogs


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception())
        with pytest.raises(PersistenceError):
            await blog_repository.list_blogs(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def initial_blogs():
    """Seed records, one of them without an author."""
    return [
        {
            "title": "React patterns",
            "author": "Michael Chan",
            "url": "https://reactpatterns.com/",
            "likes": 7,
        },
        {
            "title": "Go To Statement Considered Harmful",
            "author": "Edsger W. Dijkstra",
            "url": "https://homepages.cwi.nl/~storm/teaching/reader/Dijkstra68.pdf",
            "likes": 5,
        },
        {
            "title": "Type wars",
            "url": "http://blog.cleancoder.com/uncle-bob/2016/05/01/TypeWars.html",
            "likes": 2,
        },
    ]


@pytest_asyncio.fixture
async def database():
    """Fresh in-memory database with the blogs table created."""
    db = Database(IN_MEMORY_URL)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_database(database, initial_blogs):
    """The database fixture with initial_blogs inserted and committed."""
    async with database.session() as session:
        session.add_all([
            Blog(public_id=uuid4(), **{"author": None, "likes": 0, **data})
            for data in initial_blogs
        ])
        await session.commit()
    return database


@pytest_asyncio.fixture
async def test_client(seeded_database):
    """
    HTTPX AsyncClient routed straight into an app serving seeded_database.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/blogs")
            assert response.status_code == 200
    """
    app = create_app(database=seeded_database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
