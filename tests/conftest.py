"""
Bookmarks API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession (service tests, no real DB)
    ├── db_engine: Async SQLite engine on a temp file with the schema created
    ├── db_session: One AsyncSession on db_engine (store tests)
    ├── test_client: HTTPX AsyncClient against a fresh app wired to db_engine
    ├── test_bookmarks: Four well-formed bookmark rows
    ├── seeded: test_bookmarks inserted into db_engine
    └── malicious_bookmark: A row carrying XSS payloads in title/description
"""

import os

# Settings are read when bookmarks_api is first imported, so the environment
# must be in place before any application import below.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import insert  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool  # noqa: E402

from bookmarks_api.database import Base, get_db_session  # noqa: E402
from bookmarks_api.models.bookmark import Bookmark  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Test Data
# ══════════════════════════════════════════════════════════════════════════

def make_bookmarks_array():
    return [
        {
            "id": 1,
            "title": "Thinkful",
            "url": "https://www.thinkful.com",
            "description": "Think outside the classroom",
            "rating": 5,
        },
        {
            "id": 2,
            "title": "Google",
            "url": "https://www.google.com",
            "description": "Where we find everything else",
            "rating": 4,
        },
        {
            "id": 3,
            "title": "MDN",
            "url": "https://developer.mozilla.org",
            "description": "The only place to find web documentation",
            "rating": 5,
        },
        {
            "id": 4,
            "title": "Zero Stars",
            "url": "https://example.com",
            "description": "Rated as low as it goes",
            "rating": 0,
        },
    ]


def make_malicious_bookmark():
    return {
        "id": 911,
        "title": 'Naughty naughty very naughty <script>alert("xss");</script>',
        "url": "http://www.badurl.com",
        "description": (
            'Bad image <img src="https://url.to.file.which/does-not.exist" '
            'onerror="alert(document.cookie);">. But not <strong>all</strong> bad.'
        ),
        "rating": 1,
    }


@pytest.fixture
def test_bookmarks():
    return make_bookmarks_array()


@pytest.fixture
def malicious_bookmark():
    return make_malicious_bookmark()


@pytest.fixture
def sanitized_malicious_bookmark():
    """What clients must receive for make_malicious_bookmark()."""
    return {
        **make_malicious_bookmark(),
        "title": 'Naughty naughty very naughty &lt;script&gt;alert("xss");&lt;/script&gt;',
        "description": (
            'Bad image <img src="https://url.to.file.which/does-not.exist">. '
            "But not <strong>all</strong> bad."
        ),
    }


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """
    A throwaway SQLite database with the bookmarks table created.

    NullPool: every session opens its own connection on the current event
    loop, so nothing leaks between tests.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'bookmarks_test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(db_engine, test_bookmarks):
    """Inserts test_bookmarks and returns them."""
    async with db_engine.begin() as conn:
        await conn.execute(insert(Bookmark), test_bookmarks)
    return test_bookmarks


@pytest.fixture
def insert_bookmarks(db_engine):
    """Async helper inserting arbitrary rows, e.g. await insert_bookmarks([row])."""

    async def _insert(rows):
        async with db_engine.begin() as conn:
            await conn.execute(insert(Bookmark), rows)

    return _insert


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to a fresh app over ASGITransport.

    get_db_session is overridden to use the temp database with the same
    commit/rollback behavior as production.
    """
    from bookmarks_api.main import create_app

    app = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
