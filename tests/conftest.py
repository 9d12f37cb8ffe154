"""
Blog API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test that needs a store gets a fresh SQLite file under tmp_path
       (aiosqlite), with the blog_posts table created. HTTP tests talk to the
       ASGI app in-process through httpx.

Fixture Hierarchy (all function-scoped):
    ├── database:          connected Database handle on a temp SQLite file
    ├── gateway:           SqlPostGateway on a session from `database`
    ├── mock_gateway:      AsyncMock standing in for a PostGateway
    ├── sample_post_data:  a valid creation body
    └── test_client:       httpx AsyncClient bound to an app using `database`
"""

import os
from unittest.mock import AsyncMock

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from blogapi.database import connect_database
from blogapi.services.gateway import PostGateway
from blogapi.services.sql_gateway import SqlPostGateway


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'blog_test.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    """A connected store with an empty blog_posts table."""
    db = await connect_database(database_url, create_tables=True)
    yield db
    await db.disconnect()


@pytest_asyncio.fixture
async def gateway(database):
    async with database.session() as session:
        yield SqlPostGateway(session)


@pytest.fixture
def mock_gateway():
    """
    A PostGateway whose every operation is an AsyncMock.

    Usage:
        mock_gateway.get_by_id.return_value = post
        await post_service.get_post(mock_gateway, "some-id")
    """
    gw = AsyncMock(spec=PostGateway)
    gw.list.return_value = []
    return gw


@pytest.fixture
def sample_post_data():
    return {
        "title": "A blog",
        "content": "Lorem ipsum dolor sit amet, consectetur adipisicing elit.",
        "author": {"firstName": "Tom", "lastName": "Smith"},
    }


@pytest_asyncio.fixture
async def app(database):
    from blogapi.main import create_app
    return create_app(database=database)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed directly to the app (no server, no lifespan).

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/posts")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
