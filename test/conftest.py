"""
Pytest configuration and fixtures for blog API tests
"""

import os
from collections.abc import AsyncGenerator

# Settings are read at import time; point them at a throwaway store first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JSON_LOGS", "false")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from blog.database import Database  # noqa: E402
from blog.graphql.context import GraphQLContext  # noqa: E402
from blog.graphql.schema import schema  # noqa: E402
from blog.viewer import Viewer, get_viewer  # noqa: E402
from main import create_app  # noqa: E402


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A fresh, connected store with all collections created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'blog_test.db'}")
    await db.connect()
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def test_db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for service-level tests."""
    async with database.session() as session:
        yield session


@pytest.fixture
def viewer() -> Viewer:
    return get_viewer()


@pytest.fixture
async def graphql_context(database: Database, viewer: Viewer) -> GraphQLContext:
    return GraphQLContext(viewer=viewer, database=database)


@pytest.fixture
def execute(database: Database, viewer: Viewer):
    """Run a GraphQL document against the schema with a fresh context."""

    async def _execute(query: str, variables: dict | None = None):
        context = GraphQLContext(viewer=viewer, database=database)
        return await schema.execute(query, variable_values=variables, context_value=context)

    return _execute


@pytest.fixture
def app(database: Database):
    """FastAPI application wired to the test store."""
    return create_app(database=database)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
