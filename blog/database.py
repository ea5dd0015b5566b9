"""
Store handle for the blog collections.

The `Database` object is built once at startup, connected before the
application accepts requests and disposed on shutdown. Nothing in the
package holds a module-level engine; components receive the handle (or a
session opened from it) explicitly.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from blog.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

Base = declarative_base()


def _engine_options(url: str, environment: str) -> dict:
    """Pool settings per backend and environment."""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        if parsed.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
        return {}

    if environment == "production":
        return {
            "pool_size": 20,
            "max_overflow": 50,
            "pool_timeout": 60,
            "pool_recycle": 1800,
            "pool_pre_ping": True,
        }
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 30,
    }


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Explicitly managed connection to the document store."""

    def __init__(self, url: str, echo: bool = False, environment: str = "development"):
        self.url = url
        self.engine = create_async_engine(url, echo=echo, **_engine_options(url, environment))
        if self.engine.url.get_backend_name() == "sqlite":
            # SQLite ignores ON DELETE clauses unless asked per connection
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @property
    def backend(self) -> str:
        return self.engine.url.get_backend_name()

    async def connect(self) -> None:
        """
        Establish and verify the store connection.

        Raises:
            StoreUnavailableError: if the store cannot be reached
        """
        logger.info(f"Connecting to {self.backend} store...")
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Store connection failed: {e}")
            raise StoreUnavailableError(f"Could not connect to the data store: {e}", operation="connect") from e
        logger.info("Store connection established.")

    async def create_all(self) -> None:
        # Registers the mapped tables on Base.metadata
        import blog.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Collections created (if not existing).")

    async def drop_all(self) -> None:
        import blog.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as db:
            try:
                yield db
            except Exception as e:
                logger.error(f"Database session error: {e}")
                await db.rollback()
                raise

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
        logger.info("Store connection closed.")


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a session from the application's store."""
    database: Database = request.app.state.database
    async with database.session() as db:
        yield db
