import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blog.config import Settings, settings
from blog.database import Database, get_db
from blog.exception_handlers import register_exception_handlers
from blog.exceptions import StoreUnavailableError
from blog.graphql.schema import create_graphql_router
from blog.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from blog.middleware.timeout import RequestTimeoutMiddleware

setup_structured_logging(log_level=settings.log_level, json_format=settings.json_logs, log_file=settings.log_file)
logger = logging.getLogger("blog")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the store before serving requests; close it on shutdown."""
    logger.info("Starting up the application...")
    database: Database = app.state.database

    # A store that cannot be reached aborts startup
    await database.connect()
    if app.state.settings.auto_create_tables:
        await database.create_all()

    yield

    logger.info("Shutting down the application...")
    await database.dispose()


def create_app(app_settings: Settings = settings, database: Database | None = None) -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=app_settings.app_name,
        description="GraphQL API for a blog's authors, posts and comments",
        debug=app_settings.debug,
        version=app_settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = database or Database(
        app_settings.database_url,
        echo=app_settings.debug,
        environment=app_settings.environment,
    )

    register_exception_handlers(app)

    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=app_settings.request_timeout_seconds)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_graphql_router(app_settings))

    @app.get("/health", tags=["Health"])
    async def health(db: AsyncSession = Depends(get_db)):
        try:
            await db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise StoreUnavailableError(operation="health") from e
        return {"status": "ok"}

    if app_settings.debug:
        logger.info(f"Running in {app_settings.environment} mode")
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    return app


app = create_app()


if __name__ == "__main__":
    logger.info(f"GraphQL started on port: {settings.port}")
    uvicorn.run("main:app", host=settings.host, port=settings.port)
