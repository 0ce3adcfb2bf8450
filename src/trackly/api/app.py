"""
Main FastAPI application for the Trackly backend
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..auth import get_auth_adapter
from ..config import is_production, settings
from ..database import init_database
from ..database.connection import check_database_connection
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

# Configure logging before creating logger
configure_logging(debug=settings.debug, level=settings.log_level)
logger = get_logger(__name__)


class StartupError(RuntimeError):
    """Raised when the service cannot start with the current configuration."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Trackly API...")
    init_database()

    try:
        get_auth_adapter()
    except ValueError as e:
        logger.error("Authentication is not configured", error=str(e))
        raise StartupError(str(e)) from e

    ok, error = await check_database_connection()
    if not ok:
        logger.error("Database connection check failed", error=error)
        if is_production():
            raise StartupError("Database is unreachable")

    yield

    logger.info("Shutting down Trackly API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Trackly API",
        description="Project and task tracking",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    from ..graphql.schema import create_graphql_router, validate_schema

    # Fail fast: the server should not start with a broken schema
    validate_schema()
    app.include_router(create_graphql_router(), prefix="")
    logger.info("GraphQL endpoint initialized", endpoint="/graphql")

    return app


# Create the main application instance
app = create_app()
