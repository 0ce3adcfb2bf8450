"""
Main CLI entry point for the Trackly backend server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from trackly import __version__
from trackly.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="trackly")
def cli() -> None:
    """Trackly CLI - run the API server and prepare the database."""


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=3001, type=int, help="Port to bind to (default: 3001)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--workers", default=1, type=int, help="Number of worker processes (default: 1)"
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the Trackly API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting Trackly API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Reloaded and worker processes re-import the app and read settings from the environment
    if log_level == "debug":
        os.environ["TRACKLY_DEBUG"] = "true"
        os.environ["TRACKLY_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("TRACKLY_DEBUG", "false")
        os.environ.setdefault("TRACKLY_LOG_LEVEL", log_level)

    try:
        if reload or workers > 1:
            uvicorn.run(
                "trackly.api.app:app",
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),
                log_level=log_level,
                access_log=True,
            )
        else:
            from trackly.api.app import app

            uvicorn.run(app, host=host, port=port, log_level=log_level, access_log=True)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("init-db")
@click.option(
    "--create-all",
    is_flag=True,
    default=False,
    help="Create tables directly from the models instead of running migrations",
)
def init_db(create_all: bool) -> None:
    """Create the database schema."""
    configure_logging()

    if not create_all:
        from alembic import command

        from trackly.database.cli import get_alembic_config

        try:
            command.upgrade(get_alembic_config(), "head")
        except Exception as e:
            logger.error("Database upgrade failed", error=str(e))
            click.echo(f"✗ Error creating schema: {e}", err=True)
            sys.exit(1)
        click.echo("✓ Database migrated to head")
        return

    from trackly.database.connection import get_async_engine
    from trackly.dbmodels import Base

    async def do_create():
        engine = get_async_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()

    try:
        asyncio.run(do_create())
    except Exception as e:
        logger.error("Failed to create tables", error=str(e))
        click.echo(f"✗ Error creating tables: {e}", err=True)
        sys.exit(1)
    click.echo("✓ Tables created")


if __name__ == "__main__":
    cli()
