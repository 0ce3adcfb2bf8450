"""
``trackly-migrate``: Alembic migrations for the Trackly schema.
"""

import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from alembic import command
from alembic.config import Config

from trackly import __version__
from trackly.logging import configure_logging, get_logger

logger = get_logger(__name__)

# alembic.ini and alembic/ live at the repository root, next to pyproject.toml
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config() -> Config:
    alembic_ini = PROJECT_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return config


def run_alembic(action: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """Run an Alembic command, logging the outcome and exiting non-zero on failure."""
    logger.info(f"Running {action}", **kwargs)
    try:
        fn(get_alembic_config(), *args, **kwargs)
    except Exception as e:
        logger.error(f"{action.capitalize()} failed", error=str(e))
        click.echo(f"✗ {action} failed: {e}", err=True)
        sys.exit(1)
    logger.info(f"{action.capitalize()} finished")


@click.group()
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
@click.option(
    "--database-url",
    envvar="TRACKLY_DATABASE_URL",
    default=None,
    help="Database to migrate (defaults to the configured database_url)",
)
@click.version_option(version=__version__, prog_name="trackly-migrate")
def main(log_level: str, database_url: str | None) -> None:
    """Trackly database migration management."""
    configure_logging(debug=(log_level == "debug"), level=log_level)
    if database_url:
        # alembic/env.py reads the URL from the environment
        os.environ["TRACKLY_DATABASE_URL"] = database_url


@main.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade the schema to REVISION (default: head)."""
    run_alembic("upgrade", command.upgrade, revision)


@main.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade the schema to REVISION (default: one step back)."""
    run_alembic("downgrade", command.downgrade, revision)


@main.command()
@click.option("-m", "--message", required=True, help="Revision message")
@click.option("--autogenerate/--no-autogenerate", default=True, help="Diff against the models")
def revision(message: str, autogenerate: bool) -> None:
    """Create a new migration revision."""
    run_alembic("revision", command.revision, message=message, autogenerate=autogenerate)


@main.command()
def current() -> None:
    """Show the revision the database is at."""
    run_alembic("current", command.current)


@main.command()
def history() -> None:
    """List all migration revisions."""
    run_alembic("history", command.history)


if __name__ == "__main__":
    main()
