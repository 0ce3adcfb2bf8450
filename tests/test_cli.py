"""
Tests for the command line interface
"""

import pytest
from click.testing import CliRunner
from sqlalchemy import create_engine, inspect

from trackly import __version__
from trackly.cli import cli
from trackly.database.connection import reset_database


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_db_create_all(runner, sqlite_url, monkeypatch):
    monkeypatch.setenv("TRACKLY_DATABASE_URL", sqlite_url)
    reset_database()

    result = runner.invoke(cli, ["init-db", "--create-all"])
    reset_database()

    assert result.exit_code == 0, result.output
    assert "Tables created" in result.output

    engine = create_engine(sqlite_url)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert {
        "users",
        "projects",
        "project_owners",
        "project_clients",
        "tasks",
        "comments",
        "logged_times",
    } <= tables


def test_serve_rejects_unknown_log_level(runner):
    result = runner.invoke(cli, ["serve", "--log-level", "chatty"])
    assert result.exit_code != 0
