"""Unit tests for the helpers behind ``cdcroute db``."""

import click
import pytest

from cdcroute.entrypoints.cli.db import (
    INVALID_URL_FORMAT_MSG,
    MISSING_DB_URL_MSG,
    MigrationStatus,
    connect_engine,
    migration_status,
)


@pytest.mark.parametrize(
    "current, head, expected",
    [
        ("3f2a9c41d7e8", "3f2a9c41d7e8", MigrationStatus.UP_TO_DATE),
        (None, "3f2a9c41d7e8", MigrationStatus.UNINITIALIZED),
        ("0123456789ab", "3f2a9c41d7e8", MigrationStatus.OUT_OF_DATE),
    ],
)
def test_migration_status(current, head, expected):
    """The current revision is compared with the packaged head."""
    assert migration_status(current, head) is expected


def test_connect_engine_requires_url(monkeypatch):
    """An unset URL is reported with setup instructions."""
    monkeypatch.delenv("CDCROUTE_DB_URL", raising=False)
    with pytest.raises(click.ClickException) as excinfo:
        connect_engine()
    assert excinfo.value.message == MISSING_DB_URL_MSG


def test_connect_engine_rejects_malformed_url(monkeypatch):
    """A value SQLAlchemy cannot parse is not mistaken for a connection failure."""
    monkeypatch.setenv("CDCROUTE_DB_URL", "not a valid url")
    with pytest.raises(click.ClickException) as excinfo:
        connect_engine()
    assert excinfo.value.message == INVALID_URL_FORMAT_MSG


def test_connect_engine_checks_connection(monkeypatch, sqlite_url):
    """A reachable database yields a usable engine."""
    monkeypatch.setenv("CDCROUTE_DB_URL", sqlite_url)
    engine = connect_engine()
    assert engine.dialect.name == "sqlite"
    engine.dispose()
