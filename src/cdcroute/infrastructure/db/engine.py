"""Engine factory for the dead-letter database.

Every engine the package opens goes through `make_engine`. On SQLite each new
DBAPI connection is switched to write-ahead logging and given a busy timeout,
so a CLI run reading dead letters does not fail while a pipeline is writing
them. Other backends are used as configured by their URL.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

SQLITE_PRAGMAS = (
    ("journal_mode", "WAL"),
    ("synchronous", "NORMAL"),
    ("busy_timeout", "5000"),
)


def is_sqlite(url: str | URL) -> bool:
    """True if `url` selects the SQLite backend, whatever the driver."""
    return make_url(url).get_backend_name() == "sqlite"


def _apply_sqlite_pragmas(dbapi_connection: Any, connection_record: Any) -> None:  # pylint: disable=unused-argument
    cursor = dbapi_connection.cursor()
    try:
        for name, value in SQLITE_PRAGMAS:
            cursor.execute(f"PRAGMA {name}={value}")
    finally:
        cursor.close()


def make_engine(url: str | URL, *, echo: bool = False, **options: Any) -> Engine:
    """Create an Engine for `url`, tuned for SQLite when applicable.

    Args:
        url: SQLAlchemy database URL.
        echo: Log every SQL statement.
        **options: Further `create_engine` arguments (e.g. ``poolclass``).
    """
    engine = create_engine(url, echo=echo, **options)
    if is_sqlite(url):
        event.listen(engine, "connect", _apply_sqlite_pragmas)
    return engine
