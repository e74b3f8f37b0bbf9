"""Fixtures for DeadLetterQueue contract tests."""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from cdcroute.adapters.dead_letter import (
    InMemoryDeadLetterQueue,
    SqlAlchemyDeadLetterQueue,
)
from cdcroute.interfaces.dead_letter import DeadLetterQueue


@pytest.fixture(params=["memory", "sqlite"])
def dead_letter_queue(request: pytest.FixtureRequest) -> Iterable[DeadLetterQueue]:
    """Return a fresh, empty DeadLetterQueue for the requested backend.

    Supported params:
      - `"memory"` → InMemoryDeadLetterQueue
      - `"sqlite"` → SqlAlchemyDeadLetterQueue on a migrated SQLite file
    """
    match request.param:
        case "memory":
            yield InMemoryDeadLetterQueue()
        case "sqlite":
            yield SqlAlchemyDeadLetterQueue(request.getfixturevalue("sqlite_engine_file"))
        case _:
            raise ValueError(f"unknown dead-letter queue type: {request.param}")
