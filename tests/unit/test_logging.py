"""Unit tests for the logging setup."""

from __future__ import annotations

import logging
from logging.handlers import MemoryHandler
from typing import TYPE_CHECKING

import pytest
from rich.logging import RichHandler

from cdcroute.logging import (
    LibraryTagFilter,
    LoggingOptions,
    configure_logging,
    console_handler,
    flight_recorder,
)

if TYPE_CHECKING:
    from pathlib import Path


def _record(name: str) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.mark.parametrize(
    "name, tag",
    [
        ("cdcroute.service_layer.stages", ""),
        ("pymongo.topology", "[pymongo] "),
        ("sqlalchemy.engine.Engine", "[sqlalchemy] "),
    ],
)
def test_library_tag_filter(name: str, tag: str):
    """Only records from other packages are tagged."""
    record = _record(name)
    assert LibraryTagFilter().filter(record)
    assert record.library == tag


def test_console_handler_debug_mode_lowers_level():
    """Debug mode shows everything and skips the library tags."""
    handler = console_handler(logging.ERROR, debug=True)
    assert isinstance(handler, RichHandler)
    assert handler.level == logging.DEBUG
    assert not handler.filters


def test_console_handler_default():
    """Outside debug mode the requested level applies and records are tagged."""
    handler = console_handler(logging.INFO)
    assert handler.level == logging.INFO
    assert any(isinstance(f, LibraryTagFilter) for f in handler.filters)


def test_flight_recorder_flushes_on_warning(tmp_path: Path):
    """Buffered DEBUG records reach the file once a WARNING arrives."""
    path = tmp_path / "latest.log"
    recorder = flight_recorder(path, capacity=10)
    recorder.handle(logging.LogRecord("cdcroute", logging.DEBUG, __file__, 1, "before", None, None))
    assert "before" not in path.read_text(encoding="utf-8")

    recorder.handle(logging.LogRecord("cdcroute", logging.WARNING, __file__, 2, "skipped", None, None))
    contents = path.read_text(encoding="utf-8")
    assert "before" in contents
    assert "skipped" in contents
    recorder.close()
    recorder.target.close()


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_installs_handlers(tmp_path: Path):
    """Console plus recorder on the root logger; per-logger levels applied."""
    handlers = configure_logging(
        LoggingOptions(
            recorder_path=tmp_path / "latest.log",
            logger_levels={"pymongo": logging.ERROR},
        )
    )
    assert [type(h) for h in handlers] == [RichHandler, MemoryHandler]
    assert logging.getLogger().handlers == handlers
    assert logging.getLogger("pymongo").level == logging.ERROR


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_without_recorder():
    """No recorder path, no recorder."""
    handlers = configure_logging(LoggingOptions())
    assert [type(h) for h in handlers] == [RichHandler]
