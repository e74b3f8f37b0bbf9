"""Logging setup for the CDCROUTE CLI.

stdout carries JSON lines, so everything logged goes to stderr or to a file:

- a Rich console handler on stderr, at the level chosen with ``-v``/``-q``;
- an optional *flight recorder*: a `MemoryHandler` holding the most recent
  records at DEBUG, dumped to a file when a WARNING or worse is logged (a
  skipped envelope, a dead-lettered record) and optionally on exit.

Records from pymongo, SQLAlchemy and Alembic are tagged with their package
name on the console so they stand out from the pipeline's own messages.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import Literal

import pymongo
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

PROJECT_PREFIX = "cdcroute"

CONSOLE_FORMAT = "%(library)s%(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] %(levelname)-8s %(name)s:%(lineno)d [%(threadName)s] %(message)s"
)

ColorSystem = Literal["auto", "standard", "256", "truecolor", "windows"]

# pylint: disable=too-few-public-methods


class LibraryTagFilter(logging.Filter):
    """Set ``record.library`` to ``"[package] "`` for records from other packages."""

    def filter(self, record: logging.LogRecord) -> bool:
        package = record.name.partition(".")[0]
        record.library = "" if package == PROJECT_PREFIX else f"[{package}] "
        return True


@dataclass(frozen=True)
class LoggingOptions:
    """Logging choices made on the command line.

    Attributes:
        level: Console threshold.
        debug: Console at DEBUG with timestamps, logger names and paths.
        color: Allow ANSI colors on the console.
        recorder_path: Flight-recorder file; None disables the recorder.
        recorder_capacity: Records buffered before the oldest are flushed.
        flush_on_close: Also dump the recorder buffer on exit.
        logger_levels: Minimum level per logger name.
    """

    level: int = logging.WARNING
    debug: bool = False
    color: bool = True
    recorder_path: Path | None = None
    recorder_capacity: int = 2000
    flush_on_close: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)


def console_handler(
    level: int = logging.WARNING, debug: bool = False, color: bool = True
) -> RichHandler:
    """Return a RichHandler on stderr.

    In debug mode the threshold drops to DEBUG and each line shows when and
    where it was logged; otherwise only library tags precede the message.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug else level,
        console=Console(stderr=True, color_system=color_system),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug,
        enable_link_path=debug,
    )
    if debug:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler.addFilter(LibraryTagFilter())
    return handler


def flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Return a MemoryHandler that dumps its buffer to `path`.

    The file is truncated when the handler is created, so it always holds
    the records of the latest run.
    """
    target = logging.FileHandler(path, mode="w", encoding="utf-8")
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(RECORDER_FORMAT))
    return MemoryHandler(
        capacity, flushLevel=flush_level, target=target, flushOnClose=flush_on_close
    )


def configure_logging(options: LoggingOptions) -> list[logging.Handler]:
    """Install the console handler (and flight recorder) on the root logger.

    The root logger passes everything; the handlers and the per-logger
    levels decide what is kept.

    Returns:
        The installed handlers.
    """
    handlers: list[logging.Handler] = [
        console_handler(options.level, debug=options.debug, color=options.color)
    ]
    if options.recorder_path is not None:
        handlers.append(
            flight_recorder(
                options.recorder_path,
                capacity=options.recorder_capacity,
                flush_on_close=options.flush_on_close,
            )
        )
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, level in options.logger_levels.items():
        logging.getLogger(name).setLevel(level)
    return handlers


def log_startup(
    logger: logging.Logger,
    version: str,
    options: LoggingOptions,
    handlers: list[logging.Handler],
) -> None:
    """Log a one-line banner at INFO and the runtime environment at DEBUG."""
    logger.info(
        "CDCROUTE %s: console=%s, flight-recorder=%s",
        version,
        logging.getLevelName(options.level),
        "ON" if options.recorder_path is not None else "OFF",
    )

    recorder = (
        f"path={options.recorder_path}, capacity={options.recorder_capacity}, "
        f"flush_on_close={options.flush_on_close}"
        if options.recorder_path is not None
        else "<off>"
    )
    diagnostics = {
        "Python": sys.version.split()[0],
        "Platform": f"{platform.system()} {platform.release()}",
        "PID": os.getpid(),
        "CWD": Path.cwd(),
        "PyMongo": pymongo.__version__,
        "SQLAlchemy": sqlalchemy.__version__,
        "Handlers": [type(handler).__name__ for handler in handlers],
        "Flight recorder": recorder,
        "Logger levels": {
            name: logging.getLevelName(level)
            for name, level in options.logger_levels.items()
        }
        or "<none>",
    }
    for label, value in diagnostics.items():
        logger.debug("%s: %s", label, value)
