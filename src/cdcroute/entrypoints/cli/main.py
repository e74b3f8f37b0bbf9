"""CDCROUTE CLI entry point.

The ``cdcroute`` group (built with Click-Extra) sets up logging for the run
and dispatches to:

- ``cdcroute transform``: change-log records → routed outgoing records.
- ``cdcroute reconcile``: outgoing records → write-intents (optionally applied).
- ``cdcroute db``: forward-only management of the dead-letter database.

Examples
    $ cdcroute --version
    $ cdcroute transform changes.jsonl > outgoing.jsonl
    $ cdcroute -v reconcile --apply outgoing.jsonl
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from cdcroute import __version__
from cdcroute.logging import LoggingOptions, configure_logging, log_startup

from .db import db as db_group
from .helpers.log_level_parser import DEFAULT_LIB_LEVELS, parse_log_level
from .pipeline import reconcile, transform

logger = logging.getLogger(__name__)


HELP = """CDCROUTE command-line interface.

    CDCROUTE turns database change events into per-table document writes. Each
    change event is routed to a collection named after its source table, and
    applied as an idempotent upsert or delete keyed by the row's business key,
    so replays of the change log converge on the same documents.
    """

DEFAULT_LOG_PATH = (
    Path(user_log_dir("cdcroute", appauthor=False, ensure_exists=True)) / "latest.log"
)


def console_level(verbose: int, quiet: int) -> int:
    """WARNING moved one level per -v (down) or -q (up), clamped to DEBUG..CRITICAL."""
    level = logging.WARNING + 10 * (quiet - verbose)
    return max(logging.DEBUG, min(logging.CRITICAL, level))


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Show more on the console: INFO with -v, DEBUG with -vv.",
)
@click.option(
    "-q",
    "--quiet",
    count=True,
    help="Show less on the console: ERROR with -q, CRITICAL with -qq.",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Log everything to the console with timestamps, logger names and source paths.",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_LOG_PATH,
    envvar="CDCROUTE_LOG_PATH",
    show_default=True,
    show_envvar=True,
    help="File the flight recorder writes to.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    default=True,
    show_envvar=True,
    help=(
        "Keep the most recent log records at DEBUG in memory (regardless of -v/-q) "
        "and write them to --log-path when a WARNING or ERROR is logged, such as "
        "a skipped envelope or a dead-lettered record."
    ),
)
@click.option(
    "--flight-recorder-capacity",
    type=click.IntRange(min=1),
    default=2000,
    hidden=True,
    envvar="CDCROUTE_FLIGHT_RECORDER_CAPACITY",
    help="Number of records the flight recorder keeps.",
)
@click.option(
    "--force-flush/--no-force-flush",
    default=False,
    show_default=True,
    show_envvar=True,
    help="Also write the flight recorder to --log-path when the command exits.",
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    default=tuple(f"{name}={logging.getLevelName(lvl)}" for name, lvl in DEFAULT_LIB_LEVELS.items()),
    envvar="CDCROUTE_LOGGER_LEVELS",
    show_default=True,
    show_envvar=True,
    help=(
        "Minimum level for a logger, as NAME=LEVEL (repeatable), e.g. "
        "-L pymongo=INFO -L cdcroute.service_layer=DEBUG."
    ),
)
@clickx.pass_context
def cdcroute(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose: int,
    quiet: int,
    debug: bool,
    log_path: Path,
    flight_recorder: bool,
    flight_recorder_capacity: int,
    force_flush: bool,
    logger_levels: dict[str, int],
) -> None:
    """CDCROUTE command-line interface."""
    options = LoggingOptions(
        level=console_level(verbose, quiet),
        debug=debug,
        color=ctx.color is not False,
        recorder_path=log_path if flight_recorder else None,
        recorder_capacity=flight_recorder_capacity,
        flush_on_close=force_flush,
        logger_levels=logger_levels,
    )
    handlers = configure_logging(options)
    log_startup(logger, __version__, options, handlers)
    ctx.call_on_close(logging.shutdown)


cdcroute.add_command(transform)
cdcroute.add_command(reconcile)
cdcroute.add_command(db_group)
