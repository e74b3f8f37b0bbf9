"""Parsing of ``-L NAME=LEVEL`` logger-level options.

Items may be repeated or packed into one string separated by commas or
whitespace (the form ``CDCROUTE_LOGGER_LEVELS`` takes). They are layered over
`DEFAULT_LIB_LEVELS`, which keeps the database drivers quiet unless asked.
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {
    "sqlalchemy": logging.WARNING,
    "alembic": logging.WARNING,
    "pymongo": logging.WARNING,
}

_SEPARATORS = re.compile(r"[,\s]+")
_LEVEL_NAMES = logging.getLevelNamesMapping()


def split_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Split one string, or each of several, into non-empty items."""
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in _SEPARATORS.split(chunk) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback turning NAME=LEVEL items into a logger → level dict.

    Later items override earlier ones and the defaults.

    Raises:
        click.BadParameter: If an item has no ``=`` or names an unknown level.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in split_items(value):
        name, sep, level_name = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        try:
            levels[name] = _LEVEL_NAMES[level_name.upper()]
        except KeyError as e:
            raise click.BadParameter(
                f"Invalid log level {level_name!r} for {name}; "
                f"expected one of: {', '.join(sorted(_LEVEL_NAMES))}"
            ) from e
    return levels
