"""Unit tests for the CLI log level parser.

Covers defaults, override order, comma/space separated input (as read from
CDCROUTE_LOGGER_LEVELS), case-insensitivity and malformed input.
"""

import logging
import types

import click
import pytest

from cdcroute.entrypoints.cli.helpers.log_level_parser import parse_log_level, split_items


def make_ctx():
    """The callback ignores its context; a stub is enough."""
    return types.SimpleNamespace()


def test_empty_uses_defaults():
    """Without overrides the chatty libraries are quiet."""
    assert parse_log_level(make_ctx(), None, ()) == {
        "sqlalchemy": logging.WARNING,
        "alembic": logging.WARNING,
        "pymongo": logging.WARNING,
    }


def test_repeated_flags_override_order():
    """Later entries win for the same logger."""
    out = parse_log_level(make_ctx(), None, ("pymongo=INFO", "pymongo=ERROR"))
    assert out["pymongo"] == logging.ERROR


def test_envvar_string_with_commas_and_spaces():
    """A plain string with commas and spaces is accepted."""
    out = parse_log_level(
        make_ctx(), None, "pymongo=INFO,  cdcroute.service_layer=DEBUG alembic=ERROR"
    )
    assert out["pymongo"] == logging.INFO
    assert out["cdcroute.service_layer"] == logging.DEBUG
    assert out["alembic"] == logging.ERROR


def test_case_insensitive_levels():
    """Level names are case-insensitive."""
    out = parse_log_level(make_ctx(), None, ("sqlalchemy=info", "alembic=WaRnInG"))
    assert out["sqlalchemy"] == logging.INFO
    assert out["alembic"] == logging.WARNING


@pytest.mark.parametrize("value", [("not-a-pair",), ("pymongo=LOUD",)])
def test_invalid_items_raise(value):
    """Malformed pairs and unknown levels raise click.BadParameter."""
    with pytest.raises(click.BadParameter):
        parse_log_level(make_ctx(), None, value)


def test_split_items():
    """Items split on commas and whitespace, empties dropped."""
    assert split_items(("a=1, b=2", "  c=3 ")) == ["a=1", "b=2", "c=3"]
