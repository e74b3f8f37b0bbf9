"""Type normalization of after-images.

Rewrites after-image values into one of five canonical kinds using the source
column type hints carried by the event. Two dialect tables are supported:

| Canonical kind | ORACLE                          | POSTGRES                                        |
|----------------|---------------------------------|-------------------------------------------------|
| STRING         | VARCHAR2 CHAR NCHAR NVARCHAR2   | VARCHAR CHAR CHARACTER TEXT                     |
|                | CLOB NCLOB                      |                                                 |
| INTEGER        | INTEGER                         | INTEGER INT4 SMALLINT INT2                      |
| DOUBLE         | FLOAT BINARY_FLOAT BINARY_DOUBLE| DOUBLE PRECISION FLOAT8 REAL FLOAT4 NUMERIC     |
|                |                                 | DECIMAL                                         |
| DATE           | DATE TIMESTAMP                  | DATE TIMESTAMP TIMESTAMPTZ                      |
|                |                                 | TIMESTAMP WITH TIME ZONE                        |
| BINARY         | BLOB RAW LONG RAW               | BYTEA                                           |

Normalization is best-effort: a value that cannot be converted, a column
without a hint, and a hint missing from the active table all pass through
unchanged. Nothing here raises.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from collections.abc import Mapping
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from numbers import Number
from types import MappingProxyType
from typing import Any

from cdcroute.domain.change_event import ChangeEvent

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MAX_EPOCH_DAYS = 5_000_000
MAX_EPOCH_SECONDS = 100_000_000_000
PLAIN_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class CanonicalKind(Enum):
    """Canonical kinds values are normalized into."""

    STRING = "string"
    INTEGER = "int"
    DOUBLE = "double"
    DATE = "date"
    BINARY = "binData"


class DialectMode(str, Enum):
    """Selectable source dialects for type mapping."""

    ORACLE = "oracle"
    POSTGRES = "postgres"


ORACLE_TYPE_MAPPING: Mapping[str, CanonicalKind] = MappingProxyType(
    {
        "VARCHAR2": CanonicalKind.STRING,
        "CHAR": CanonicalKind.STRING,
        "NCHAR": CanonicalKind.STRING,
        "NVARCHAR2": CanonicalKind.STRING,
        "INTEGER": CanonicalKind.INTEGER,
        "FLOAT": CanonicalKind.DOUBLE,
        "BINARY_FLOAT": CanonicalKind.DOUBLE,
        "BINARY_DOUBLE": CanonicalKind.DOUBLE,
        "DATE": CanonicalKind.DATE,
        "TIMESTAMP": CanonicalKind.DATE,
        "CLOB": CanonicalKind.STRING,
        "NCLOB": CanonicalKind.STRING,
        "BLOB": CanonicalKind.BINARY,
        "RAW": CanonicalKind.BINARY,
        "LONG RAW": CanonicalKind.BINARY,
    }
)

POSTGRES_TYPE_MAPPING: Mapping[str, CanonicalKind] = MappingProxyType(
    {
        "VARCHAR": CanonicalKind.STRING,
        "CHAR": CanonicalKind.STRING,
        "CHARACTER": CanonicalKind.STRING,
        "TEXT": CanonicalKind.STRING,
        "INTEGER": CanonicalKind.INTEGER,
        "INT4": CanonicalKind.INTEGER,
        "SMALLINT": CanonicalKind.INTEGER,
        "INT2": CanonicalKind.INTEGER,
        "DOUBLE PRECISION": CanonicalKind.DOUBLE,
        "FLOAT8": CanonicalKind.DOUBLE,
        "REAL": CanonicalKind.DOUBLE,
        "FLOAT4": CanonicalKind.DOUBLE,
        "NUMERIC": CanonicalKind.DOUBLE,
        "DECIMAL": CanonicalKind.DOUBLE,
        "DATE": CanonicalKind.DATE,
        "TIMESTAMP": CanonicalKind.DATE,
        "TIMESTAMPTZ": CanonicalKind.DATE,
        "TIMESTAMP WITH TIME ZONE": CanonicalKind.DATE,
        "BYTEA": CanonicalKind.BINARY,
    }
)

DIALECT_TABLES: Mapping[DialectMode, Mapping[str, CanonicalKind]] = MappingProxyType(
    {
        DialectMode.ORACLE: ORACLE_TYPE_MAPPING,
        DialectMode.POSTGRES: POSTGRES_TYPE_MAPPING,
    }
)


def normalize_source_type(source_type: str) -> str:
    """Reduce a column type hint to its base name.

    ``" varchar2(40) "`` → ``"VARCHAR2"``; ``"TIMESTAMP(6)"`` → ``"TIMESTAMP"``.
    """
    base = source_type.strip().upper()
    if (paren := base.find("(")) >= 0:
        base = base[:paren].strip()
    return base


class TypeNormalizer:
    """Rewrite after-image values into canonical kinds.

    Args:
        type_mapping: The dialect table to use (source type → canonical kind).
            Pick one of `DIALECT_TABLES` or supply a custom immutable mapping.
    """

    def __init__(self, type_mapping: Mapping[str, CanonicalKind]) -> None:
        self._type_mapping = MappingProxyType(dict(type_mapping))

    @classmethod
    def for_mode(cls, mode: DialectMode) -> TypeNormalizer:
        """Build a normalizer over the built-in table for `mode`."""
        return cls(DIALECT_TABLES[mode])

    def target_kind(self, source_type: str | None) -> CanonicalKind | None:
        """Return the canonical kind for a column type hint, if mapped."""
        if not source_type:
            return None
        return self._type_mapping.get(normalize_source_type(source_type))

    def normalize(self, event: ChangeEvent) -> ChangeEvent:
        """Return `event` with its after-image normalized.

        Events without an after-image or without type hints are returned as is.
        """
        if event.after is None or not event.column_types:
            return event
        after = {
            column: normalize_value(
                value, self.target_kind(event.column_types.get(column))
            )
            for column, value in event.after.items()
        }
        logger.debug(
            "Normalized after-image of %s using %d column type hint(s)",
            event.source_table,
            len(event.column_types),
        )
        return event.with_after(after)


# --------------------------------------------------------------------- #
# Conversions
# --------------------------------------------------------------------- #


def normalize_value(value: Any, kind: CanonicalKind | None) -> Any:
    """Convert `value` to `kind`, passing it through on any failure."""
    if value is None or kind is None:
        return value
    match kind:
        case CanonicalKind.STRING:
            return str(value)
        case CanonicalKind.INTEGER:
            return to_integer(value)
        case CanonicalKind.DOUBLE:
            return to_double(value)
        case CanonicalKind.DATE:
            return to_datetime(value)
        case CanonicalKind.BINARY:
            return to_binary(value)
    return value  # pragma: no cover


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def to_integer(value: Any) -> Any:
    """Integers stay; other numbers are truncated; strings are parsed."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if _is_number(value):
        try:
            return int(value)
        except (OverflowError, ValueError, TypeError):
            return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return value
    return value


def to_double(value: Any) -> Any:
    """Numbers become floats; strings are parsed."""
    if isinstance(value, float):
        return value
    if _is_number(value):
        try:
            return float(value)
        except (OverflowError, ValueError, TypeError):
            return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value
    return value


def to_datetime(value: Any) -> Any:
    """Convert to a UTC datetime.

    Numbers are read by magnitude: below 5,000,000 as days since the epoch,
    below 100,000,000,000 as epoch seconds, otherwise as epoch milliseconds.
    Strings are parsed as an ISO-8601 instant, then as a ``YYYY-MM-DD`` date.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if _is_number(value):
        try:
            numeric = int(value)
            magnitude = abs(numeric)
            if magnitude < MAX_EPOCH_DAYS:
                return EPOCH + timedelta(days=numeric)
            if magnitude < MAX_EPOCH_SECONDS:
                return EPOCH + timedelta(seconds=numeric)
            return EPOCH + timedelta(milliseconds=numeric)
        except (OverflowError, ValueError, TypeError):
            return value
    if isinstance(value, str):
        if (instant := _parse_instant(value)) is not None:
            return instant
        if not PLAIN_DATE.fullmatch(value):
            return value
        try:
            day = date.fromisoformat(value)
        except ValueError:
            return value
        return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return value


def _parse_instant(raw: str) -> datetime | None:
    """Parse an ISO-8601 instant; None unless it has a time and an offset."""
    if "T" not in raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed.astimezone(timezone.utc)


def to_binary(value: Any) -> Any:
    """Byte sequences become bytes; strings are base64-decoded strictly."""
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            return value
    return value


__all__ = [
    "CanonicalKind",
    "DialectMode",
    "DIALECT_TABLES",
    "ORACLE_TYPE_MAPPING",
    "POSTGRES_TYPE_MAPPING",
    "TypeNormalizer",
    "normalize_value",
]
