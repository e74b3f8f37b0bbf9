"""Metadata and column types for the dead-letter database.

`metadata` names constraints and indexes deterministically (``pk_<table>``,
``ix_<table>_<columns>``, ...), so Alembic revisions can refer to them by
name on every backend.

Column types:

- `RowId` - 64-bit identity on real servers, ``INTEGER`` on SQLite, where
  only an ``INTEGER PRIMARY KEY`` autoincrements.
- `JsonDocument` - record keys and values. Anything `to_jsonable` accepts can
  be bound; JSONB is used on PostgreSQL.
- `UtcTimestamp` - stored as naive UTC on every backend, read back aware.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, BigInteger, Integer, MetaData
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import DateTime, TypeDecorator

from cdcroute.utils.jsonable import to_jsonable

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect
    from sqlalchemy.types import TypeEngine

__all__ = ["JsonDocument", "RowId", "UtcTimestamp", "metadata"]

metadata = MetaData(
    naming_convention={
        "pk": "pk_%(table_name)s",
        "ix": "ix_%(table_name)s_%(column_0_N_label)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
    }
)

RowId = BigInteger().with_variant(Integer(), "sqlite")


class JsonDocument(TypeDecorator[Any]):  # pylint: disable=too-many-ancestors
    """JSON column that renders datetimes, decimals and bytes before binding.

    Python None is stored as SQL NULL, not as the JSON literal ``null``.
    """

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB(none_as_null=True))
        return dialect.type_descriptor(JSON(none_as_null=True))

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        return None if value is None else to_jsonable(value)


class UtcTimestamp(TypeDecorator[datetime]):  # pylint: disable=too-many-ancestors
    """Aware UTC datetimes kept in a timezone-less column.

    Binding a naive datetime is an error; the offset it was meant to have
    cannot be recovered.
    """

    impl = DateTime(timezone=False)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError(f"naive datetime {value.isoformat()} cannot be stored as UTC")
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        if isinstance(value, datetime):
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def python_type(self) -> type[datetime]:
        return datetime
