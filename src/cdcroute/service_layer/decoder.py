"""Envelope decoding.

Turns the value of a `SourceRecord` into a normalized `ChangeEvent`. The
change-log source may deliver the same logical envelope in two shapes:

- a schema-less mapping (``{"op": "c", "source": {"table": ...}, "after": {...}}``);
- a schema-described `Struct` (or its JSON converter form
  ``{"schema": {...}, "payload": {...}}``, which is turned into a `Struct`).

Both shapes are read through the `EnvelopeReader` interface so the decoding
rules below are written once:

- `op` must be a string; unrecognized codes decode to `Operation.UNKNOWN`.
- `source.table` must be a non-blank string.
- the record key (mapping, `Struct`, or JSON converter form) must be non-empty.
- `before`/`after`, when present, must be row-shaped.

Any violation raises `MalformedEnvelope`.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Mapping
from typing import Any

from cdcroute.domain.change_event import ChangeEvent, Operation
from cdcroute.domain.errors import MalformedEnvelope
from cdcroute.domain.records import SourceRecord
from cdcroute.interfaces.connect import (
    Struct,
    as_field_map,
    is_json_converter_message,
)

logger = logging.getLogger(__name__)

COLUMN_TYPE_PARAMETER = "column.type"


class EnvelopeReader(abc.ABC):
    """Read access to the parts of a change-event envelope."""

    @abc.abstractmethod
    def operation_code(self) -> Any:
        """Return the raw `op` value (None if absent)."""

    @abc.abstractmethod
    def source_table(self) -> Any:
        """Return the raw `source.table` value (None if absent)."""

    @abc.abstractmethod
    def image(self, name: str) -> dict[str, Any] | None:
        """Return the `before` or `after` image as a dict, or None if absent.

        Raises:
            MalformedEnvelope: If the image is present but not row-shaped.
        """

    @abc.abstractmethod
    def column_types(self) -> dict[str, str]:
        """Return source column type hints for the after-image columns."""


class MappingEnvelope(EnvelopeReader):
    """Reader over a schema-less envelope mapping."""

    def __init__(self, value: Mapping[str, Any]) -> None:
        self._value = value

    def operation_code(self) -> Any:
        return self._value.get("op")

    def source_table(self) -> Any:
        source = self._value.get("source")
        if not isinstance(source, Mapping):
            return None
        return source.get("table")

    def image(self, name: str) -> dict[str, Any] | None:
        return _row(self._value.get(name), name)

    def column_types(self) -> dict[str, str]:
        return {}


class StructEnvelope(EnvelopeReader):
    """Reader over a schema-described envelope `Struct`."""

    def __init__(self, value: Struct) -> None:
        self._value = value

    def operation_code(self) -> Any:
        return self._get(self._value, "op")

    def source_table(self) -> Any:
        source = self._get(self._value, "source")
        if not isinstance(source, Struct):
            return None
        return self._get(source, "table")

    def image(self, name: str) -> dict[str, Any] | None:
        return _row(self._get(self._value, name), name)

    def column_types(self) -> dict[str, str]:
        member = self._value.schema.get_field("after")
        if member is None:
            return {}
        hints = {}
        for column in member.schema.fields:
            for parameter, hint in column.schema.parameters.items():
                if COLUMN_TYPE_PARAMETER in parameter.lower() and hint:
                    hints[column.name] = hint
                    break
        return hints

    @staticmethod
    def _get(struct: Struct, name: str) -> Any:
        return struct.get(name) if struct.has_field(name) else None


def _row(image: Any, name: str) -> dict[str, Any] | None:
    if image is None:
        return None
    if (row := as_field_map(image)) is None:
        raise MalformedEnvelope(f"'{name}' must be a row, got {type(image).__name__}")
    return row


def reader_for(value: Any) -> EnvelopeReader:
    """Pick the envelope reader matching the shape of `value`.

    Raises:
        MalformedEnvelope: If the value is neither a mapping nor a `Struct`.
    """
    if isinstance(value, Struct):
        return StructEnvelope(value)
    if is_json_converter_message(value):
        payload = value["payload"]
        if not isinstance(payload, Mapping):
            raise MalformedEnvelope("JSON converter payload must be an object")
        try:
            struct = Struct.from_json(value["schema"], payload)
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedEnvelope(f"invalid JSON converter message: {e}") from e
        return StructEnvelope(struct)
    if isinstance(value, Mapping):
        return MappingEnvelope(value)
    raise MalformedEnvelope(
        f"envelope must be a mapping or a Struct, got {type(value).__name__}"
    )


class EnvelopeDecoder:
    """Decode source records into `ChangeEvent`s."""

    def decode(self, record: SourceRecord) -> ChangeEvent:
        """Decode the envelope carried by `record`.

        Args:
            record: The raw record from the change-log source.

        Returns:
            The normalized ChangeEvent.

        Raises:
            MalformedEnvelope: If the operation, source table or key cannot be
                determined, or an image is not row-shaped.
        """
        reader = reader_for(record.value)

        code = reader.operation_code()
        if not isinstance(code, str):
            raise MalformedEnvelope("envelope has no operation code ('op')")
        operation = Operation.from_code(code)
        if operation is Operation.UNKNOWN:
            logger.debug("Unrecognized operation code %r on topic %s", code, record.topic)

        table = reader.source_table()
        if not isinstance(table, str) or not table.strip():
            raise MalformedEnvelope("envelope has no source table ('source.table')")

        key = as_field_map(record.key)
        if not key:
            raise MalformedEnvelope(f"record for table '{table}' has no key")

        return ChangeEvent(
            operation=operation,
            source_table=table,
            key=key,
            before=reader.image("before"),
            after=reader.image("after"),
            column_types=reader.column_types(),
        )
