"""Schema-described record structures.

A change-log source may hand over envelopes either as schema-less mappings or
as values described by a static schema (a `Struct` whose `Schema` lists typed,
named fields). This module defines the latter, mirroring the shape used by
Kafka Connect converters:

- `Schema` - a named type with optional fields and free-form `parameters`
  (where CDC sources put hints such as ``__debezium.source.column.type``).
- `Field` - a named member of a struct schema.
- `Struct` - a schema plus the values for its fields.

It also provides helpers to read the JSON converter wire form
(``{"schema": {...}, "payload": {...}}``) and to flatten any accepted key/value
representation into a plain dict.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

STRUCT_TYPE = "struct"


@dataclass(frozen=True, slots=True)
class Schema:
    """Static description of a value.

    Notes:
      - `fields` is only meaningful when `type` is ``"struct"``.
      - `parameters` carries source-specific hints (e.g. column type).
    """

    type: str
    fields: tuple[Field, ...] = ()
    name: str | None = None
    optional: bool = False
    parameters: Mapping[str, str] = field(default_factory=dict)

    def get_field(self, name: str) -> Field | None:
        """Return the field called `name`, or None if the schema has no such field."""
        for member in self.fields:
            if member.name == name:
                return member
        return None

    @classmethod
    def from_json(cls, raw: Mapping[str, Any]) -> Schema:
        """Build a schema from its JSON converter representation.

        Args:
            raw: A JSON schema object, e.g.
                ``{"type": "struct", "fields": [{"field": "id", "type": "int32"}]}``.

        Returns:
            The corresponding Schema (nested struct schemas included).

        Raises:
            ValueError: If `raw` (or a nested field) is not a schema object, or
                a field has no ``"field"`` name.
        """
        if not isinstance(raw, Mapping):
            raise ValueError(f"schema must be an object, got {type(raw).__name__}")
        members = raw.get("fields") or ()
        if not isinstance(members, (list, tuple)):
            raise ValueError("schema 'fields' must be a list")
        for member in members:
            if not isinstance(member, Mapping) or not isinstance(member.get("field"), str):
                raise ValueError("schema field has no 'field' name")
        return cls(
            type=str(raw.get("type", STRUCT_TYPE)),
            fields=tuple(
                Field(name=member["field"], schema=cls.from_json(member))
                for member in members
            ),
            name=raw.get("name"),
            optional=bool(raw.get("optional", False)),
            parameters=dict(raw.get("parameters") or {}),
        )


@dataclass(frozen=True, slots=True)
class Field:
    """A named member of a struct schema."""

    name: str
    schema: Schema


class Struct:
    """A value described by a struct `Schema`.

    Values are stored by field name; reading a name the schema does not declare
    raises `KeyError`.
    """

    def __init__(self, schema: Schema, values: Mapping[str, Any] | None = None):
        if schema.type != STRUCT_TYPE:
            raise ValueError(f"Struct requires a struct schema, got {schema.type!r}")
        self.schema = schema
        self._values: dict[str, Any] = {}
        for name, value in (values or {}).items():
            self.put(name, value)

    def get(self, name: str) -> Any:
        """Return the value of field `name` (None when unset)."""
        if self.schema.get_field(name) is None:
            raise KeyError(f"{name} is not a valid field name")
        return self._values.get(name)

    def put(self, name: str, value: Any) -> Struct:
        """Set the value of field `name` and return the struct."""
        if self.schema.get_field(name) is None:
            raise KeyError(f"{name} is not a valid field name")
        self._values[name] = value
        return self

    def has_field(self, name: str) -> bool:
        """Return True if the schema declares a field called `name`."""
        return self.schema.get_field(name) is not None

    def to_dict(self) -> dict[str, Any]:
        """Return the values in schema order, with nested structs flattened too."""
        return {
            member.name: _plain(self._values.get(member.name))
            for member in self.schema.fields
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Struct):
            return NotImplemented
        return self.schema == other.schema and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Struct({self.schema.name or 'anonymous'}, {self.to_dict()!r})"

    @classmethod
    def from_json(cls, schema: Mapping[str, Any], payload: Mapping[str, Any]) -> Struct:
        """Build a struct from a JSON converter ``schema`` and ``payload`` pair.

        Raises:
            ValueError: If the schema is not a struct schema, or a value the
                schema declares as a struct is not an object.
        """
        parsed = Schema.from_json(schema)
        if parsed.type != STRUCT_TYPE:
            raise ValueError(f"Struct requires a struct schema, got {parsed.type!r}")
        if not isinstance(payload, Mapping):
            raise ValueError(f"struct value must be an object, got {type(payload).__name__}")
        return _wrap(parsed, payload)


def _wrap(schema: Schema, payload: Any) -> Any:
    if payload is None or schema.type != STRUCT_TYPE:
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError(f"struct value must be an object, got {type(payload).__name__}")
    struct = Struct(schema)
    for member in schema.fields:
        if member.name in payload:
            struct.put(member.name, _wrap(member.schema, payload[member.name]))
    return struct


def _plain(value: Any) -> Any:
    return value.to_dict() if isinstance(value, Struct) else value


def is_json_converter_message(obj: Any) -> bool:
    """Return True if `obj` looks like ``{"schema": {...}, "payload": ...}``."""
    return (
        isinstance(obj, Mapping)
        and set(obj.keys()) == {"schema", "payload"}
        and isinstance(obj["schema"], Mapping)
    )


def as_field_map(obj: Any) -> dict[str, Any] | None:
    """Flatten any accepted key/value representation into a plain dict.

    Accepts a `Struct`, a JSON converter message, or a mapping. Returns None
    for None and for anything that is not row-shaped.
    """
    if obj is None:
        return None
    if isinstance(obj, Struct):
        return obj.to_dict()
    if is_json_converter_message(obj):
        return as_field_map(obj["payload"])
    if isinstance(obj, Mapping):
        return {str(name): _plain(value) for name, value in obj.items()}
    return None
