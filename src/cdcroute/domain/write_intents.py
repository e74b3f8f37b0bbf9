"""Business keys, match filters and write-intents.

A write-intent is a fully resolved instruction for the document store:

- `Upsert` - update the document matching the filter, or insert a new one
  (the store assigns its identifier) when none matches.
- `Delete` - remove the single document matching the filter.

Filters are always built from a `BusinessKey`, never from a store-assigned
identifier, so the same source row keeps addressing the same document
across its whole insert → update → delete → insert lifecycle.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import MissingBusinessKey

STORE_ID_FIELD = "_id"
BUSINESS_KEY_FIELD = "_businessKey"


@dataclass(frozen=True, slots=True)
class BusinessKey:
    """Primary-key values identifying a source row.

    Invariants:
      - at least one field;
      - no field is None.
    """

    fields: tuple[tuple[str, Any], ...]

    def __post_init__(self) -> None:
        if not self.fields:
            raise MissingBusinessKey("business key must have at least one field")
        if missing := [name for name, value in self.fields if value is None]:
            raise MissingBusinessKey(f"business key fields are null: {missing}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> BusinessKey:
        """Build a business key from a column → value mapping.

        Raises:
            MissingBusinessKey: If the mapping is None, empty, or has null values.
        """
        if not mapping:
            raise MissingBusinessKey("business key is missing or empty")
        return cls(fields=tuple(mapping.items()))

    def as_dict(self) -> dict[str, Any]:
        """Return the key as an ordered dict."""
        return dict(self.fields)


@dataclass(frozen=True, slots=True)
class MatchFilter:
    """Conjunction of equality clauses on document field paths."""

    clauses: tuple[tuple[str, Any], ...]

    @classmethod
    def for_key(cls, key: BusinessKey, prefix: str | None = None) -> MatchFilter:
        """Match every field of `key`, optionally nested under `prefix`."""
        return cls(
            clauses=tuple(
                (f"{prefix}.{name}" if prefix else name, value)
                for name, value in key.fields
            )
        )

    def to_query(self) -> dict[str, Any]:
        """Render the filter as a document-store query.

        A single clause renders as ``{field: value}``; composite keys render as
        ``{"$and": [{f1: v1}, {f2: v2}, ...]}`` so no subset can match alone.
        """
        if len(self.clauses) == 1:
            path, value = self.clauses[0]
            return {path: value}
        return {"$and": [{path: value} for path, value in self.clauses]}


class WriteIntentKind(Enum):
    """Kinds of write-intents."""

    UPSERT = "upsert"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class Upsert:
    """Update-or-insert the document matched by business key."""

    match_filter: MatchFilter
    document: Mapping[str, Any]

    kind = WriteIntentKind.UPSERT

    def __post_init__(self) -> None:
        if STORE_ID_FIELD in self.document:
            raise ValueError("upsert documents must not carry a store identifier")

    def to_update(self) -> dict[str, Any]:
        """Render the update operators applied to the matched document."""
        return {"$set": dict(self.document)}


@dataclass(frozen=True, slots=True)
class Delete:
    """Delete the single document matched by business key."""

    match_filter: MatchFilter

    kind = WriteIntentKind.DELETE


WriteIntent = Upsert | Delete
