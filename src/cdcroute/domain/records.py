"""Records entering and leaving the source stage.

`SourceRecord` is what the change-log source hands over; `OutgoingRecord` is
what the source stage emits back onto the log for the sink stage.

Delete protocol
---------------
A delete is always emitted as two records sharing `routing_target` and `key`:

1. a *delete marker*: value-bearing, carrying the before-image with
   ``__deleted`` set to True. It communicates the route while operation
   metadata is still available;
2. a *tombstone*: `value` is None. This is the delete signal consumed by the
   sink side, which can only rely on `routing_target` to find the collection.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

DELETED_FIELD = "__deleted"


@dataclass(frozen=True, slots=True)
class SourceRecord:
    """A raw record as delivered by the change-log source.

    `key` and `value` may be mappings, `Struct`s, or JSON converter messages;
    `value` is None for a tombstone produced upstream.
    """

    topic: str
    key: Any
    value: Any
    partition: int | None = None
    offset: int | None = None
    timestamp: datetime | None = None


@dataclass(frozen=True, slots=True)
class OutgoingRecord:
    """A record emitted by the source stage onto the change log."""

    routing_target: str
    key: Any
    value: Any  # row mapping; None for a tombstone; untouched value on passthrough

    @property
    def is_tombstone(self) -> bool:
        """True if this record signals a delete (no value)."""
        return self.value is None

    @property
    def is_delete_marker(self) -> bool:
        """True if this is the value-bearing first half of a delete pair."""
        return isinstance(self.value, Mapping) and self.value.get(DELETED_FIELD) is True

    @classmethod
    def passthrough(cls, record: SourceRecord) -> OutgoingRecord:
        """Forward a source record unchanged (its topic stays the route)."""
        return cls(routing_target=record.topic, key=record.key, value=record.value)


def delete_marker_value(before: Mapping[str, Any] | None) -> dict[str, Any]:
    """Build the value of a delete marker from the deleted row's before-image."""
    value = dict(before or {})
    value[DELETED_FIELD] = True
    return value
