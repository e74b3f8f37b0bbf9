"""Normalized change events.

A `ChangeEvent` is one captured row mutation, independent of the envelope
representation it was decoded from.

Invariants (checked at construction):
- `source_table` is a non-blank string.
- `key` holds at least one primary-key column.

Image presence is not enforced per operation: the source may send an
operation code without a payload, which downstream stages pass through.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .errors import MalformedEnvelope


class Operation(Enum):
    """Operation kinds carried by change events.

    Members:
    - CREATE (``"c"``): row inserted.
    - READ (``"r"``): synthetic insert emitted while snapshotting.
    - UPDATE (``"u"``): row updated.
    - DELETE (``"d"``): row deleted.
    - UNKNOWN: any other code; tolerated for forward compatibility.
    """

    CREATE = "c"
    READ = "r"
    UPDATE = "u"
    DELETE = "d"
    UNKNOWN = "?"

    @classmethod
    def from_code(cls, code: str) -> Operation:
        """Map an operation code to an Operation, defaulting to UNKNOWN."""
        for member in cls:
            if member is not cls.UNKNOWN and member.value == code:
                return member
        return cls.UNKNOWN

    @property
    def carries_after_image(self) -> bool:
        """True for operations whose payload is the after-image."""
        return self in (Operation.CREATE, Operation.READ, Operation.UPDATE)


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """One captured row mutation.

    Notes:
      - `before` is present for updates and deletes, `after` for creates,
        reads and updates.
      - `column_types` maps column names to source column type hints
        (e.g. ``"VARCHAR2(40)"``); it is empty when the envelope carried none.
    """

    operation: Operation
    source_table: str
    key: Mapping[str, Any]
    before: Mapping[str, Any] | None = None
    after: Mapping[str, Any] | None = None
    column_types: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.source_table, str) or not self.source_table.strip():
            raise MalformedEnvelope("source table must be a non-empty string.")
        if not self.key:
            raise MalformedEnvelope("key must contain at least one column.")

    def with_after(self, after: Mapping[str, Any]) -> ChangeEvent:
        """Return a copy of this event carrying a different after-image."""
        return replace(self, after=after)
