"""Dead-letter schema.

Defines the ``dead_letters`` table: one row per record the sink stage could
not reconcile, kept for operator inspection and replay.

| Column          | Purpose                                         |
|-----------------|-------------------------------------------------|
| id              | insertion order                                 |
| routing_target  | collection the record was addressed at          |
| record_key      | record key as JSON                              |
| record_value    | record value as JSON (NULL for tombstones)      |
| error_type      | exception class name (e.g. MissingBusinessKey)  |
| reason          | human-readable failure reason                   |
| failed_at       | UTC time of the failure                         |
"""

from __future__ import annotations

from sqlalchemy import Column, Identity, String, Table, Text

from cdcroute.infrastructure.db.columns import JsonDocument, RowId, UtcTimestamp, metadata

__all__ = ["dead_letters"]

dead_letters = Table(
    "dead_letters",
    metadata,
    Column(
        "id",
        RowId,
        Identity(start=1),
        primary_key=True,
        nullable=False,
        comment="Insertion order.",
    ),
    Column(
        "routing_target",
        String(255),
        nullable=False,
        index=True,
        comment="Collection the record was addressed at.",
    ),
    Column("record_key", JsonDocument(), nullable=True, comment="Record key."),
    Column("record_value", JsonDocument(), nullable=True, comment="Record value."),
    Column(
        "error_type",
        String(100),
        nullable=False,
        comment="Exception class name.",
    ),
    Column("reason", Text, nullable=False, comment="Failure reason."),
    Column(
        "failed_at",
        UtcTimestamp(),
        nullable=False,
        comment="UTC time of the failure.",
    ),
)
