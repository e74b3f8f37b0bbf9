"""Reconciliation of outgoing records into write-intents.

The reconciler turns one `{key, value}` record at a routing target into at
most one write-intent. It is stateless: repeated application of the intents it
produces converges, so redelivered records need no deduplication.

Policies
--------
Upsert-by-business-key (value present):
- business key = the non-empty ``_businessKey`` mapping inside the value,
  otherwise the record key; `MissingBusinessKey` if neither is usable;
- ``_id`` is stripped from the document so the store keeps the identifier it
  assigned on first insert.

Delete-by-business-key (tombstone):
- business key = the record key only; `MissingBusinessKey` if it is unusable;
- single-document delete.

Configurations (one per deployment, never mixed):
- `KeyLayout.TOP_LEVEL` matches key columns as top-level document fields;
  `KeyLayout.NESTED` matches them under the ``_businessKey`` sub-document,
  which upserted documents always carry.
- `DeleteMode.HARD` removes documents on the tombstone and ignores delete
  markers; `DeleteMode.SOFT` upserts the delete marker (keeping its
  ``__deleted`` flag) and ignores the tombstone.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from cdcroute.domain.errors import MissingBusinessKey
from cdcroute.domain.records import OutgoingRecord
from cdcroute.domain.write_intents import (
    BUSINESS_KEY_FIELD,
    STORE_ID_FIELD,
    BusinessKey,
    Delete,
    MatchFilter,
    Upsert,
    WriteIntent,
)
from cdcroute.interfaces.connect import as_field_map

logger = logging.getLogger(__name__)


class KeyLayout(str, Enum):
    """Where business-key fields live in destination documents."""

    TOP_LEVEL = "top-level"
    NESTED = "nested"

    @property
    def prefix(self) -> str | None:
        """Field path prefix used in match filters."""
        return BUSINESS_KEY_FIELD if self is KeyLayout.NESTED else None


class DeleteMode(str, Enum):
    """How deletes are applied to the destination."""

    HARD = "hard"
    SOFT = "soft"


class WriteIntentReconciler:
    """Convert outgoing records into write-intents.

    Args:
        key_layout: Where business-key fields live in documents.
        delete_mode: Hard (remove) or soft (flag) deletes.
    """

    def __init__(
        self,
        key_layout: KeyLayout = KeyLayout.TOP_LEVEL,
        delete_mode: DeleteMode = DeleteMode.HARD,
    ) -> None:
        self.key_layout = key_layout
        self.delete_mode = delete_mode

    def reconcile(self, record: OutgoingRecord) -> WriteIntent | None:
        """Return the write-intent for `record`, or None if it needs none.

        Raises:
            MissingBusinessKey: If no business key can be established.
        """
        if record.is_tombstone:
            if self.delete_mode is DeleteMode.SOFT:
                logger.debug("Ignoring tombstone for %s (soft deletes)", record.routing_target)
                return None
            return self.delete_by_business_key(record)

        if record.is_delete_marker and self.delete_mode is DeleteMode.HARD:
            logger.debug("Delete marker for %s carries the route only", record.routing_target)
            return None

        return self.upsert_by_business_key(record)

    def upsert_by_business_key(self, record: OutgoingRecord) -> Upsert:
        """Build an upsert matched on the record's business key.

        Raises:
            MissingBusinessKey: If neither ``_businessKey`` nor the record key
                yields a usable business key.
        """
        value = as_field_map(record.value)
        if value is None:
            raise MissingBusinessKey(
                "upsert value is not a document", record.routing_target
            )

        embedded = value.get(BUSINESS_KEY_FIELD)
        source = embedded if isinstance(embedded, Mapping) and embedded else None
        source = source if source is not None else as_field_map(record.key)
        business_key = self._business_key(source, record.routing_target)

        document = {name: field for name, field in value.items() if name != STORE_ID_FIELD}
        if self.key_layout is KeyLayout.NESTED:
            document[BUSINESS_KEY_FIELD] = business_key.as_dict()

        return Upsert(
            match_filter=MatchFilter.for_key(business_key, self.key_layout.prefix),
            document=document,
        )

    def delete_by_business_key(self, record: OutgoingRecord) -> Delete:
        """Build a single-document delete matched on the record key.

        Raises:
            MissingBusinessKey: If the record key is missing, empty or has nulls.
        """
        business_key = self._business_key(as_field_map(record.key), record.routing_target)
        return Delete(match_filter=MatchFilter.for_key(business_key, self.key_layout.prefix))

    @staticmethod
    def _business_key(source: Mapping[str, Any] | None, routing_target: str) -> BusinessKey:
        try:
            return BusinessKey.from_mapping(source)
        except MissingBusinessKey as e:
            raise MissingBusinessKey(e.reason, routing_target) from e
