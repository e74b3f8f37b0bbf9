"""Payload transformation: change events to outgoing records.

Each decision is a pure function of one `ChangeEvent`; nothing is buffered or
correlated across records.

| Operation              | Output                                              |
|------------------------|-----------------------------------------------------|
| CREATE / READ / UPDATE | one record: after-image at the routing target      |
| ... without `after`    | None (caller passes the source record through)     |
| DELETE                 | delete marker, then tombstone, same target and key |
| UNKNOWN                | None (caller passes the source record through)     |
"""

from __future__ import annotations

import logging

from cdcroute.domain.change_event import ChangeEvent, Operation
from cdcroute.domain.records import OutgoingRecord, delete_marker_value
from cdcroute.domain.write_intents import BUSINESS_KEY_FIELD

from .routing import RoutingResolver

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class PayloadTransformer:
    """Build outgoing records for change events.

    Args:
        resolver: Derives the routing target from the source table.
        embed_business_key: If True, copy the record key into the value under
            ``_businessKey`` (for sinks matching on that sub-document).
    """

    def __init__(self, resolver: RoutingResolver, embed_business_key: bool = False):
        self._resolver = resolver
        self._embed_business_key = embed_business_key

    def transform(self, event: ChangeEvent) -> tuple[OutgoingRecord, ...] | None:
        """Map `event` to zero or more outgoing records.

        Returns:
            The records to emit, in order, or None when no routing decision is
            made and the source record should be passed through unchanged.
        """
        if event.operation.carries_after_image:
            if event.after is None:
                logger.debug(
                    "%s event for %s has no after-image; passing through",
                    event.operation.name,
                    event.source_table,
                )
                return None
            value = dict(event.after)
            if self._embed_business_key:
                value[BUSINESS_KEY_FIELD] = dict(event.key)
            return (
                OutgoingRecord(
                    routing_target=self._resolver.resolve(event.source_table),
                    key=dict(event.key),
                    value=value,
                ),
            )

        if event.operation is Operation.DELETE:
            target = self._resolver.resolve(event.source_table)
            key = dict(event.key)
            return (
                OutgoingRecord(
                    routing_target=target,
                    key=key,
                    value=delete_marker_value(event.before),
                ),
                OutgoingRecord(routing_target=target, key=key, value=None),
            )

        logger.debug("Unknown operation for %s; passing through", event.source_table)
        return None
