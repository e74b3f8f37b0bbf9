"""Source and sink stages.

The source stage runs decoder → normalizer → transformer for each record the
change-log source delivers; the sink stage runs reconciler → document store
for each record the source stage emitted. Both are one-record-in, few-records-
out mappers: they never buffer, batch, reorder or retry.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cdcroute.domain.errors import MalformedEnvelope, MissingBusinessKey
from cdcroute.domain.records import OutgoingRecord, SourceRecord
from cdcroute.interfaces.dead_letter import DeadLetter

if TYPE_CHECKING:
    from cdcroute.domain.write_intents import WriteIntent
    from cdcroute.interfaces.dead_letter import DeadLetterQueue
    from cdcroute.interfaces.document_store import ApplyResult, DocumentStore

    from .decoder import EnvelopeDecoder
    from .normalizer import TypeNormalizer
    from .reconciler import WriteIntentReconciler
    from .transformer import PayloadTransformer

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class SourceStage:
    """Transform change-log records into routed outgoing records.

    Args:
        decoder: Decodes envelopes into change events.
        transformer: Builds outgoing records from change events.
        normalizer: Optional type normalizer; None disables normalization.
    """

    def __init__(
        self,
        decoder: EnvelopeDecoder,
        transformer: PayloadTransformer,
        normalizer: TypeNormalizer | None = None,
    ) -> None:
        self.decoder = decoder
        self.transformer = transformer
        self.normalizer = normalizer

    def process(self, record: SourceRecord) -> list[OutgoingRecord]:
        """Return the records to emit for `record`, in emission order.

        Upstream tombstones and records the transformer makes no decision on
        are passed through unchanged. Malformed envelopes are logged and
        skipped.
        """
        if record.value is None:
            return [OutgoingRecord.passthrough(record)]

        try:
            event = self.decoder.decode(record)
        except MalformedEnvelope as e:
            logger.warning(
                "Skipping malformed change event (topic=%s, partition=%s, offset=%s): %s",
                record.topic,
                record.partition,
                record.offset,
                e,
            )
            return []

        if self.normalizer is not None:
            event = self.normalizer.normalize(event)

        if (outgoing := self.transformer.transform(event)) is None:
            return [OutgoingRecord.passthrough(record)]
        return list(outgoing)


class SinkStage:
    """Reconcile outgoing records and apply them to the document store.

    Args:
        reconciler: Converts records into write-intents.
        store: The document store write-intents are applied to.
        dead_letters: Receives records whose business key cannot be established.
    """

    def __init__(
        self,
        reconciler: WriteIntentReconciler,
        store: DocumentStore,
        dead_letters: DeadLetterQueue,
    ) -> None:
        self.reconciler = reconciler
        self.store = store
        self.dead_letters = dead_letters

    def handle(self, record: OutgoingRecord) -> ApplyResult | None:
        """Reconcile `record` and apply the resulting write-intent.

        Returns:
            The store's ApplyResult, or None when the record needed no write
            or was dead-lettered.

        Raises:
            DocumentStoreError: If the store fails; retrying is the caller's job.
        """
        if (intent := self.plan(record)) is None:
            return None
        return self.apply(record.routing_target, intent)

    def plan(self, record: OutgoingRecord) -> WriteIntent | None:
        """Return the write-intent for `record` without touching the store.

        Records whose business key cannot be established are dead-lettered
        and yield None.
        """
        try:
            return self.reconciler.reconcile(record)
        except MissingBusinessKey as e:
            logger.error("Dead-lettering record for %s: %s", record.routing_target, e)
            self.dead_letters.put(
                DeadLetter(
                    routing_target=record.routing_target,
                    key=record.key,
                    value=record.value,
                    error_type=type(e).__name__,
                    reason=str(e),
                )
            )
            return None

    def apply(self, routing_target: str, intent: WriteIntent) -> ApplyResult:
        """Apply `intent` to the collection named by `routing_target`."""
        logger.debug(
            "Applying %s to %s with filter %s",
            intent.kind.value,
            routing_target,
            intent.match_filter.to_query(),
        )
        return self.store.apply(routing_target, intent)
