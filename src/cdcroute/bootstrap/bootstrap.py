"""Wire the source and sink stages with their adapters."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from cdcroute import config
from cdcroute.adapters.dead_letter import (
    InMemoryDeadLetterQueue,
    SqlAlchemyDeadLetterQueue,
)
from cdcroute.adapters.document_store import InMemoryDocumentStore, MongoDocumentStore
from cdcroute.infrastructure.db.engine import make_engine
from cdcroute.interfaces.dead_letter import DeadLetterQueue
from cdcroute.interfaces.document_store import DocumentStore
from cdcroute.service_layer.decoder import EnvelopeDecoder
from cdcroute.service_layer.normalizer import TypeNormalizer
from cdcroute.service_layer.reconciler import WriteIntentReconciler
from cdcroute.service_layer.routing import RoutingResolver
from cdcroute.service_layer.stages import SinkStage, SourceStage
from cdcroute.service_layer.transformer import PayloadTransformer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    """A class to hold the wired pipeline stages."""

    source_stage: SourceStage
    sink_stage: SinkStage
    dead_letter_url: str | None = None


def build_source_stage(
    settings: config.NormalizerSettings,
    *,
    routing_overrides: Mapping[str, str] | None = None,
    embed_business_key: bool = False,
) -> SourceStage:
    """Build a source stage; normalization is left out when disabled."""
    normalizer = TypeNormalizer.for_mode(settings.mode) if settings.enabled else None
    return SourceStage(
        decoder=EnvelopeDecoder(),
        transformer=PayloadTransformer(
            RoutingResolver(routing_overrides),
            embed_business_key=embed_business_key,
        ),
        normalizer=normalizer,
    )


def build_dead_letter_queue(db_url: str | None) -> DeadLetterQueue:
    """SQL-backed queue when a database URL is given, in-memory otherwise."""
    if db_url is None:
        logger.debug("No dead-letter database configured; using in-memory queue")
        return InMemoryDeadLetterQueue()
    return SqlAlchemyDeadLetterQueue(make_engine(db_url))


def build_sink_stage(
    settings: config.ReconcilerSettings,
    store: DocumentStore,
    dead_letters: DeadLetterQueue,
) -> SinkStage:
    """Build a sink stage over the given store and dead-letter queue."""
    reconciler = WriteIntentReconciler(
        key_layout=settings.key_layout, delete_mode=settings.delete_mode
    )
    return SinkStage(reconciler, store, dead_letters)


def bootstrap(
    *,
    normalizer_settings: config.NormalizerSettings | None = None,
    reconciler_settings: config.ReconcilerSettings | None = None,
    routing_overrides: Mapping[str, str] | None = None,
    embed_business_key: bool = False,
    apply: bool = False,
    database: str | None = None,
) -> AppContainer:
    """Build both stages, reading `CDCROUTE_*` settings not passed in.

    Args:
        normalizer_settings: Normalization settings; read from the environment
            when None.
        reconciler_settings: Reconciliation settings; read from the
            environment when None.
        routing_overrides: Explicit table → collection routes.
        embed_business_key: Copy record keys into values as ``_businessKey``.
        apply: Write to MongoDB at `CDCROUTE_MONGO_URL`; otherwise an
            in-memory document store is used.
        database: MongoDB database name; defaults to the URL's database.

    Raises:
        InvalidSettingError: If a setting holds an unrecognised value.
        MongoUrlNotSetError: If `apply` is set and no MongoDB URL is configured.
    """
    if normalizer_settings is None:
        normalizer_settings = config.load_normalizer_settings()
    if reconciler_settings is None:
        reconciler_settings = config.load_reconciler_settings()

    store: DocumentStore = (
        MongoDocumentStore.from_url(config.get_mongo_url(), database)
        if apply
        else InMemoryDocumentStore()
    )
    try:
        db_url: str | None = config.get_db_url()
    except config.DatabaseUrlNotSetError:
        db_url = None

    return AppContainer(
        source_stage=build_source_stage(
            normalizer_settings,
            routing_overrides=routing_overrides,
            embed_business_key=embed_business_key,
        ),
        sink_stage=build_sink_stage(
            reconciler_settings, store, build_dead_letter_queue(db_url)
        ),
        dead_letter_url=db_url,
    )
