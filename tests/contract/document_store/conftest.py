"""Fixtures for DocumentStore contract tests."""

from collections.abc import Iterable

import pytest

from cdcroute.adapters.document_store import InMemoryDocumentStore
from cdcroute.adapters.id_generators import ObjectIdGenerator, ULIDGenerator
from cdcroute.interfaces.document_store import DocumentStore


@pytest.fixture(params=["memory-objectid", "memory-ulid"])
def document_store(request: pytest.FixtureRequest) -> Iterable[DocumentStore]:
    """Return a fresh, empty DocumentStore for the requested backend.

    The MongoDB adapter needs a live server and is covered by unit tests
    over a mocked driver instead.
    """
    match request.param:
        case "memory-objectid":
            yield InMemoryDocumentStore(ObjectIdGenerator())
        case "memory-ulid":
            yield InMemoryDocumentStore(ULIDGenerator())
        case _:
            raise ValueError(f"unknown document store type: {request.param}")
