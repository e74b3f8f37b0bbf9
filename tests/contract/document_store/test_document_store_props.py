"""Hypothesis property tests for DocumentStore write-intents.

A `store_factory` fixture builds a fresh store per generated example so no
state bleeds between examples.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from cdcroute.adapters.document_store import InMemoryDocumentStore
from cdcroute.domain.write_intents import BusinessKey, Delete, MatchFilter, Upsert
from cdcroute.interfaces.document_store import DocumentStore

pytestmark = [pytest.mark.property]

# pylint: disable=redefined-outer-name

FIELD_VALUES = st.one_of(st.integers(), st.text(max_size=10), st.booleans())
DOCUMENTS = st.dictionaries(
    st.from_regex(r"[a-j][a-z]{0,7}", fullmatch=True), FIELD_VALUES, max_size=5
)
KEYS = st.dictionaries(
    st.from_regex(r"k[a-z]{0,4}", fullmatch=True),
    st.one_of(st.integers(), st.text(min_size=1, max_size=8)),
    min_size=1,
    max_size=3,
)


# store factory (fresh instance per example)
@pytest.fixture(scope="module")
def store_factory() -> Callable[[], DocumentStore]:
    """Return a factory producing fresh in-memory stores."""
    return InMemoryDocumentStore


# Keep small for CI, can be larger locally.
_PROPSET = settings(max_examples=50, deadline=None)


@_PROPSET
@given(key=KEYS, document=DOCUMENTS, repeats=st.integers(min_value=1, max_value=5))
def test_repeated_upserts_equal_single_upsert(store_factory, key, document, repeats):
    """Applying an upsert N times yields the state of applying it once."""
    match_filter = MatchFilter.for_key(BusinessKey.from_mapping(key))
    intent = Upsert(match_filter=match_filter, document=document)

    store = store_factory()
    store.apply("c", intent)
    (once,) = store.find("c", match_filter)
    for _ in range(repeats):
        store.apply("c", intent)
    assert store.find("c", match_filter) == [once]


@_PROPSET
@given(key=KEYS, first=DOCUMENTS, second=DOCUMENTS)
def test_identifier_survives_updates(store_factory, key, first, second):
    """The identifier assigned on insert survives any later upsert."""
    match_filter = MatchFilter.for_key(BusinessKey.from_mapping(key))
    store = store_factory()
    inserted = store.apply("c", Upsert(match_filter=match_filter, document=first))
    store.apply("c", Upsert(match_filter=match_filter, document=second))
    (document,) = store.find("c", match_filter)
    assert document["_id"] == inserted.upserted_id


@_PROPSET
@given(key=KEYS, deletes=st.integers(min_value=1, max_value=4))
def test_deletes_converge(store_factory, key, deletes):
    """Any number of deletes on an absent document are no-ops."""
    match_filter = MatchFilter.for_key(BusinessKey.from_mapping(key))
    store = store_factory()
    for _ in range(deletes):
        assert store.apply("c", Delete(match_filter=match_filter)).deleted_count == 0
