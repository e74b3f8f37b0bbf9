"""Document store interface for CDCROUTE.

This module defines:
- The `ApplyResult` DTO returned after a write-intent is applied.
- The `DocumentStore` port (framework-free ABC) the sink stage writes through.
- A small, adapter-agnostic exception hierarchy.

Contract overview
-----------------
Apply:
- `Upsert` is a single atomic update-or-insert: if a document matches the
  filter its fields are set from the intent's document; otherwise a new
  document is inserted whose fields are the filter's equality clauses plus the
  intent's document, and the store assigns its `_id`. An existing `_id` is
  never overwritten.
- `Delete` removes at most one matching document. Zero matches is a no-op,
  not an error.
- Applying the same intent repeatedly converges to the same state.
- Errors:
  * `StoreUnavailableError`: transient connection/timeout problems; callers
    (the external writer) may retry.
  * `DocumentStoreError`: any other store failure.

Reads:
- `find(collection, match_filter)` returns the matching documents (including
  `_id`); an unknown collection yields an empty list.
"""

import abc
from dataclasses import dataclass
from typing import Any

from cdcroute.domain.write_intents import MatchFilter, WriteIntent

# --- Exceptions to standardize adapter behavior ---


class DocumentStoreError(Exception):
    """Base class for CDCROUTE document store errors."""


class StoreUnavailableError(DocumentStoreError):
    """Operational/timeout/connection errors; callers may retry."""


# --- Result DTO ---


@dataclass(frozen=True, slots=True)
class ApplyResult:
    """Outcome of applying one write-intent."""

    matched_count: int = 0
    modified_count: int = 0
    deleted_count: int = 0
    upserted_id: Any = None


# --- Document Store Interface ---


class DocumentStore(abc.ABC):
    """An abstract base class for a document store."""

    @abc.abstractmethod
    def apply(self, collection: str, intent: WriteIntent) -> ApplyResult:
        """Apply a write-intent to `collection` atomically.

        Args:
            collection: The routing target (collection name).
            intent: The `Upsert` or `Delete` to apply.

        Returns:
            An ApplyResult describing what the store did.

        Raises:
            StoreUnavailableError: For transient connection/timeout errors.
            DocumentStoreError: For any other store failure.
        """

    @abc.abstractmethod
    def find(self, collection: str, match_filter: MatchFilter) -> list[dict[str, Any]]:
        """Return the documents in `collection` matching `match_filter`."""
