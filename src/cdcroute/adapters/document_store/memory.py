"""In memory document store implementation.

Collections are dicts of documents kept in insertion order and lost when the
instance is discarded. Upsert and delete follow MongoDB's ``update_one(...,
upsert=True)`` and ``delete_one`` semantics closely enough for the sink stage:

- on an upsert that matches nothing, the new document is seeded from the
  filter's equality clauses (dotted paths become sub-documents), then the
  intent's fields are set and an `_id` is assigned;
- on an upsert that matches, only the intent's fields are set; `_id` is kept;
- a delete removes the first matching document, if any.

This implementation passes all contract tests for the DocumentStore interface.
"""

import copy
from typing import Any

from cdcroute.adapters.id_generators import ObjectIdGenerator
from cdcroute.domain.write_intents import (
    STORE_ID_FIELD,
    Delete,
    MatchFilter,
    Upsert,
    WriteIntent,
)
from cdcroute.interfaces.document_store import ApplyResult, DocumentStore
from cdcroute.interfaces.id_generator import IdGenerator

_MISSING = object()


class InMemoryDocumentStore(DocumentStore):
    """In-memory DocumentStore for testing and non-durable use cases.

    Args:
        id_generator: Assigns `_id` to inserted documents. Defaults to
            ObjectId-style identifiers.
    """

    def __init__(self, id_generator: IdGenerator | None = None) -> None:
        self._collections: dict[str, list[dict[str, Any]]] = {}
        self._id_generator = id_generator or ObjectIdGenerator()

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def apply(self, collection: str, intent: WriteIntent) -> ApplyResult:
        documents = self._collections.setdefault(collection, [])
        match intent:
            case Upsert():
                return self._upsert(documents, intent)
            case Delete():
                return self._delete(documents, intent)
        raise TypeError(f"unsupported write-intent {type(intent).__name__}")

    def find(self, collection: str, match_filter: MatchFilter) -> list[dict[str, Any]]:
        return [
            copy.deepcopy(document)
            for document in self._collections.get(collection, [])
            if _matches(document, match_filter)
        ]

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _upsert(self, documents: list[dict[str, Any]], intent: Upsert) -> ApplyResult:
        fields = copy.deepcopy(dict(intent.document))
        for document in documents:
            if _matches(document, intent.match_filter):
                modified = any(
                    document.get(name, _MISSING) != value
                    for name, value in fields.items()
                )
                document.update(fields)
                return ApplyResult(matched_count=1, modified_count=int(modified))

        new_document: dict[str, Any] = {}
        for path, value in intent.match_filter.clauses:
            _set_path(new_document, path, copy.deepcopy(value))
        new_document.update(fields)
        new_document[STORE_ID_FIELD] = self._id_generator.new_id()
        documents.append(new_document)
        return ApplyResult(upserted_id=new_document[STORE_ID_FIELD])

    @staticmethod
    def _delete(documents: list[dict[str, Any]], intent: Delete) -> ApplyResult:
        for index, document in enumerate(documents):
            if _matches(document, intent.match_filter):
                del documents[index]
                return ApplyResult(matched_count=1, deleted_count=1)
        return ApplyResult()


def _matches(document: dict[str, Any], match_filter: MatchFilter) -> bool:
    """True if every clause of the filter equals the document's value at its path."""
    return all(
        _get_path(document, path) == value for path, value in match_filter.clauses
    )


def _get_path(document: dict[str, Any], path: str) -> Any:
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _set_path(document: dict[str, Any], path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    current = document
    for part in parents:
        current = current.setdefault(part, {})
    current[leaf] = value
