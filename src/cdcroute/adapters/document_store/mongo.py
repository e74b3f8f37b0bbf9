"""MongoDB-backed DocumentStore adapter.

Applies write-intents with pymongo:

- `Upsert` → ``update_one(filter, {"$set": document}, upsert=True)``; MongoDB
  assigns an ObjectId `_id` on insert and never changes it on update.
- `Delete` → ``delete_one(filter)``.

Driver errors are mapped to the DocumentStore exception hierarchy:
connection and timeout failures become `StoreUnavailableError`, anything else
raised by pymongo becomes `DocumentStoreError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure, PyMongoError

from cdcroute.domain.write_intents import Delete, MatchFilter, Upsert, WriteIntent
from cdcroute.interfaces.document_store import (
    ApplyResult,
    DocumentStore,
    DocumentStoreError,
    StoreUnavailableError,
)

if TYPE_CHECKING:
    from pymongo.database import Database


class MongoDocumentStore(DocumentStore):
    """DocumentStore over a pymongo `Database`.

    Args:
        database: The database whose collections are the routing targets.
    """

    def __init__(self, database: Database):
        self.database = database

    @classmethod
    def from_url(cls, url: str, database: str | None = None) -> MongoDocumentStore:
        """Connect to `url` and use `database` (or the URL's default database)."""
        client: MongoClient = MongoClient(url)
        db = client[database] if database else client.get_default_database()
        return cls(db)

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def apply(self, collection: str, intent: WriteIntent) -> ApplyResult:
        target = self.database[collection]
        try:
            match intent:
                case Upsert():
                    result = target.update_one(
                        intent.match_filter.to_query(),
                        intent.to_update(),
                        upsert=True,
                    )
                    return ApplyResult(
                        matched_count=result.matched_count,
                        modified_count=result.modified_count,
                        upserted_id=result.upserted_id,
                    )
                case Delete():
                    result = target.delete_one(intent.match_filter.to_query())
                    return ApplyResult(
                        matched_count=result.deleted_count,
                        deleted_count=result.deleted_count,
                    )
        except ConnectionFailure as e:
            raise StoreUnavailableError(str(e)) from e
        except PyMongoError as e:
            raise DocumentStoreError(str(e)) from e
        raise TypeError(f"unsupported write-intent {type(intent).__name__}")

    def find(self, collection: str, match_filter: MatchFilter) -> list[dict[str, Any]]:
        try:
            return list(self.database[collection].find(match_filter.to_query()))
        except ConnectionFailure as e:
            raise StoreUnavailableError(str(e)) from e
        except PyMongoError as e:
            raise DocumentStoreError(str(e)) from e
