"""ID generators for store-assigned document identifiers."""

import threading

from bson import ObjectId
from ulid import monotonic

from cdcroute.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods


class ObjectIdGenerator(IdGenerator):
    """MongoDB-style ObjectId generator.

    Produces the same kind of identifier MongoDB assigns on insert, as a
    24-character hex string.
    """

    def new_id(self) -> str:
        """Generate a new ObjectId."""
        return str(ObjectId())


class ULIDGenerator(IdGenerator):
    """Thread-safe monotonic ULID generator.

    ULIDs are unique, lexicographically sortable identifiers, so documents
    sort in insertion order by `_id`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Generate a new ULID (serialized across threads)."""
        with self._lock:
            return str(monotonic.new())


class SequentialIdGenerator(IdGenerator):
    """Zero-padded counter, for deterministic tests and demos."""

    def __init__(self, width: int = 24) -> None:
        self._lock = threading.Lock()
        self._counter = 0
        self._width = width

    def new_id(self) -> str:
        """Generate the next identifier."""
        with self._lock:
            self._counter += 1
            return f"{self._counter:0{self._width}d}"
