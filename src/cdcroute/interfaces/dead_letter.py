"""Dead-letter queue interface.

Records the sink stage cannot reconcile (no business key can be established)
are never dropped silently: they are put on a dead-letter queue where an
operator can inspect them.
"""

import abc
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


class DeadLetterQueueError(Exception):
    """Base class for dead-letter queue errors."""


@dataclass(frozen=True, slots=True)
class DeadLetter:
    """A record that failed reconciliation, with the reason it failed.

    Notes:
      - `key` and `value` are kept as received (made JSON-safe by SQL adapters).
      - `failed_at` must be UTC tz-aware.
    """

    routing_target: str
    key: Any
    value: Any
    error_type: str
    reason: str
    failed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.failed_at.tzinfo is None or self.failed_at.utcoffset() is None:
            raise ValueError("failed_at must be tz-aware.")


class DeadLetterQueue(abc.ABC):
    """An abstract base class for a dead-letter queue."""

    @abc.abstractmethod
    def put(self, letter: DeadLetter) -> None:
        """Persist a dead letter.

        Raises:
            DeadLetterQueueError: If the letter could not be stored.
        """

    @abc.abstractmethod
    def read(self, limit: int | None = None) -> Iterable[DeadLetter]:
        """Yield dead letters in the order they were put.

        Args:
            limit: Maximum number of letters to return. If None, returns all.

        Raises:
            ValueError: if limit is not None and limit < 1.
        """
