"""In-memory implementation of the DeadLetterQueue interface."""

from collections.abc import Iterable

from cdcroute.interfaces.dead_letter import DeadLetter, DeadLetterQueue


class InMemoryDeadLetterQueue(DeadLetterQueue):
    """In-memory DeadLetterQueue.

    Intended for tests and dry runs. Letters are lost when the instance is
    discarded.
    """

    def __init__(self) -> None:
        self._letters: list[DeadLetter] = []

    def put(self, letter: DeadLetter) -> None:
        self._letters.append(letter)

    def read(self, limit: int | None = None) -> Iterable[DeadLetter]:
        if limit is not None and limit < 1:
            raise ValueError("limit cannot be <= 0")
        return list(self._letters[:limit])

    def __len__(self) -> int:
        return len(self._letters)
