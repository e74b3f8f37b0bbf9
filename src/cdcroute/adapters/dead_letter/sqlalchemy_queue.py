"""SQLAlchemy-backed DeadLetterQueue adapter.

Persists dead letters to the ``dead_letters`` table (see
`cdcroute.adapters.dead_letter.schema`). Each `put` commits in its own
transaction so a letter is durable as soon as the call returns. Keys and
values go into `JsonDocument` columns, which render datetimes, decimals and
bytes as strings.

Driver errors are mapped to `DeadLetterQueueError`.
"""

from collections.abc import Iterable

from sqlalchemy import Select, insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError

from cdcroute.interfaces.dead_letter import (
    DeadLetter,
    DeadLetterQueue,
    DeadLetterQueueError,
)

from .schema import dead_letters


class SqlAlchemyDeadLetterQueue(DeadLetterQueue):
    """SQLAlchemy-backed DeadLetterQueue.

    Args:
        engine: Engine bound to a database migrated to head.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def put(self, letter: DeadLetter) -> None:
        row = {
            "routing_target": letter.routing_target,
            "record_key": letter.key,
            "record_value": letter.value,
            "error_type": letter.error_type,
            "reason": letter.reason,
            "failed_at": letter.failed_at,
        }
        try:
            with self.engine.begin() as connection:
                connection.execute(insert(dead_letters).values(row))
        except DBAPIError as e:
            raise DeadLetterQueueError(str(e)) from e

    def read(self, limit: int | None = None) -> Iterable[DeadLetter]:
        if limit is not None and limit < 1:
            raise ValueError("limit cannot be <= 0")

        stmt: Select = select(dead_letters).order_by(dead_letters.c.id.asc())
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            with self.engine.connect() as connection:
                rows = connection.execute(stmt).mappings().all()
        except DBAPIError as e:
            raise DeadLetterQueueError(str(e)) from e

        return [
            DeadLetter(
                routing_target=row["routing_target"],
                key=row["record_key"],
                value=row["record_value"],
                error_type=row["error_type"],
                reason=row["reason"],
                failed_at=row["failed_at"],
            )
            for row in rows
        ]
