"""Concrete implementations of the DeadLetterQueue interface."""

from .memory import InMemoryDeadLetterQueue
from .sqlalchemy_queue import SqlAlchemyDeadLetterQueue

__all__ = ["InMemoryDeadLetterQueue", "SqlAlchemyDeadLetterQueue"]
