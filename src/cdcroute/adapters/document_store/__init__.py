"""Concrete implementations of the DocumentStore interface."""

from .memory import InMemoryDocumentStore
from .mongo import MongoDocumentStore

__all__ = ["InMemoryDocumentStore", "MongoDocumentStore"]
