"""SprintPilot Storage Layer - Key-value document stores (SQLAlchemy, in-memory) and the sprint repository."""

from .base import KeyValueStore, StorageAdapter
from .memory import InMemoryKeyValueStore
from .sql_store import SqlKeyValueStore
from .models import Base, DocumentModel

__all__ = [
    "StorageAdapter",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "SqlKeyValueStore",
    "Base",
    "DocumentModel",
]
