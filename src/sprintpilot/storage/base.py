from abc import ABC, abstractmethod
from typing import Any, Optional


class StorageAdapter(ABC):
    """Abstract base class for storage adapters."""

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the storage backend."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the connection."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the backend is reachable."""
        pass


class KeyValueStore(StorageAdapter):
    """
    Durable key-value persistence for JSON-compatible documents.

    The planning core never touches a store; services load inputs through it
    and save results back.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Insert or replace the value under key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove the key. Returns False if it was absent."""
        pass
