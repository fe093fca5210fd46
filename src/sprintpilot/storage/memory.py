import copy
from typing import Any, Dict, Optional

from .base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store. Values are deep-copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def connect(self) -> None:
        pass

    def close(self) -> None:
        pass

    def health_check(self) -> bool:
        return True

    def load(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    def save(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        return True
