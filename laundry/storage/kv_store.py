from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional


class KeyValueStore(ABC):
    """
    Abstract base class for a string key-value store.

    Mirrors the contract of browser ``localStorage``: keys and values are
    plain strings, a missing key reads as ``None``.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key. Removing an absent key is a no-op."""
        pass

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over the stored keys."""
        pass


class MemoryKeyValueStore(KeyValueStore):
    """
    Process-local store. Each instance is isolated, which makes it the
    natural choice for tests and throwaway runs.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._items))
