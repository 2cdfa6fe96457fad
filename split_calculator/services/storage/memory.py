"""In-memory key-value store, used when no durable store is configured and in tests."""

from typing import Optional

from split_calculator.services.storage.interface import KeyValueStore


class InMemoryStore(KeyValueStore):
    """Dict-backed store; contents last as long as the object."""
    
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})
    
    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)
    
    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
    
    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
    
    def __contains__(self, key: str) -> bool:
        return key in self._items
