"""
Abstract Storage Interface

The calculator persists a single named entry: the JSON text of the saved
split ratios. The interface is modeled on a browser's localStorage - string
keys, string values, get/set/remove - and nothing more.

Implementations raise StorageError for any read or write failure. Callers
decide whether a failure is fatal (for the registry it never is).
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for a durable string key-value store.
    """
    
    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under `key`.
        
        Returns:
            The stored text, or None if the key is absent
            
        Raises:
            StorageError: If the store cannot be read
        """
        pass
    
    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store `value` under `key`, replacing any previous value.
        
        Raises:
            StorageError: If the write fails
        """
        pass
    
    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Delete `key`. Removing an absent key is not an error.
        
        Raises:
            StorageError: If the store cannot be modified
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The store could not be read."""
    pass


class StorageWriteError(StorageError):
    """The store could not be written."""
    pass
