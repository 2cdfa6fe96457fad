"""
Storage Services Package

Provides the key-value store interface and its implementations:
a JSON file on disk for real sessions and an in-memory dict for tests.
"""

from split_calculator.services.storage.interface import (
    KeyValueStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from split_calculator.services.storage.json_file import JsonFileStore
from split_calculator.services.storage.memory import InMemoryStore

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
]
