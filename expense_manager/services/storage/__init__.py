"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
The ledger is persisted as two entries in a string key-value store; the
default backend is a JSON file, with an in-memory store for tests.
"""

from expense_manager.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
    LedgerStorageInterface,
    StorageError,
)
from expense_manager.services.storage.key_value import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from expense_manager.services.storage.ledger_storage import KeyValueLedgerStorage

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    "LedgerStorageInterface",
    # Exceptions
    "CorruptDataError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueLedgerStorage",
]
