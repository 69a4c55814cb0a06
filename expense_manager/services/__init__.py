"""Services package."""

from expense_manager.services.storage import (
    CorruptDataError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueLedgerStorage,
    KeyValueStoreInterface,
    LedgerStorageInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "CorruptDataError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueLedgerStorage",
    "KeyValueStoreInterface",
    "LedgerStorageInterface",
    "StorageError",
]
