"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the JSON file for another key-value backend later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

Two layers:
- KeyValueStoreInterface: an opaque string -> string store (get/set)
- LedgerStorageInterface: loads and saves a whole LedgerState
"""

from abc import ABC, abstractmethod
from typing import Mapping, Optional

from expense_manager.ledger.state import LedgerState


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for a string key-value store.

    Any backend (JSON file, in-memory, ...) must implement get and set.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            StorageError: If the write fails
        """
        pass

    def set_many(self, items: Mapping[str, str]) -> None:
        """
        Write several values.

        Backends that can write all keys in one step should override this.
        """
        for key, value in items.items():
            self.set(key, value)


class LedgerStorageInterface(ABC):
    """
    Abstract interface for persisting the ledger.

    save() is called after every mutation with the complete new state.
    """

    @abstractmethod
    def load(self) -> LedgerState:
        """
        Load the persisted state.

        Returns:
            The stored state, or an empty state if nothing was saved yet

        Raises:
            CorruptDataError: If persisted data cannot be decoded
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save(self, state: LedgerState) -> None:
        """
        Persist both the transaction store and the savings balance.

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptDataError(StorageError):
    """Persisted data exists but cannot be decoded."""
    pass
