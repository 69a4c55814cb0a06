"""
Shared fixtures for Expense Manager tests.

Nothing here touches the real home directory: storage is in-memory or
under pytest's tmp_path, and time comes from a controllable clock.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

import pytest

from expense_manager.config import get_settings
from expense_manager.models.transaction import Transaction, TransactionType
from expense_manager.orchestrator import ExpenseManager
from expense_manager.services.storage import (
    InMemoryKeyValueStore,
    KeyValueLedgerStorage,
)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_transaction(
    id: int,
    type: TransactionType = TransactionType.HOUSE,
    amount: str = "1.000",
    description: str = "Test",
    date: Optional[datetime] = None,
    denominations: Optional[dict] = None,
) -> Transaction:
    """Build a Transaction directly, bypassing validation of requests."""
    return Transaction(
        id=id,
        date=date or datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc),
        type=type,
        amount=Decimal(amount),
        description=description,
        denominations=denominations or {},
    )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def storage(store) -> KeyValueLedgerStorage:
    return KeyValueLedgerStorage(store)


@pytest.fixture
def manager(storage, clock) -> ExpenseManager:
    return ExpenseManager.load(storage, clock=clock)
