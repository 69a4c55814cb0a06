"""
Ledger Storage over a Key-Value Store

Persisted layout (two keys, nothing else):
- transactions key: JSON array of {id, date, type, amount, description,
  denominations}, newest first. Amounts and denomination unit values are
  written as decimal strings so no precision is lost.
- savings key: the balance as a plain decimal string, e.g. "2.000".

Data written by the browser version of the app stored amounts and the balance
as JSON/JS numbers. Those still load; they are rounded to three
fractional digits on the way in.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from expense_manager.ledger.state import ZERO, LedgerState
from expense_manager.models.transaction import Transaction
from expense_manager.services.storage.interface import (
    CorruptDataError,
    KeyValueStoreInterface,
    LedgerStorageInterface,
)


_TRANSACTIONS_ADAPTER = TypeAdapter(list[Transaction])


class KeyValueLedgerStorage(LedgerStorageInterface):
    """Persists a LedgerState as two string entries."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        transactions_key: str = "expenses",
        savings_key: str = "savings",
    ):
        self._store = store
        self._transactions_key = transactions_key
        self._savings_key = savings_key

    @property
    def store(self) -> KeyValueStoreInterface:
        return self._store

    def load(self) -> LedgerState:
        transactions = self._decode_transactions(self._store.get(self._transactions_key))
        balance = self._decode_balance(self._store.get(self._savings_key))

        try:
            return LedgerState(transactions=tuple(transactions), savings_balance=balance)
        except (ValidationError, InvalidOperation) as e:
            raise CorruptDataError(f"Stored ledger state is invalid: {e}") from e

    def save(self, state: LedgerState) -> None:
        self._store.set_many({
            self._transactions_key: self.encode_transactions(state),
            self._savings_key: str(state.savings_balance),
        })

    @staticmethod
    def encode_transactions(state: LedgerState) -> str:
        return _TRANSACTIONS_ADAPTER.dump_json(list(state.transactions)).decode("utf-8")

    def _decode_transactions(self, raw: Optional[str]) -> list[Transaction]:
        if raw is None or not raw.strip():
            return []
        try:
            transactions = _TRANSACTIONS_ADAPTER.validate_json(raw)
        except ValidationError as e:
            raise CorruptDataError(
                f"Key '{self._transactions_key}' does not hold a valid transaction list: {e}"
            ) from e

        # Ids are the delete handle. A repeated id (possible in browser data
        # written within one millisecond) is rejected, not renumbered.
        seen: set[int] = set()
        for transaction in transactions:
            if transaction.id in seen:
                raise CorruptDataError(
                    f"Duplicate transaction id in store: {transaction.id}; "
                    "fix or remove one of the records to load this ledger"
                )
            seen.add(transaction.id)
        return transactions

    def _decode_balance(self, raw: Optional[str]) -> Decimal:
        if raw is None or not raw.strip():
            return ZERO
        try:
            balance = Decimal(raw.strip())
        except InvalidOperation as e:
            raise CorruptDataError(
                f"Key '{self._savings_key}' is not a number: {raw!r}"
            ) from e
        if not balance.is_finite() or balance < 0:
            raise CorruptDataError(
                f"Key '{self._savings_key}' must be a non-negative number: {raw!r}"
            )
        return balance
