"""
Ledger State and Transitions

DESIGN DECISION: The transaction store and the savings balance live in one
immutable LedgerState value. Every mutation is a pure function that takes a
state and returns a new one; nothing here touches storage or logging.
The caller (ExpenseManager) decides when to persist.

SAVINGS RULES:
- create saving        -> balance + amount
- create from-saving   -> max(0, balance - amount)
- delete saving        -> max(0, balance - amount)
- delete from-saving   -> balance + amount
- any other type       -> no effect

The balance is running state, not recomputed from history. Because both
subtractions clamp at zero, deleting a transaction does not always restore
the balance it was created against.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expense_manager.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionType,
    quantize_amount,
)
from expense_manager.validation.validator import InsufficientFundsError


ZERO = Decimal("0.000")


class LedgerState(BaseModel):
    """
    Snapshot of everything the ledger owns.

    transactions are ordered newest first.
    """
    model_config = ConfigDict(frozen=True)

    transactions: tuple[Transaction, ...] = Field(default_factory=tuple)
    savings_balance: Decimal = Field(default=ZERO, ge=0)

    @field_validator('savings_balance')
    @classmethod
    def quantize(cls, v: Decimal) -> Decimal:
        return quantize_amount(v)


def apply_balance_effect(balance: Decimal, transaction: Transaction) -> Decimal:
    """Balance after creating `transaction`."""
    if transaction.type is TransactionType.SAVING:
        return balance + transaction.amount
    if transaction.type is TransactionType.FROM_SAVING:
        return max(ZERO, balance - transaction.amount)
    return balance


def reverse_balance_effect(balance: Decimal, transaction: Transaction) -> Decimal:
    """Balance after deleting `transaction`."""
    if transaction.type is TransactionType.SAVING:
        return max(ZERO, balance - transaction.amount)
    if transaction.type is TransactionType.FROM_SAVING:
        return balance + transaction.amount
    return balance


def next_transaction_id(transactions: tuple[Transaction, ...], now: datetime) -> int:
    """
    Millisecond timestamp of `now`, bumped past the largest existing id.

    Two transactions created in the same millisecond (or after the clock
    went backwards) still get distinct, increasing ids.
    """
    candidate = int(now.timestamp() * 1000)
    if transactions:
        candidate = max(candidate, max(t.id for t in transactions) + 1)
    return candidate


def build_transaction(
    state: LedgerState,
    draft: TransactionDraft,
    now: datetime,
) -> Transaction:
    """Stamp a validated draft with its id and creation date."""
    return Transaction(
        id=next_transaction_id(state.transactions, now),
        date=now,
        type=draft.type,
        amount=draft.amount,
        description=draft.description,
        denominations=dict(draft.denominations),
    )


def add_transaction(state: LedgerState, transaction: Transaction) -> LedgerState:
    """
    Prepend a transaction and apply its savings effect.

    Raises:
        InsufficientFundsError: A from-saving amount exceeds the balance
    """
    if (
        transaction.type is TransactionType.FROM_SAVING
        and transaction.amount > state.savings_balance
    ):
        raise InsufficientFundsError(transaction.amount, state.savings_balance)

    return LedgerState(
        transactions=(transaction,) + state.transactions,
        savings_balance=apply_balance_effect(state.savings_balance, transaction),
    )


def find_transaction(state: LedgerState, transaction_id: int) -> Optional[Transaction]:
    return next((t for t in state.transactions if t.id == transaction_id), None)


def remove_transaction(
    state: LedgerState,
    transaction_id: int,
) -> tuple[LedgerState, Optional[Transaction]]:
    """
    Remove a transaction by id and reverse its savings effect.

    Unknown ids are not an error: the same state is returned with None.
    """
    transaction = find_transaction(state, transaction_id)
    if transaction is None:
        return state, None

    new_state = LedgerState(
        transactions=tuple(t for t in state.transactions if t.id != transaction_id),
        savings_balance=reverse_balance_effect(state.savings_balance, transaction),
    )
    return new_state, transaction
