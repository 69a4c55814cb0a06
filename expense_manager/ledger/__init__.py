"""Ledger state and pure transition functions."""

from expense_manager.ledger.state import (
    ZERO,
    LedgerState,
    add_transaction,
    apply_balance_effect,
    build_transaction,
    find_transaction,
    next_transaction_id,
    remove_transaction,
    reverse_balance_effect,
)

__all__ = [
    "ZERO",
    "LedgerState",
    "add_transaction",
    "apply_balance_effect",
    "build_transaction",
    "find_transaction",
    "next_transaction_id",
    "remove_transaction",
    "reverse_balance_effect",
]
