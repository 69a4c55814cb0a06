"""Transaction request validation package."""

from expense_manager.validation.validator import (
    InsufficientFundsError,
    InvalidAmountError,
    InvalidDenominationsError,
    InvalidDescriptionError,
    InvalidTransactionTypeError,
    TransactionValidationError,
    TransactionValidator,
    parse_amount,
    parse_denominations,
    parse_description,
    parse_transaction_type,
)

__all__ = [
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidDenominationsError",
    "InvalidDescriptionError",
    "InvalidTransactionTypeError",
    "TransactionValidationError",
    "TransactionValidator",
    "parse_amount",
    "parse_denominations",
    "parse_description",
    "parse_transaction_type",
]
