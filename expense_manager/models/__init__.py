"""
Data Models Package

This package contains all Pydantic models used in the Expense Manager.
All data flowing through the system must conform to these schemas.
"""

from expense_manager.models.transaction import (
    AMOUNT_QUANTUM,
    MAX_AMOUNT,
    Transaction,
    TransactionDraft,
    TransactionInput,
    TransactionType,
    check_denominations,
    quantize_amount,
)
from expense_manager.models.denominations import (
    COINS,
    DENOMINATIONS,
    NOTES,
    Denomination,
    DenominationKind,
    amount_from_denominations,
    denomination_label,
    has_denominations,
)
from expense_manager.models.summary import (
    DashboardSummary,
    MonthlySummary,
    SavingsSummary,
    TypeTotal,
)
from expense_manager.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from expense_manager.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Transaction models
    "AMOUNT_QUANTUM",
    "MAX_AMOUNT",
    "Transaction",
    "TransactionDraft",
    "TransactionInput",
    "TransactionType",
    "check_denominations",
    "quantize_amount",
    # Denominations
    "COINS",
    "DENOMINATIONS",
    "NOTES",
    "Denomination",
    "DenominationKind",
    "amount_from_denominations",
    "denomination_label",
    "has_denominations",
    # View results
    "DashboardSummary",
    "MonthlySummary",
    "SavingsSummary",
    "TypeTotal",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
