"""
Core Data Models for Expense Manager

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Keep money exact (Decimal, three fractional digits)
3. Be serializable for the key-value store
4. Stay immutable once created

DESIGN DECISION: Transaction categories are a closed enum carrying their own
display metadata. Adding a category means adding a member and its metadata
in one place; there is no separate lookup table to keep in sync.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# Smallest unit in scope is 0.005, so three fractional digits are kept.
AMOUNT_QUANTUM = Decimal("0.001")

# Largest single amount. Leaves room for the running balance to grow well
# past it without exceeding the 28-digit decimal context.
MAX_AMOUNT = Decimal("1000000000000")


def quantize_amount(value: Decimal) -> Decimal:
    """
    Round a money value to three fractional digits.

    Raises:
        ValueError: If the value has too many digits to be rounded
    """
    try:
        return value.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount out of range: {value}")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Supported transaction categories.

    SAVING moves money into the savings balance, FROM_SAVING spends
    out of it. Every other member is a plain expense.
    """
    HOUSE = "house"
    GROCERIES = "groceries"
    PERSONAL = "personal"
    SAVING = "saving"
    FROM_SAVING = "from-saving"

    @property
    def display_name(self) -> str:
        """Human-readable category name."""
        return _TYPE_METADATA[self][0]

    @property
    def color(self) -> str:
        """Hex colour used when charting the category."""
        return _TYPE_METADATA[self][1]

    @property
    def affects_savings(self) -> bool:
        """Whether creating or deleting this type moves the savings balance."""
        return self in (TransactionType.SAVING, TransactionType.FROM_SAVING)

    @property
    def is_expense(self) -> bool:
        """Deposits into savings are not spending; everything else is."""
        return self is not TransactionType.SAVING


_TYPE_METADATA: dict[TransactionType, tuple[str, str]] = {
    TransactionType.HOUSE: ("House", "#ef4444"),
    TransactionType.GROCERIES: ("Groceries", "#10b981"),
    TransactionType.PERSONAL: ("Personal", "#3b82f6"),
    TransactionType.SAVING: ("Saving", "#f59e0b"),
    TransactionType.FROM_SAVING: ("From Saving", "#8b5cf6"),
}


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

def check_denominations(v: dict[Decimal, int]) -> dict[Decimal, int]:
    """Reject non-positive unit values and negative counts."""
    for value, count in v.items():
        if value <= 0:
            raise ValueError(f"Denomination value must be positive: {value}")
        if count < 0:
            raise ValueError(f"Denomination count must be non-negative: {value} -> {count}")
    return v


class Transaction(BaseModel):
    """
    A single recorded expense, deposit or withdrawal.

    CRITICAL: Transactions are never edited after creation.
    They are only appended to or removed from the store by id.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(
        ...,
        ge=0,
        description="Unique id, monotonic with creation order"
    )
    date: datetime = Field(
        ...,
        description="Creation timestamp"
    )
    type: TransactionType = Field(
        ...,
        description="Transaction category"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        le=MAX_AMOUNT,
        description="Amount in the base currency unit"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="Display text"
    )
    denominations: dict[Decimal, int] = Field(
        default_factory=dict,
        description="Optional breakdown: unit value -> count"
    )

    @field_validator('date')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken to be UTC so all dates compare."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator('amount')
    @classmethod
    def quantize(cls, v: Decimal) -> Decimal:
        """Keep exactly three fractional digits."""
        return quantize_amount(v)

    @field_validator('denominations')
    @classmethod
    def validate_denominations(cls, v: dict[Decimal, int]) -> dict[Decimal, int]:
        return check_denominations(v)


class TransactionInput(BaseModel):
    """
    Raw, unvalidated request to create a transaction.

    Fields are deliberately loose (amount may be a string, type a plain
    string) so that TransactionValidator can report every problem at once
    rather than failing on the first coercion error.
    """

    type: Any = None
    amount: Any = None
    description: Any = None
    denominations: Any = None


class TransactionDraft(BaseModel):
    """
    A validated request, ready to be stamped with an id and date.

    Only TransactionValidator.check() should build these from user input.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    type: TransactionType
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    description: str = Field(..., min_length=1)
    denominations: dict[Decimal, int] = Field(default_factory=dict)

    @field_validator('amount')
    @classmethod
    def quantize(cls, v: Decimal) -> Decimal:
        return quantize_amount(v)

    @field_validator('denominations')
    @classmethod
    def validate_denominations(cls, v: dict[Decimal, int]) -> dict[Decimal, int]:
        return check_denominations(v)
