"""
Result models for the aggregation views.

These are plain read-only snapshots; nothing here is persisted.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from expense_manager.models.transaction import Transaction, TransactionType


class TypeTotal(BaseModel):
    """Summed amount for one transaction type."""
    model_config = ConfigDict(frozen=True)

    type: TransactionType
    total: Decimal
    count: int = Field(ge=0)
    percentage: Decimal = Field(
        ...,
        description="Share of total expenses (saving excluded from the denominator)"
    )

    @property
    def display_name(self) -> str:
        return self.type.display_name


class MonthlySummary(BaseModel):
    """Spending within one calendar month (deposits to savings excluded)."""
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    total: Decimal
    count: int = Field(ge=0)
    average_per_day: Decimal


class SavingsSummary(BaseModel):
    """Deposits and withdrawals recorded against the savings balance."""
    model_config = ConfigDict(frozen=True)

    balance: Decimal
    total_deposited: Decimal
    deposit_count: int = Field(ge=0)
    total_withdrawn: Decimal
    withdrawal_count: int = Field(ge=0)


class DashboardSummary(BaseModel):
    """Everything the overview screen shows, computed in one pass."""
    model_config = ConfigDict(frozen=True)

    savings_balance: Decimal
    this_month: MonthlySummary
    overall_total: Decimal
    expense_count: int = Field(ge=0)
    totals_by_type: list[TypeTotal] = Field(default_factory=list)
    recent: list[Transaction] = Field(default_factory=list)
    largest_expense: Optional[Transaction] = None
