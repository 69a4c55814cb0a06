"""
Aggregation Views

DESIGN DECISION: Every view is a pure function of a transaction sequence
(newest first, as held by LedgerState). Views never cache and never
write; they are recomputed from the current snapshot whenever asked.

"Expenses" throughout means every transaction except deposits into
savings (type saving). Withdrawals from savings count as spending.
"""

import calendar
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from expense_manager.ledger.state import ZERO, LedgerState
from expense_manager.models.summary import (
    DashboardSummary,
    MonthlySummary,
    SavingsSummary,
    TypeTotal,
)
from expense_manager.models.transaction import (
    Transaction,
    TransactionType,
    quantize_amount,
)


Predicate = Callable[[Transaction], bool]


class SortKey(str, Enum):
    """Fields a transaction list can be sorted by."""
    DATE = "date"
    AMOUNT = "amount"
    TYPE = "type"
    DESCRIPTION = "description"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class TransactionFilter(BaseModel):
    """
    Type filter plus case-insensitive description search.

    transaction_type=None means all types. Instances are callable and
    can be passed straight to filter_and_sort().
    """
    model_config = ConfigDict(frozen=True)

    transaction_type: Optional[TransactionType] = None
    search: str = ""

    def matches(self, transaction: Transaction) -> bool:
        if self.transaction_type is not None and transaction.type is not self.transaction_type:
            return False
        return self.search.strip().lower() in transaction.description.lower()

    def __call__(self, transaction: Transaction) -> bool:
        return self.matches(transaction)


def _expenses(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if t.type.is_expense]


def _sum(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)


def expense_total(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of amounts, ignoring deposits into savings."""
    return _sum(_expenses(transactions))


def overall_total(transactions: Iterable[Transaction]) -> Decimal:
    """Total spent across the whole store."""
    return expense_total(transactions)


def totals_by_type(transactions: Sequence[Transaction]) -> list[TypeTotal]:
    """
    Group by type, in order of first appearance in the store.

    Each group's percentage is its share of total expenses. The saving
    group is reported too, measured against the same denominator.
    """
    groups: dict[TransactionType, list[Transaction]] = {}
    for transaction in transactions:
        groups.setdefault(transaction.type, []).append(transaction)

    denominator = expense_total(transactions)

    result = []
    for transaction_type, members in groups.items():
        total = _sum(members)
        if denominator > 0:
            percentage = total / denominator * 100
        else:
            percentage = Decimal("0")
        result.append(TypeTotal(
            type=transaction_type,
            total=total,
            count=len(members),
            percentage=percentage,
        ))
    return result


def monthly_total(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
    today: Optional[date] = None,
) -> MonthlySummary:
    """
    Spending within one calendar month (UTC).

    average_per_day divides by the days elapsed so far when the month is
    the current one, and by the length of the month otherwise.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    today = today or datetime.now(timezone.utc).date()
    in_month = [
        t for t in _expenses(transactions)
        if t.date.year == year and t.date.month == month
    ]
    total = _sum(in_month)

    if not in_month:
        average = ZERO
    else:
        if (year, month) == (today.year, today.month):
            days = today.day
        else:
            days = calendar.monthrange(year, month)[1]
        average = quantize_amount(total / days)

    return MonthlySummary(
        year=year,
        month=month,
        total=total,
        count=len(in_month),
        average_per_day=average,
    )


def largest_expense(transactions: Iterable[Transaction]) -> Optional[Transaction]:
    """Highest-amount expense; ties go to the first (newest) one."""
    largest = None
    for transaction in _expenses(transactions):
        if largest is None or transaction.amount > largest.amount:
            largest = transaction
    return largest


def recent(transactions: Sequence[Transaction], n: int) -> list[Transaction]:
    """First n transactions in store order (newest first)."""
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return list(transactions[:n])


def _sort_value(transaction: Transaction, sort_key: SortKey):
    if sort_key is SortKey.AMOUNT:
        return transaction.amount
    if sort_key is SortKey.TYPE:
        return transaction.type.display_name
    if sort_key is SortKey.DESCRIPTION:
        return transaction.description
    return transaction.date


def filter_and_sort(
    transactions: Iterable[Transaction],
    predicate: Optional[Predicate] = None,
    sort_key: SortKey = SortKey.DATE,
    order: SortOrder = SortOrder.DESC,
) -> list[Transaction]:
    """
    Filter then sort into a new list.

    The sort is stable in both directions: transactions with equal keys
    keep their store order.
    """
    sort_key = SortKey(sort_key)
    order = SortOrder(order)

    selected = [t for t in transactions if predicate is None or predicate(t)]
    return sorted(
        selected,
        key=lambda t: _sort_value(t, sort_key),
        reverse=order is SortOrder.DESC,
    )


def savings_history(
    transactions: Iterable[Transaction],
    limit: Optional[int] = None,
) -> list[Transaction]:
    """Deposits and withdrawals, in store order."""
    history = [t for t in transactions if t.type.affects_savings]
    if limit is not None:
        history = history[:limit]
    return history


def savings_summary(
    transactions: Iterable[Transaction],
    balance: Decimal,
) -> SavingsSummary:
    """Totals of deposits and withdrawals next to the running balance."""
    deposits = []
    withdrawals = []
    for transaction in transactions:
        if transaction.type is TransactionType.SAVING:
            deposits.append(transaction)
        elif transaction.type is TransactionType.FROM_SAVING:
            withdrawals.append(transaction)

    return SavingsSummary(
        balance=balance,
        total_deposited=_sum(deposits),
        deposit_count=len(deposits),
        total_withdrawn=_sum(withdrawals),
        withdrawal_count=len(withdrawals),
    )


def dashboard_summary(
    state: LedgerState,
    today: Optional[date] = None,
    recent_limit: int = 5,
) -> DashboardSummary:
    """Overview numbers for the current month and the whole store."""
    today = today or datetime.now(timezone.utc).date()
    transactions = state.transactions

    return DashboardSummary(
        savings_balance=state.savings_balance,
        this_month=monthly_total(transactions, today.year, today.month, today=today),
        overall_total=overall_total(transactions),
        expense_count=len(_expenses(transactions)),
        totals_by_type=totals_by_type(transactions),
        recent=recent(transactions, recent_limit),
        largest_expense=largest_expense(transactions),
    )
