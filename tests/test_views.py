"""Tests for the aggregation views."""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from expense_manager.ledger import LedgerState
from expense_manager.models import TransactionType
from expense_manager.queries import (
    SortKey,
    SortOrder,
    TransactionFilter,
    dashboard_summary,
    expense_total,
    filter_and_sort,
    largest_expense,
    monthly_total,
    overall_total,
    recent,
    savings_history,
    savings_summary,
    totals_by_type,
)

from tests.conftest import make_transaction


def _at(year, month, day):
    return datetime(year, month, day, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def transactions():
    """A small store, newest first."""
    return (
        make_transaction(6, TransactionType.PERSONAL, "4", "Cinema", _at(2025, 3, 14)),
        make_transaction(5, TransactionType.FROM_SAVING, "3", "Car repair", _at(2025, 3, 12)),
        make_transaction(4, TransactionType.SAVING, "20", "Added to savings", _at(2025, 3, 10)),
        make_transaction(3, TransactionType.GROCERIES, "12.5", "Weekly shop", _at(2025, 3, 5)),
        make_transaction(2, TransactionType.HOUSE, "100", "Rent", _at(2025, 3, 1)),
        make_transaction(1, TransactionType.GROCERIES, "0.5", "Bread", _at(2025, 2, 20)),
    )


class TestTotals:
    """Tests for the summed views."""

    def test_expense_total_excludes_deposits(self, transactions):
        """Test deposits into savings are not spending."""
        assert expense_total(transactions) == Decimal("120.000")
        assert overall_total(transactions) == Decimal("120.000")

    def test_overall_total_empty(self):
        """Test an empty store totals zero."""
        assert overall_total(()) == Decimal("0")

    def test_totals_by_type_first_appearance_order(self, transactions):
        """Test groups follow store order of first appearance."""
        groups = totals_by_type(transactions)
        assert [g.type for g in groups] == [
            TransactionType.PERSONAL,
            TransactionType.FROM_SAVING,
            TransactionType.SAVING,
            TransactionType.GROCERIES,
            TransactionType.HOUSE,
        ]
        groceries = groups[3]
        assert groceries.total == Decimal("13.000")
        assert groceries.count == 2
        assert groceries.display_name == "Groceries"

    def test_percentages(self, transactions):
        """Test shares are measured against total expenses."""
        groups = {g.type: g for g in totals_by_type(transactions)}
        assert groups[TransactionType.HOUSE].percentage == Decimal("100.000") / Decimal("120.000") * 100
        assert groups[TransactionType.SAVING].percentage == Decimal("20.000") / Decimal("120.000") * 100

        spending = sum(
            g.percentage for g in groups.values()
            if g.type is not TransactionType.SAVING
        )
        assert abs(spending - 100) < Decimal("0.000001")

    def test_percentages_with_no_expenses(self):
        """Test a store of only deposits reports zero shares."""
        groups = totals_by_type((make_transaction(1, TransactionType.SAVING, "5"),))
        assert len(groups) == 1
        assert groups[0].percentage == 0
        assert groups[0].total == Decimal("5.000")


class TestMonthlyTotal:
    """Tests for the per-month view."""

    def test_current_month_divides_by_days_elapsed(self, transactions):
        """Test the average uses today's day of month."""
        summary = monthly_total(transactions, 2025, 3, today=date(2025, 3, 15))
        assert summary.total == Decimal("119.500")
        assert summary.count == 4
        assert summary.average_per_day == Decimal("7.967")

    def test_past_month_divides_by_month_length(self, transactions):
        """Test a finished month uses its full length."""
        summary = monthly_total(transactions, 2025, 2, today=date(2025, 3, 15))
        assert summary.total == Decimal("0.500")
        assert summary.average_per_day == Decimal("0.018")

    def test_empty_month(self, transactions):
        """Test a month with nothing in it."""
        summary = monthly_total(transactions, 2024, 7, today=date(2025, 3, 15))
        assert summary.total == 0
        assert summary.count == 0
        assert summary.average_per_day == 0

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month(self, transactions, month):
        """Test out-of-range months are rejected."""
        with pytest.raises(ValueError):
            monthly_total(transactions, 2025, month)


class TestLargestAndRecent:
    """Tests for largest_expense and recent."""

    def test_largest_expense(self, transactions):
        """Test the biggest spend is found and deposits are ignored."""
        assert largest_expense(transactions).id == 2

    def test_largest_expense_tie_goes_to_newest(self):
        """Test ties resolve to the first in store order."""
        store = (
            make_transaction(2, TransactionType.HOUSE, "5"),
            make_transaction(1, TransactionType.PERSONAL, "5"),
        )
        assert largest_expense(store).id == 2

    def test_largest_expense_none(self):
        """Test no expenses yields None."""
        assert largest_expense(()) is None
        assert largest_expense((make_transaction(1, TransactionType.SAVING, "9"),)) is None

    def test_recent_shorter_store(self):
        """Test asking for more than exist returns them all."""
        store = tuple(make_transaction(i) for i in (3, 2, 1))
        assert [t.id for t in recent(store, 5)] == [3, 2, 1]

    def test_recent_limits(self, transactions):
        """Test the first n in store order."""
        assert [t.id for t in recent(transactions, 2)] == [6, 5]
        assert recent(transactions, 0) == []

    def test_recent_negative(self, transactions):
        """Test a negative count is rejected."""
        with pytest.raises(ValueError):
            recent(transactions, -1)


class TestFilterAndSort:
    """Tests for the list view."""

    def test_default_is_date_descending(self, transactions):
        """Test the default ordering is newest first."""
        result = filter_and_sort(transactions)
        assert [t.id for t in result] == [6, 5, 4, 3, 2, 1]

    def test_amount_ascending(self, transactions):
        """Test sorting by amount."""
        result = filter_and_sort(transactions, sort_key=SortKey.AMOUNT, order=SortOrder.ASC)
        assert [t.id for t in result] == [1, 5, 6, 3, 4, 2]

    def test_string_arguments(self, transactions):
        """Test plain strings are accepted for key and order."""
        result = filter_and_sort(transactions, sort_key="amount", order="desc")
        assert [t.id for t in result] == [2, 4, 3, 6, 5, 1]

    def test_type_sorts_by_display_name(self, transactions):
        """Test type ordering follows the human-readable names."""
        result = filter_and_sort(transactions, sort_key=SortKey.TYPE, order=SortOrder.ASC)
        assert [t.type.display_name for t in result] == [
            "From Saving", "Groceries", "Groceries", "House", "Personal", "Saving",
        ]

    def test_stable_in_both_directions(self):
        """Test equal keys keep store order whichever way we sort."""
        store = (
            make_transaction(3, TransactionType.HOUSE, "5", "c"),
            make_transaction(2, TransactionType.HOUSE, "5", "b"),
            make_transaction(1, TransactionType.HOUSE, "1", "a"),
        )
        asc = filter_and_sort(store, sort_key=SortKey.AMOUNT, order=SortOrder.ASC)
        desc = filter_and_sort(store, sort_key=SortKey.AMOUNT, order=SortOrder.DESC)
        assert [t.id for t in asc] == [1, 3, 2]
        assert [t.id for t in desc] == [3, 2, 1]

    def test_idempotent(self, transactions):
        """Test sorting an already sorted list changes nothing."""
        once = filter_and_sort(transactions, sort_key=SortKey.DESCRIPTION, order=SortOrder.ASC)
        twice = filter_and_sort(once, sort_key=SortKey.DESCRIPTION, order=SortOrder.ASC)
        assert once == twice

    def test_does_not_mutate_input(self, transactions):
        """Test the store tuple is untouched."""
        before = list(transactions)
        filter_and_sort(transactions, sort_key=SortKey.AMOUNT, order=SortOrder.ASC)
        assert list(transactions) == before

    def test_predicate(self, transactions):
        """Test an arbitrary predicate filters first."""
        result = filter_and_sort(transactions, predicate=lambda t: t.amount > 10)
        assert [t.id for t in result] == [4, 3, 2]

    def test_invalid_sort_key(self, transactions):
        """Test unknown keys are rejected."""
        with pytest.raises(ValueError):
            filter_and_sort(transactions, sort_key="colour")


class TestTransactionFilter:
    """Tests for the type/search filter."""

    def test_search_is_case_insensitive(self, transactions):
        """Test description search ignores case."""
        result = filter_and_sort(transactions, predicate=TransactionFilter(search="SHOP"))
        assert [t.id for t in result] == [3]

    def test_type_filter(self, transactions):
        """Test filtering to one type."""
        result = filter_and_sort(
            transactions,
            predicate=TransactionFilter(transaction_type="groceries"),
        )
        assert [t.id for t in result] == [3, 1]

    def test_type_and_search_combined(self, transactions):
        """Test both criteria must match."""
        f = TransactionFilter(transaction_type=TransactionType.GROCERIES, search="bread")
        assert [t.id for t in transactions if f(t)] == [1]

    def test_empty_filter_matches_everything(self, transactions):
        """Test the default filter lets everything through."""
        assert all(TransactionFilter().matches(t) for t in transactions)


class TestSavingsViews:
    """Tests for the savings history and summary."""

    def test_history(self, transactions):
        """Test only deposits and withdrawals, in store order."""
        assert [t.id for t in savings_history(transactions)] == [5, 4]
        assert [t.id for t in savings_history(transactions, limit=1)] == [5]

    def test_summary(self, transactions):
        """Test deposit and withdrawal totals."""
        summary = savings_summary(transactions, Decimal("17.000"))
        assert summary.balance == Decimal("17.000")
        assert summary.total_deposited == Decimal("20.000")
        assert summary.deposit_count == 1
        assert summary.total_withdrawn == Decimal("3.000")
        assert summary.withdrawal_count == 1


class TestDashboard:
    """Tests for the combined overview."""

    def test_dashboard_summary(self, transactions):
        """Test every section of the overview."""
        state = LedgerState(transactions=transactions, savings_balance=Decimal("17"))
        summary = dashboard_summary(state, today=date(2025, 3, 15), recent_limit=3)

        assert summary.savings_balance == Decimal("17.000")
        assert summary.this_month.total == Decimal("119.500")
        assert summary.overall_total == Decimal("120.000")
        assert summary.expense_count == 5
        assert [t.id for t in summary.recent] == [6, 5, 4]
        assert summary.largest_expense.id == 2
        assert len(summary.totals_by_type) == 5

    def test_dashboard_empty_store(self):
        """Test the overview of a fresh ledger."""
        summary = dashboard_summary(LedgerState(), today=date(2025, 3, 15))
        assert summary.overall_total == 0
        assert summary.recent == []
        assert summary.largest_expense is None
        assert summary.totals_by_type == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
