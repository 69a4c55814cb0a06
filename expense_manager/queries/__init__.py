"""Aggregation views over the transaction store."""

from expense_manager.queries.views import (
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

__all__ = [
    "SortKey",
    "SortOrder",
    "TransactionFilter",
    "dashboard_summary",
    "expense_total",
    "filter_and_sort",
    "largest_expense",
    "monthly_total",
    "overall_total",
    "recent",
    "savings_history",
    "savings_summary",
    "totals_by_type",
]
