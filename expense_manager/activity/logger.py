"""
Activity Logger

DESIGN DECISION: Every mutation and every rejected request is logged as a
structured event. This provides:
1. Traceability of how the savings balance got to its current value
2. Debugging capability when stored data looks wrong

Events go to the local structured log only. Nothing is written to the
key-value store, so logging can never change what is persisted.
"""

import logging
from decimal import Decimal

import structlog

from expense_manager.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivitySeverity,
)
from expense_manager.models.transaction import Transaction


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger("expense_manager").setLevel(level.upper())


class ActivityLogger:
    """Writes ActivityEvents to the structured log."""

    def __init__(self, logger_name: str = "expense_manager.activity"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: ActivityEvent) -> ActivityEvent:
        """Log an event at its own severity and return it."""
        log_dict = event.to_log_dict()

        if event.severity is ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity is ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        elif event.severity is ActivitySeverity.DEBUG:
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

        return event

    def log_transaction_created(
        self,
        transaction: Transaction,
        savings_balance: Decimal,
    ) -> ActivityEvent:
        """Log a new transaction and the balance after it."""
        return self.log(ActivityEventBuilder.transaction_created(
            transaction_id=transaction.id,
            transaction_type=transaction.type.value,
            amount=transaction.amount,
            savings_balance=savings_balance,
        ))

    def log_savings_deposited(
        self,
        transaction: Transaction,
        savings_balance: Decimal,
    ) -> ActivityEvent:
        return self.log(ActivityEventBuilder.savings_deposited(
            transaction_id=transaction.id,
            amount=transaction.amount,
            savings_balance=savings_balance,
        ))

    def log_transaction_deleted(
        self,
        transaction: Transaction,
        savings_balance: Decimal,
    ) -> ActivityEvent:
        return self.log(ActivityEventBuilder.transaction_deleted(
            transaction_id=transaction.id,
            transaction_type=transaction.type.value,
            amount=transaction.amount,
            savings_balance=savings_balance,
        ))

    def log_transaction_not_found(self, transaction_id: int) -> ActivityEvent:
        return self.log(ActivityEventBuilder.transaction_not_found(transaction_id))

    def log_validation_failed(self, issues: list[dict]) -> ActivityEvent:
        return self.log(ActivityEventBuilder.validation_failed(issues))

    def log_state_loaded(self, transaction_count: int, savings_balance: Decimal) -> ActivityEvent:
        return self.log(ActivityEventBuilder.state_loaded(transaction_count, savings_balance))

    def log_state_saved(self, transaction_count: int, savings_balance: Decimal) -> ActivityEvent:
        return self.log(ActivityEventBuilder.state_saved(transaction_count, savings_balance))

    def log_storage_error(self, operation: str, error_message: str) -> ActivityEvent:
        """Log a failed load or save."""
        return self.log(ActivityEventBuilder.storage_error(operation, error_message))
