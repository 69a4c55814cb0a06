"""
Activity Models for Expense Manager

Every state change and every rejected request produces an ActivityEvent,
which the ActivityLogger writes to the structured log.

DESIGN DECISION: Activity events are log records only. They are never
written to the key-value store; this is not an audit ledger.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Mutations
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    SAVINGS_DEPOSITED = "savings_deposited"

    # Rejections
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_SAVED = "state_saved"
    STORAGE_ERROR = "storage_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivityEvent(BaseModel):
    """A single activity event."""

    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: ActivityEventType = Field(
        ...,
        description="Type of event"
    )
    severity: ActivitySeverity = Field(
        default=ActivitySeverity.INFO,
        description="Event severity"
    )

    # Which transaction, if any, the event is about
    transaction_id: Optional[int] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "transaction_id": self.transaction_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.transaction_created(txn, balance)
        event = ActivityEventBuilder.validation_failed(issues)
    """

    @staticmethod
    def transaction_created(
        transaction_id: int,
        transaction_type: str,
        amount: Decimal,
        savings_balance: Decimal,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_CREATED,
            transaction_id=transaction_id,
            description=f"Transaction created: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": str(amount),
                "savings_balance": str(savings_balance),
            },
        )

    @staticmethod
    def savings_deposited(
        transaction_id: int,
        amount: Decimal,
        savings_balance: Decimal,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SAVINGS_DEPOSITED,
            transaction_id=transaction_id,
            description=f"Deposited {amount} to savings",
            details={
                "amount": str(amount),
                "savings_balance": str(savings_balance),
            },
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: int,
        transaction_type: str,
        amount: Decimal,
        savings_balance: Decimal,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_DELETED,
            transaction_id=transaction_id,
            description=f"Transaction deleted: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": str(amount),
                "savings_balance": str(savings_balance),
            },
        )

    @staticmethod
    def transaction_not_found(transaction_id: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_NOT_FOUND,
            severity=ActivitySeverity.DEBUG,
            transaction_id=transaction_id,
            description="Delete ignored: no transaction with this id",
        )

    @staticmethod
    def validation_failed(issues: list[dict]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.VALIDATION_FAILED,
            severity=ActivitySeverity.WARNING,
            description=f"Validation failed with {len(issues)} issues",
            details={
                "issues": issues,
            },
        )

    @staticmethod
    def state_loaded(transaction_count: int, savings_balance: Decimal) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STATE_LOADED,
            description=f"Loaded {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "savings_balance": str(savings_balance),
            },
        )

    @staticmethod
    def state_saved(transaction_count: int, savings_balance: Decimal) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STATE_SAVED,
            severity=ActivitySeverity.DEBUG,
            description=f"Saved {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "savings_balance": str(savings_balance),
            },
        )

    @staticmethod
    def storage_error(operation: str, error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_ERROR,
            severity=ActivitySeverity.ERROR,
            description=f"Storage {operation} failed",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )
