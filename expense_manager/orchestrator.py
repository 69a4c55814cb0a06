"""
Main Orchestrator for Expense Manager

This module ties together validation, the pure ledger transitions,
persistence and activity logging.

Flow for every mutation:
1. Validate the request against the current state
2. Compute the new state with a pure transition
3. Persist the new state
4. Only then replace the in-memory state, and log

DESIGN DECISION: If any of steps 1-3 fails, the in-memory state is left
exactly as it was and the error propagates to the caller. There is never
a partial update (transaction stored but balance not, or memory ahead of
storage).
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

from expense_manager.activity import ActivityLogger, configure_logging
from expense_manager.config import AppSettings, Settings, get_settings
from expense_manager.ledger import (
    LedgerState,
    add_transaction,
    build_transaction,
    remove_transaction,
)
from expense_manager.models.denominations import denomination_label
from expense_manager.models.summary import DashboardSummary, SavingsSummary
from expense_manager.models.transaction import (
    Transaction,
    TransactionInput,
    TransactionType,
)
from expense_manager.queries import (
    dashboard_summary,
    recent,
    savings_history,
    savings_summary,
)
from expense_manager.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueLedgerStorage,
    LedgerStorageInterface,
    StorageError,
)
from expense_manager.validation import (
    TransactionValidationError,
    TransactionValidator,
)


DEPOSIT_DESCRIPTION = "Added to savings"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpenseManager:
    """
    Owns the live ledger state for one session.

    Reads go straight to the current LedgerState; writes go through
    validate -> transition -> persist -> commit. View helpers apply the
    configured list limits and currency labels.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        state: Optional[LedgerState] = None,
        validator: Optional[TransactionValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._storage = storage
        self._state = state if state is not None else LedgerState()
        self._validator = validator or TransactionValidator()
        self._activity_logger = activity_logger or ActivityLogger()
        self._clock = clock or _utcnow
        self._app_settings = app_settings or get_settings().app

    @classmethod
    def load(
        cls,
        storage: LedgerStorageInterface,
        validator: Optional[TransactionValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        app_settings: Optional[AppSettings] = None,
    ) -> "ExpenseManager":
        """
        Build a manager from whatever the storage currently holds.

        Raises:
            StorageError: If the stored state cannot be read or decoded
        """
        activity_logger = activity_logger or ActivityLogger()
        try:
            state = storage.load()
        except StorageError as e:
            activity_logger.log_storage_error("load", str(e))
            raise

        activity_logger.log_state_loaded(len(state.transactions), state.savings_balance)
        return cls(
            storage,
            state=state,
            validator=validator,
            activity_logger=activity_logger,
            clock=clock,
            app_settings=app_settings,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._state.transactions

    @property
    def savings_balance(self) -> Decimal:
        return self._state.savings_balance

    @property
    def app_settings(self) -> AppSettings:
        return self._app_settings

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def recent_transactions(self) -> list[Transaction]:
        """The newest transactions, up to the configured recent_limit."""
        return recent(self.transactions, self._app_settings.recent_limit)

    def savings_history(self) -> list[Transaction]:
        """Deposits and withdrawals, up to the configured savings_history_limit."""
        return savings_history(
            self.transactions, limit=self._app_settings.savings_history_limit
        )

    def savings_summary(self) -> SavingsSummary:
        return savings_summary(self.transactions, self.savings_balance)

    def dashboard(self, today: Optional[date] = None) -> DashboardSummary:
        """Overview of the current state, using the configured recent_limit."""
        return dashboard_summary(
            self._state,
            today=today,
            recent_limit=self._app_settings.recent_limit,
        )

    def denomination_label(self, value: Decimal) -> str:
        """Label a note or coin value in the configured currency."""
        return denomination_label(
            value,
            currency_code=self._app_settings.currency_code,
            sub_unit_name=self._app_settings.sub_unit_name,
            sub_unit_scale=self._app_settings.sub_unit_scale,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_transaction(
        self,
        transaction_type: Any,
        amount: Any,
        description: Any,
        denominations: Optional[Mapping[Any, Any]] = None,
    ) -> Transaction:
        """
        Record a new transaction.

        Returns:
            The created transaction (id and date assigned)

        Raises:
            InvalidTransactionTypeError: Unknown type
            InvalidAmountError: Amount missing, non-numeric or not positive
            InvalidDescriptionError: Description blank
            InvalidDenominationsError: Malformed breakdown
            InsufficientFundsError: from-saving amount exceeds the balance
            StorageError: The new state could not be persisted
        """
        request = TransactionInput(
            type=transaction_type,
            amount=amount,
            description=description,
            denominations=denominations,
        )
        transaction = self._create(request)
        self._activity_logger.log_transaction_created(transaction, self.savings_balance)
        return transaction

    def deposit_to_savings(
        self,
        amount: Any,
        denominations: Optional[Mapping[Any, Any]] = None,
    ) -> Transaction:
        """
        Move money into savings, recorded as a saving transaction.

        Raises:
            InvalidAmountError: Amount missing, non-numeric or not positive
            StorageError: The new state could not be persisted
        """
        request = TransactionInput(
            type=TransactionType.SAVING,
            amount=amount,
            description=DEPOSIT_DESCRIPTION,
            denominations=denominations,
        )
        transaction = self._create(request)
        self._activity_logger.log_savings_deposited(transaction, self.savings_balance)
        return transaction

    def delete_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """
        Remove a transaction and reverse its savings effect.

        Deleting an unknown id is a no-op, not an error.

        Returns:
            The removed transaction, or None if no such id existed
        """
        new_state, removed = remove_transaction(self._state, transaction_id)
        if removed is None:
            self._activity_logger.log_transaction_not_found(transaction_id)
            return None

        self._commit(new_state)
        self._activity_logger.log_transaction_deleted(removed, self.savings_balance)
        return removed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _create(self, request: TransactionInput) -> Transaction:
        try:
            draft = self._validator.check(request, self._state.savings_balance)
        except TransactionValidationError:
            result = self._validator.validate(request, self._state.savings_balance)
            self._activity_logger.log_validation_failed(
                [issue.model_dump() for issue in result.issues]
            )
            raise

        transaction = build_transaction(self._state, draft, self._clock())
        new_state = add_transaction(self._state, transaction)
        self._commit(new_state)
        return transaction

    def _commit(self, new_state: LedgerState) -> None:
        """Persist first; swap in-memory state only if that succeeded."""
        try:
            self._storage.save(new_state)
        except StorageError as e:
            self._activity_logger.log_storage_error("save", str(e))
            raise

        self._state = new_state
        self._activity_logger.log_state_saved(
            len(new_state.transactions), new_state.savings_balance
        )


def create_storage(settings: Optional[Settings] = None) -> KeyValueLedgerStorage:
    """Build the ledger storage described by the storage settings."""
    settings = settings or get_settings()
    storage_settings = settings.storage

    if storage_settings.backend == "memory":
        store = InMemoryKeyValueStore()
    else:
        store = JsonFileKeyValueStore(storage_settings.data_path)

    return KeyValueLedgerStorage(
        store,
        transactions_key=storage_settings.transactions_key,
        savings_key=storage_settings.savings_key,
    )


def create_expense_manager(
    settings: Optional[Settings] = None,
    storage: Optional[LedgerStorageInterface] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ExpenseManager:
    """
    Factory function to create a ready-to-use manager.

    Args:
        settings: Settings to use. Defaults to get_settings().
        storage: Storage to load from. Defaults to the configured backend.
        clock: Source of "now" for new transactions.

    Returns:
        An ExpenseManager holding the persisted state
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    storage = storage or create_storage(settings)
    return ExpenseManager.load(storage, clock=clock, app_settings=settings.app)
