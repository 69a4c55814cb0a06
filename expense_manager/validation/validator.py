"""
Transaction Request Validation

DESIGN DECISION: Validation happens before any state transition.

CHECKS:
- Type is one of the known categories
- Amount is present, numeric and positive (after rounding to 0.001)
- Description is non-blank
- Denomination breakdown (if any) has positive units and non-negative counts
- A from-saving request does not exceed the current savings balance

validate() reports every issue for display; check() raises the first one
as a typed exception. Either way nothing is mutated here.

IMPORTANT: Validation NEVER silently fixes issues. Rounding an amount to
three fractional digits is normalisation, not correction: an amount that
rounds to zero is rejected.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import TypeAdapter

from expense_manager.models.transaction import (
    MAX_AMOUNT,
    TransactionDraft,
    TransactionInput,
    TransactionType,
    check_denominations,
    quantize_amount,
)
from expense_manager.models.validation import ValidationIssue, ValidationResult


class TransactionValidationError(ValueError):
    """Base exception for rejected transaction requests."""

    issue_type = "invalid"

    def __init__(self, message: str, field: str, issue_type: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        if issue_type:
            self.issue_type = issue_type

    def to_issue(self) -> ValidationIssue:
        return ValidationIssue(
            field=self.field,
            issue_type=self.issue_type,
            message=self.message,
            severity="error",
        )


class InvalidAmountError(TransactionValidationError):
    """Amount missing, non-numeric, or not positive."""

    def __init__(self, message: str, issue_type: str = "invalid_value"):
        super().__init__(message, field="amount", issue_type=issue_type)


class InvalidDescriptionError(TransactionValidationError):
    """Description missing or blank."""

    def __init__(self, message: str = "Description is required"):
        super().__init__(message, field="description", issue_type="missing")


class InvalidTransactionTypeError(TransactionValidationError):
    """Type is not one of the known categories."""

    def __init__(self, value: Any):
        allowed = ", ".join(t.value for t in TransactionType)
        super().__init__(
            f"Unknown transaction type: {value!r}. Allowed: {allowed}",
            field="type",
            issue_type="unknown_type",
        )
        self.value = value


class InvalidDenominationsError(TransactionValidationError):
    """Denomination breakdown is malformed."""

    def __init__(self, message: str):
        super().__init__(message, field="denominations", issue_type="invalid_value")


class InsufficientFundsError(TransactionValidationError):
    """A from-saving amount exceeds the current savings balance."""

    def __init__(self, amount: Decimal, available: Decimal):
        super().__init__(
            f"Insufficient savings: requested {amount}, available {available}",
            field="amount",
            issue_type="insufficient_funds",
        )
        self.amount = amount
        self.available = available


_DENOMINATIONS_ADAPTER = TypeAdapter(dict[Decimal, int])


def parse_amount(value: Any) -> Decimal:
    """
    Convert a user-supplied amount to a positive Decimal with three
    fractional digits.

    Raises:
        InvalidAmountError: If the amount is missing, non-numeric, not positive
            or larger than MAX_AMOUNT
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidAmountError("Amount is required", issue_type="missing")
    if isinstance(value, bool):
        raise InvalidAmountError(f"Amount is not a number: {value!r}", issue_type="not_numeric")

    try:
        # str() first so floats convert by their shortest repr (0.1 -> 0.1)
        amount = Decimal(value.strip() if isinstance(value, str) else str(value))
        if not amount.is_finite():
            raise InvalidOperation
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(f"Amount is not a number: {value!r}", issue_type="not_numeric")

    if amount > MAX_AMOUNT:
        raise InvalidAmountError(
            f"Amount must not exceed {MAX_AMOUNT}", issue_type="too_large"
        )
    if amount > 0:
        amount = quantize_amount(amount)

    if amount <= 0:
        raise InvalidAmountError("Amount must be greater than zero", issue_type="not_positive")
    return amount


def parse_transaction_type(value: Any) -> TransactionType:
    """Raises InvalidTransactionTypeError for anything outside the enum."""
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(value.strip() if isinstance(value, str) else value)
    except ValueError:
        raise InvalidTransactionTypeError(value)


def parse_description(value: Any) -> str:
    """Raises InvalidDescriptionError for missing or blank text."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidDescriptionError()
    return value.strip()


def parse_denominations(value: Any) -> dict[Decimal, int]:
    """Raises InvalidDenominationsError for malformed breakdowns."""
    if value is None:
        return {}
    try:
        return check_denominations(_DENOMINATIONS_ADAPTER.validate_python(value))
    except ValueError as e:
        raise InvalidDenominationsError(f"Invalid denomination breakdown: {e}")


class TransactionValidator:
    """
    Validates transaction requests against the current savings balance.

    Stateless: the balance is passed in on every call so the validator
    never holds a stale copy.
    """

    def validate(
        self,
        request: TransactionInput,
        savings_balance: Decimal,
    ) -> ValidationResult:
        """Report all issues without raising."""
        errors, _ = self._run_checks(request, savings_balance)
        issues = [error.to_issue() for error in errors]
        return ValidationResult(is_valid=not issues, issues=issues)

    def check(
        self,
        request: TransactionInput,
        savings_balance: Decimal,
    ) -> TransactionDraft:
        """
        Validate a request and return the normalised draft.

        Raises:
            TransactionValidationError: The first issue found
        """
        errors, draft = self._run_checks(request, savings_balance)
        if errors:
            raise errors[0]
        return draft

    def _run_checks(
        self,
        request: TransactionInput,
        savings_balance: Decimal,
    ) -> tuple[list[TransactionValidationError], Optional[TransactionDraft]]:
        errors: list[TransactionValidationError] = []
        transaction_type = amount = description = denominations = None

        try:
            transaction_type = parse_transaction_type(request.type)
        except TransactionValidationError as e:
            errors.append(e)

        try:
            amount = parse_amount(request.amount)
        except TransactionValidationError as e:
            errors.append(e)

        try:
            description = parse_description(request.description)
        except TransactionValidationError as e:
            errors.append(e)

        try:
            denominations = parse_denominations(request.denominations)
        except TransactionValidationError as e:
            errors.append(e)

        # Funds can only be checked once type and amount are known
        if (
            transaction_type is TransactionType.FROM_SAVING
            and amount is not None
            and amount > savings_balance
        ):
            errors.append(InsufficientFundsError(amount, savings_balance))

        if errors:
            return errors, None

        return [], TransactionDraft(
            type=transaction_type,
            amount=amount,
            description=description,
            denominations=denominations,
        )
