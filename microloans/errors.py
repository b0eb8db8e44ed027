"""
Error Types Module

Validation failures on ledger mutations are recoverable and returned as
``Result`` values carrying a ``ValidationError``. Lookups and ownership
violations are programming errors and raise ``LedgerError`` subclasses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class ValidationError(Enum):
    """Recoverable user-input validation failures with their report text"""
    NON_POSITIVE_LOAN_AMOUNT = ("non_positive_loan_amount", "Loan amount must be positive")
    NON_POSITIVE_AMOUNT = ("non_positive_amount", "Amount must be positive")
    NON_POSITIVE_REPAYMENT = ("non_positive_repayment", "Amount must be positive")
    OVERPAYMENT_EXCEEDS_BALANCE = (
        "overpayment_exceeds_balance", "Repayment amount exceeds outstanding balance."
    )
    NEGATIVE_BALANCE = ("negative_balance", "Outstanding balance cannot be negative")
    BALANCE_EXCEEDS_LOAN_AMOUNT = (
        "balance_exceeds_loan_amount", "Outstanding balance cannot exceed loan amount"
    )
    AMOUNT_PRECISION_EXCEEDED = (
        "amount_precision_exceeded", "Amount cannot be represented at the currency precision"
    )

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a ledger mutation.

    Usage:
        result = loan.record_payment(Decimal("400"))
        if result:
            receipt = result.value
        else:
            log(result.message)
    """
    success: bool
    value: Optional[T] = None
    error: Optional[ValidationError] = None

    @classmethod
    def ok(cls, value: T = None) -> 'Result[T]':
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: ValidationError) -> 'Result[T]':
        return cls(success=False, error=error)

    @property
    def message(self) -> Optional[str]:
        """Contract text for the failure, None on success"""
        return self.error.message if self.error else None

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> T:
        """Get the value, raising if the operation was rejected.

        Raises:
            ValueError: If the operation failed.
        """
        if not self.success:
            raise ValueError(f"Result unwrap failed: {self.message}")
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value if self.success else default


class LedgerError(Exception):
    """Base exception for ledger lookup and ownership errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class BorrowerNotFoundError(LedgerError):
    """Raised when no registered borrower has the given id."""

    def __init__(self, borrower_id: str):
        super().__init__(f"Borrower '{borrower_id}' not found", {'borrower_id': borrower_id})


class LoanNotFoundError(LedgerError):
    """Raised when a loan id cannot be resolved."""

    def __init__(self, loan_id: str, borrower_id: str = None):
        details = {'loan_id': loan_id}
        if borrower_id:
            details['borrower_id'] = borrower_id
        super().__init__(f"Loan '{loan_id}' not found", details)


class LoanOwnershipError(LedgerError):
    """Raised when a loan already owned by one borrower is added to another."""

    def __init__(self, loan_id: str, owner_id: str, borrower_id: str):
        super().__init__(
            f"Loan '{loan_id}' already belongs to another borrower",
            {'loan_id': loan_id, 'owner_id': owner_id, 'borrower_id': borrower_id}
        )
