"""
Loan Module

A single credit extension with principal, outstanding balance, due date and
an append-only repayment log. Repayments are validated, applied and logged
atomically per loan; every rejected mutation is reported as a Result and
leaves the loan in its last valid state.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, TextIO, Tuple, Union
import logging
import re
import threading
import uuid

from .config import get_config
from .currency import AmountLike, Currency, Money, fits_precision, to_decimal
from .errors import Result, ValidationError
from .events import DomainEvent, EventDispatcher, EventPublisherMixin
from .reporting import overdue_lines, statement_lines, write_lines

logger = logging.getLogger("microloans.loans")

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

REPAYMENT_ENTRY_FORMAT = "Repaid R{amount:.2f} on {paid_on}"
FULLY_REPAID_NOTICE = "Loan fully repaid"

# Balances below this are treated as fully repaid. Money is quantized to the
# currency precision, so for two-decimal currencies this is exactly zero.
PAID_OFF_TOLERANCE = Decimal("0.01")

DateLike = Union[str, date]


def today_iso() -> str:
    """Today's date as an ISO ``YYYY-MM-DD`` string"""
    return date.today().isoformat()


def normalize_iso_date(value: DateLike, field_name: str = "date") -> str:
    """
    Return ``value`` as a ``YYYY-MM-DD`` string.

    Only the shape is checked: lexicographic comparison of such strings
    matches chronological order, which is all the ledger relies on.

    Raises:
        ValueError: If ``value`` is not a date or an ISO date string
    """
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        raise ValueError(f"{field_name} must be an ISO date string (YYYY-MM-DD), got {value!r}")
    return value


@dataclass(frozen=True)
class RepaymentReceipt:
    """Outcome of an accepted repayment"""
    loan_id: str
    amount: Money
    balance_after: Money
    paid_on: str
    entry: str
    fully_repaid: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "loan_id": self.loan_id,
            "amount": str(self.amount.amount),
            "balance_after": str(self.balance_after.amount),
            "currency": self.amount.currency.code,
            "paid_on": self.paid_on,
            "entry": self.entry,
            "fully_repaid": self.fully_repaid,
        }


class Loan(EventPublisherMixin):
    """
    Loan with principal, outstanding balance, due date and repayment history.

    Invariant: ``0 <= outstanding_balance <= loan_amount`` after every
    operation. A non-positive principal does not fail construction; the loan
    is clamped to zero and ``construction_error`` records why.
    """

    def __init__(
        self,
        loan_amount: AmountLike,
        due_date: DateLike,
        currency: Optional[Currency] = None,
        clock: Optional[Callable[[], str]] = None,
        dispatcher: Optional[EventDispatcher] = None,
        loan_id: Optional[str] = None
    ):
        self.id = loan_id or str(uuid.uuid4())
        self._currency = currency or get_config().currency
        self._due_date = normalize_iso_date(due_date, "due_date")
        self._clock = clock or today_iso
        self._lock = threading.RLock()
        self._transaction_log: List[str] = []
        self.borrower_id: Optional[str] = None
        self.construction_error: Optional[ValidationError] = None
        self.set_event_dispatcher(dispatcher)

        principal = Money(loan_amount, self._currency)
        if principal.is_positive():
            self._loan_amount = principal
            self._outstanding_balance = principal
        else:
            logger.warning(ValidationError.NON_POSITIVE_LOAN_AMOUNT.message)
            self.construction_error = ValidationError.NON_POSITIVE_LOAN_AMOUNT
            self._loan_amount = Money.zero(self._currency)
            self._outstanding_balance = Money.zero(self._currency)

        self.publish_event(DomainEvent.LOAN_CREATED, "loan", self.id, {
            "loan_amount": str(self._loan_amount.amount),
            "currency": self._currency.code,
            "due_date": self._due_date,
            "clamped": self.construction_error is not None,
        })

    def __repr__(self) -> str:
        return (f"Loan(id={self.id!r}, loan_amount={self._loan_amount.to_string()!r}, "
                f"outstanding={self._outstanding_balance.to_string()!r}, due_date={self._due_date!r})")

    @property
    def lock(self) -> threading.RLock:
        """Lock guarding this loan's balance and log"""
        return self._lock

    @property
    def currency(self) -> Currency:
        return self._currency

    @property
    def loan_amount(self) -> Money:
        return self._loan_amount

    @property
    def outstanding_balance(self) -> Money:
        return self._outstanding_balance

    @property
    def due_date(self) -> str:
        return self._due_date

    @property
    def transaction_log(self) -> Tuple[str, ...]:
        """Repayment entries in insertion order"""
        with self._lock:
            return tuple(self._transaction_log)

    @property
    def amount_repaid(self) -> Money:
        with self._lock:
            return self._loan_amount - self._outstanding_balance

    @property
    def is_paid_off(self) -> bool:
        """True once a funded loan's balance is effectively zero"""
        with self._lock:
            return (self._loan_amount.is_positive()
                    and self._outstanding_balance.amount < PAID_OFF_TOLERANCE)

    def record_payment(self, amount: AmountLike) -> Result[RepaymentReceipt]:
        """
        Record a repayment against this loan.

        Order within one call: validate, deduct, log, check for full repayment.
        Validation runs on the amount as given, before any rounding, so the
        balance always decreases by exactly ``amount``. Rejected payments
        change nothing.

        Args:
            amount: Repayment amount in the loan currency

        Returns:
            Result carrying a RepaymentReceipt, or the ValidationError on rejection

        Raises:
            ValueError: If ``amount`` is not a finite number
        """
        raw = to_decimal(amount)

        with self._lock:
            if raw <= 0:
                error = ValidationError.NON_POSITIVE_REPAYMENT
            elif raw > self._outstanding_balance.amount:
                error = ValidationError.OVERPAYMENT_EXCEEDS_BALANCE
            elif not fits_precision(raw, self._currency):
                error = ValidationError.AMOUNT_PRECISION_EXCEEDED
            else:
                error = None

            if error is not None:
                logger.warning(error.message)
                rejected = {
                    "error": error.code,
                    "amount": str(raw),
                    "outstanding_balance": str(self._outstanding_balance.amount),
                }
            else:
                payment = Money(raw, self._currency)
                self._outstanding_balance = self._outstanding_balance - payment

                paid_on = self._clock()
                entry = REPAYMENT_ENTRY_FORMAT.format(amount=payment.amount, paid_on=paid_on)
                self._transaction_log.append(entry)

                fully_repaid = self._outstanding_balance.amount < PAID_OFF_TOLERANCE
                receipt = RepaymentReceipt(
                    loan_id=self.id,
                    amount=payment,
                    balance_after=self._outstanding_balance,
                    paid_on=paid_on,
                    entry=entry,
                    fully_repaid=fully_repaid,
                )

        if error is not None:
            self.publish_event(DomainEvent.REPAYMENT_REJECTED, "loan", self.id, rejected)
            return Result.fail(error)

        logger.info(entry)
        self.publish_event(DomainEvent.LOAN_PAYMENT, "loan", self.id, receipt.to_dict())
        if fully_repaid:
            logger.info(FULLY_REPAID_NOTICE)
            self.publish_event(DomainEvent.LOAN_PAID_OFF, "loan", self.id, {
                "loan_amount": str(self._loan_amount.amount),
                "paid_on": paid_on,
            })
        return Result.ok(receipt)

    def set_loan_amount(self, amount: AmountLike) -> Result[Money]:
        """Replace the principal. Must be positive and not below the outstanding balance."""
        raw = to_decimal(amount)
        with self._lock:
            if raw <= 0:
                error = ValidationError.NON_POSITIVE_AMOUNT
            elif not fits_precision(raw, self._currency):
                error = ValidationError.AMOUNT_PRECISION_EXCEEDED
            elif self._outstanding_balance.amount > raw:
                error = ValidationError.BALANCE_EXCEEDS_LOAN_AMOUNT
            else:
                self._loan_amount = Money(raw, self._currency)
                return Result.ok(self._loan_amount)
        logger.warning(error.message)
        return Result.fail(error)

    def set_outstanding_balance(self, amount: AmountLike) -> Result[Money]:
        """Replace the outstanding balance. Zero is allowed; negative or above principal is not."""
        raw = to_decimal(amount)
        with self._lock:
            if raw < 0:
                error = ValidationError.NEGATIVE_BALANCE
            elif raw > self._loan_amount.amount:
                error = ValidationError.BALANCE_EXCEEDS_LOAN_AMOUNT
            elif not fits_precision(raw, self._currency):
                error = ValidationError.AMOUNT_PRECISION_EXCEEDED
            else:
                self._outstanding_balance = Money(raw, self._currency)
                return Result.ok(self._outstanding_balance)
        logger.warning(error.message)
        return Result.fail(error)

    def is_overdue(self, today: Optional[DateLike] = None) -> bool:
        """Overdue when today is strictly later than the due date"""
        current = normalize_iso_date(today, "today") if today is not None else self._clock()
        return current > self._due_date

    def statement_lines(self) -> List[str]:
        with self._lock:
            return statement_lines(self._loan_amount, self._transaction_log)

    def print_statement(self, stream: Optional[TextIO] = None) -> None:
        """Write the numbered repayment history to ``stream`` (stdout by default)"""
        write_lines(self.statement_lines(), stream)

    def print_overdue_status(self, stream: Optional[TextIO] = None,
                             today: Optional[DateLike] = None) -> bool:
        """Write "Overdue" when overdue and nothing otherwise. Returns the flag."""
        overdue = self.is_overdue(today)
        write_lines(overdue_lines(overdue), stream)
        if overdue:
            self.publish_event(DomainEvent.LOAN_OVERDUE, "loan", self.id, {
                "due_date": self._due_date,
                "outstanding_balance": str(self._outstanding_balance.amount),
            })
        return overdue

    def to_dict(self, today: Optional[DateLike] = None) -> Dict[str, Any]:
        """Serializable view of the loan"""
        with self._lock:
            return {
                "id": self.id,
                "borrower_id": self.borrower_id,
                "currency": self._currency.code,
                "loan_amount": str(self._loan_amount.amount),
                "outstanding_balance": str(self._outstanding_balance.amount),
                "amount_repaid": str((self._loan_amount - self._outstanding_balance).amount),
                "due_date": self._due_date,
                "is_overdue": self.is_overdue(today),
                "is_paid_off": self.is_paid_off,
                "transaction_log": list(self._transaction_log),
            }
