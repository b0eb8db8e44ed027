"""
Portfolio Module

LoanManager aggregates balances across every loan of every registered
borrower. Aggregate reads hold all loan locks at once so a total never mixes
pre- and post-repayment values of the same loan.
"""

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, TextIO, Tuple
import logging
import threading

from .borrowers import Borrower
from .config import get_config
from .currency import AmountLike, Currency, Money
from .errors import BorrowerNotFoundError, LoanNotFoundError, Result
from .events import DomainEvent, EventDispatcher, EventPublisherMixin
from .loans import DateLike, Loan, RepaymentReceipt
from .reporting import portfolio_line, write_lines

logger = logging.getLogger("microloans.portfolio")


@dataclass(frozen=True)
class PortfolioSummary:
    """Point-in-time portfolio figures"""
    borrower_count: int
    loan_count: int
    total_principal: Money
    total_outstanding: Money
    total_repaid: Money
    paid_off_count: int
    overdue_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "borrower_count": self.borrower_count,
            "loan_count": self.loan_count,
            "currency": self.total_outstanding.currency.code,
            "total_principal": str(self.total_principal.amount),
            "total_outstanding": str(self.total_outstanding.amount),
            "total_repaid": str(self.total_repaid.amount),
            "paid_off_count": self.paid_off_count,
            "overdue_count": self.overdue_count,
        }


class LoanManager(EventPublisherMixin):
    """
    Registry of borrowers and aggregate views over their loans.

    Ordering of every listing is borrower registration order, then loan
    addition order within a borrower.
    """

    def __init__(self, currency: Optional[Currency] = None,
                 dispatcher: Optional[EventDispatcher] = None):
        self.currency = currency or get_config().currency
        self._borrowers: List[Borrower] = []
        self._lock = threading.RLock()
        self.set_event_dispatcher(dispatcher)

    @property
    def borrowers(self) -> Tuple[Borrower, ...]:
        with self._lock:
            return tuple(self._borrowers)

    def add_borrower(self, borrower: Borrower) -> Borrower:
        """Register a borrower. Duplicates are not detected."""
        with self._lock:
            self._borrowers.append(borrower)

        logger.info(f"Registered borrower {borrower.name}")
        self.publish_event(DomainEvent.BORROWER_REGISTERED, "borrower", borrower.id, {
            "name": borrower.name,
            "date_of_loan": borrower.date_of_loan,
        })
        return borrower

    def get_borrower(self, borrower_id: str) -> Borrower:
        """
        Raises:
            BorrowerNotFoundError: If no registered borrower has ``borrower_id``
        """
        for borrower in self.borrowers:
            if borrower.id == borrower_id:
                return borrower
        raise BorrowerNotFoundError(borrower_id)

    def find_loan(self, loan_id: str) -> Tuple[Borrower, Loan]:
        """
        Locate a loan and its owner.

        Raises:
            LoanNotFoundError: If no registered borrower holds ``loan_id``
        """
        for borrower in self.borrowers:
            for loan in borrower.loans:
                if loan.id == loan_id:
                    return borrower, loan
        raise LoanNotFoundError(loan_id)

    def record_payment(self, loan_id: str, amount: AmountLike) -> Result[RepaymentReceipt]:
        """Apply a repayment to the loan with ``loan_id``"""
        _, loan = self.find_loan(loan_id)
        return loan.record_payment(amount)

    @staticmethod
    def _holdings(borrowers: Tuple[Borrower, ...]) -> List[Tuple[Borrower, Loan]]:
        return [(borrower, loan) for borrower in borrowers for loan in borrower.loans]

    @contextmanager
    def _locked_holdings(self) -> Iterator[Tuple[Tuple[Borrower, ...], List[Tuple[Borrower, Loan]]]]:
        """Yield one borrower snapshot and its (borrower, loan) pairs with all loan locks held"""
        borrowers = self.borrowers
        holdings = self._holdings(borrowers)
        # Locks are taken in loan-id order by every aggregate reader
        distinct = {id(loan): loan for _, loan in holdings}
        with ExitStack() as stack:
            for loan in sorted(distinct.values(), key=lambda item: item.id):
                stack.enter_context(loan.lock)
            yield borrowers, holdings

    def _sum(self, amounts) -> Money:
        total = Money.zero(self.currency)
        for amount in amounts:
            total = total + amount
        return total

    def get_total_outstanding(self) -> Money:
        """Sum of outstanding balances over all loans of all borrowers"""
        with self._locked_holdings() as (_, holdings):
            return self._sum(loan.outstanding_balance for _, loan in holdings)

    def portfolio_lines(self) -> List[str]:
        with self._locked_holdings() as (_, holdings):
            return [portfolio_line(borrower.name, loan.outstanding_balance)
                    for borrower, loan in holdings]

    def print_loans(self, stream: Optional[TextIO] = None) -> None:
        """Write one ``<name>: R<balance>`` line per loan"""
        write_lines(self.portfolio_lines(), stream)

    def overdue_loans(self, today: Optional[DateLike] = None) -> List[Tuple[Borrower, Loan]]:
        return [(borrower, loan) for borrower, loan in self._holdings(self.borrowers)
                if loan.is_overdue(today)]

    def summary(self, today: Optional[DateLike] = None) -> PortfolioSummary:
        with self._locked_holdings() as (borrowers, holdings):
            loans = [loan for _, loan in holdings]
            return PortfolioSummary(
                borrower_count=len(borrowers),
                loan_count=len(loans),
                total_principal=self._sum(loan.loan_amount for loan in loans),
                total_outstanding=self._sum(loan.outstanding_balance for loan in loans),
                total_repaid=self._sum(loan.amount_repaid for loan in loans),
                paid_off_count=sum(1 for loan in loans if loan.is_paid_off),
                overdue_count=sum(1 for loan in loans if loan.is_overdue(today)),
            )
