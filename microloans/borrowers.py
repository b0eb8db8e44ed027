"""
Borrower Module

A borrower identity owning an ordered collection of loans. Outer layers
read the loans through snapshots only; balances change solely through
``Loan.record_payment`` and the loan setters.
"""

from typing import Any, Dict, List, Optional, TextIO, Tuple
import logging
import threading
import uuid

from .config import get_config
from .currency import Money
from .errors import LoanNotFoundError, LoanOwnershipError
from .events import DomainEvent, EventDispatcher, EventPublisherMixin
from .loans import DateLike, Loan, normalize_iso_date

logger = logging.getLogger("microloans.borrowers")


class Borrower(EventPublisherMixin):
    """Borrower holding one or more loans"""

    def __init__(
        self,
        name: str,
        date_of_loan: DateLike,
        borrower_id: Optional[str] = None,
        dispatcher: Optional[EventDispatcher] = None
    ):
        if not name or not name.strip():
            raise ValueError("Borrower name must not be empty")

        self.id = borrower_id or str(uuid.uuid4())
        self.name = name
        # Issuance date of the first loan; each loan carries its own due date
        self.date_of_loan = normalize_iso_date(date_of_loan, "date_of_loan")
        self._loans: List[Loan] = []
        self._lock = threading.RLock()
        self.set_event_dispatcher(dispatcher)

    def __repr__(self) -> str:
        return f"Borrower(id={self.id!r}, name={self.name!r}, loans={len(self._loans)})"

    @property
    def loans(self) -> Tuple[Loan, ...]:
        """Owned loans in the order they were added"""
        with self._lock:
            return tuple(self._loans)

    def get_loans(self) -> Tuple[Loan, ...]:
        return self.loans

    def add_loan(self, loan: Loan) -> Loan:
        """
        Attach a loan to this borrower.

        Raises:
            LoanOwnershipError: If the loan already belongs to another borrower
        """
        with self._lock, loan.lock:
            if loan.borrower_id is not None and loan.borrower_id != self.id:
                raise LoanOwnershipError(loan.id, loan.borrower_id, self.id)
            loan.borrower_id = self.id
            self._loans.append(loan)

        logger.debug(f"Loan {loan.id} added to borrower {self.id}")
        self.publish_event(DomainEvent.LOAN_ADDED, "borrower", self.id, {
            "loan_id": loan.id,
            "loan_amount": str(loan.loan_amount.amount),
            "due_date": loan.due_date,
        })
        return loan

    def get_loan(self, loan_id: str) -> Loan:
        """
        Raises:
            LoanNotFoundError: If this borrower has no loan with ``loan_id``
        """
        for loan in self.loans:
            if loan.id == loan_id:
                return loan
        raise LoanNotFoundError(loan_id, self.id)

    def total_outstanding(self) -> Money:
        total = None
        for loan in self.loans:
            total = loan.outstanding_balance if total is None else total + loan.outstanding_balance
        return total if total is not None else Money.zero(get_config().currency)

    def print_all_statements(self, stream: Optional[TextIO] = None) -> None:
        for loan in self.loans:
            loan.print_statement(stream)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "date_of_loan": self.date_of_loan,
            "loan_ids": [loan.id for loan in self.loans],
        }
