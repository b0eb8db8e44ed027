"""
Reporting Module

Text renderings of ledger state. Line contracts are fixed: other tools
parse statement, overdue and portfolio output, so amounts always carry the
Rand prefix whatever the ledger currency.
"""

from typing import Iterable, List, Optional, Sequence, TextIO
import sys

from .currency import Money

STATEMENT_HEADER = "Repayment History for Loan (R{amount:.2f}):"
NO_REPAYMENTS = "No repayments recorded yet."
OVERDUE_FLAG = "Overdue"
PORTFOLIO_LINE = "{name}: R{balance:.2f}"


def statement_lines(loan_amount: Money, entries: Sequence[str]) -> List[str]:
    """Header plus a 1-indexed list of entries, or the empty-history placeholder"""
    lines = [STATEMENT_HEADER.format(amount=loan_amount.amount)]
    if not entries:
        lines.append(NO_REPAYMENTS)
    else:
        lines.extend(f"{number}. {entry}" for number, entry in enumerate(entries, start=1))
    return lines


def overdue_lines(overdue: bool) -> List[str]:
    # Nothing is reported for a loan that is not overdue
    return [OVERDUE_FLAG] if overdue else []


def portfolio_line(name: str, balance: Money) -> str:
    return PORTFOLIO_LINE.format(name=name, balance=balance.amount)


def write_lines(lines: Iterable[str], stream: Optional[TextIO] = None) -> None:
    """Write each line to ``stream``, defaulting to the current stdout"""
    out = stream if stream is not None else sys.stdout
    for line in lines:
        out.write(line + "\n")
