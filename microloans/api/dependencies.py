"""
Ledger system wiring shared by the API routers
"""

from typing import Optional

from ..config import get_config
from ..events import EventDispatcher
from ..portfolio import LoanManager


class LedgerSystem:
    """In-memory ledger with its event dispatcher"""

    def __init__(self, dispatcher: Optional[EventDispatcher] = None):
        config = get_config()
        self.dispatcher = dispatcher or EventDispatcher()
        self.loan_manager = LoanManager(currency=config.currency, dispatcher=self.dispatcher)


ledger_system: Optional[LedgerSystem] = None


def get_ledger_system() -> LedgerSystem:
    """FastAPI dependency returning the process-wide ledger"""
    global ledger_system
    if ledger_system is None:
        ledger_system = LedgerSystem()
    return ledger_system


def set_ledger_system(system: Optional[LedgerSystem]) -> None:
    global ledger_system
    ledger_system = system
