"""
Portfolio endpoints
"""

from typing import List

from fastapi import APIRouter, Depends

from .dependencies import LedgerSystem, get_ledger_system
from .schemas import OverdueLoanEntry, PortfolioResponse, PortfolioSummaryResponse


router = APIRouter()


@router.get("", response_model=PortfolioResponse)
async def get_portfolio(system: LedgerSystem = Depends(get_ledger_system)):
    """Total outstanding and one line per loan"""
    manager = system.loan_manager
    total = manager.get_total_outstanding()
    return {
        "currency": total.currency.code,
        "total_outstanding": str(total.amount),
        "lines": manager.portfolio_lines(),
    }


@router.get("/summary", response_model=PortfolioSummaryResponse)
async def get_portfolio_summary(system: LedgerSystem = Depends(get_ledger_system)):
    return system.loan_manager.summary().to_dict()


@router.get("/overdue", response_model=List[OverdueLoanEntry])
async def list_overdue_loans(system: LedgerSystem = Depends(get_ledger_system)):
    """Loans whose due date has passed"""
    return [
        {
            "borrower_id": borrower.id,
            "borrower_name": borrower.name,
            "loan_id": loan.id,
            "due_date": loan.due_date,
            "outstanding_balance": str(loan.outstanding_balance.amount),
        }
        for borrower, loan in system.loan_manager.overdue_loans()
    ]
