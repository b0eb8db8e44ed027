"""
Loan endpoints
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from .dependencies import LedgerSystem, get_ledger_system
from .schemas import (
    LoanResponse, OverdueResponse, RepaymentRequest, RepaymentResponse,
    StatementResponse, ValidationErrorResponse
)
from ..currency import to_decimal
from ..errors import LoanNotFoundError
from ..loans import Loan
from ..logging_config import log_action


router = APIRouter()
logger = logging.getLogger("microloans.api")


def _find_loan(system: LedgerSystem, loan_id: str) -> Loan:
    try:
        _, loan = system.loan_manager.find_loan(loan_id)
    except LoanNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return loan


@router.get("/{loan_id}", response_model=LoanResponse)
async def get_loan(
    loan_id: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Get loan details"""
    return _find_loan(system, loan_id).to_dict()


@router.post(
    "/{loan_id}/repayments",
    response_model=RepaymentResponse,
    responses={422: {"model": ValidationErrorResponse}}
)
async def record_repayment(
    loan_id: str,
    request: RepaymentRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Record a repayment against a loan"""
    loan = _find_loan(system, loan_id)

    try:
        amount = to_decimal(request.amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = loan.record_payment(amount)
    log_action(
        logger, "info" if result else "warning",
        "Repayment recorded" if result else f"Repayment rejected: {result.message}",
        action="record_payment", resource=f"loan:{loan.id}",
        extra={"amount": request.amount}
    )
    if not result:
        return JSONResponse(
            status_code=422,
            content={"error": result.error.code, "message": result.message}
        )
    return result.value.to_dict()


@router.get("/{loan_id}/statement", response_model=StatementResponse)
async def get_statement(
    loan_id: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Get the numbered repayment history"""
    loan = _find_loan(system, loan_id)
    return {"loan_id": loan.id, "lines": loan.statement_lines()}


@router.get("/{loan_id}/overdue", response_model=OverdueResponse)
async def get_overdue_status(
    loan_id: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Check whether the loan is past its due date"""
    loan = _find_loan(system, loan_id)
    return {"loan_id": loan.id, "due_date": loan.due_date, "is_overdue": loan.is_overdue()}
