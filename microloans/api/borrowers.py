"""
Borrower endpoints
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from .dependencies import LedgerSystem, get_ledger_system
from .schemas import BorrowerResponse, CreateBorrowerRequest, CreateLoanRequest, LoanResponse
from ..borrowers import Borrower
from ..currency import to_decimal
from ..errors import BorrowerNotFoundError
from ..loans import Loan


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=BorrowerResponse)
async def create_borrower(
    request: CreateBorrowerRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Register a new borrower"""
    try:
        borrower = Borrower(
            name=request.name,
            date_of_loan=request.date_of_loan,
            dispatcher=system.dispatcher
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    system.loan_manager.add_borrower(borrower)
    return borrower.to_dict()


@router.get("", response_model=List[BorrowerResponse])
async def list_borrowers(system: LedgerSystem = Depends(get_ledger_system)):
    """List borrowers in registration order"""
    return [borrower.to_dict() for borrower in system.loan_manager.borrowers]


@router.get("/{borrower_id}", response_model=BorrowerResponse)
async def get_borrower(
    borrower_id: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Get borrower details"""
    try:
        return system.loan_manager.get_borrower(borrower_id).to_dict()
    except BorrowerNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/{borrower_id}/loans", status_code=status.HTTP_201_CREATED, response_model=LoanResponse)
async def add_loan(
    borrower_id: str,
    request: CreateLoanRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Extend a new loan to a borrower"""
    try:
        borrower = system.loan_manager.get_borrower(borrower_id)
    except BorrowerNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    try:
        loan = Loan(
            loan_amount=to_decimal(request.loan_amount),
            due_date=request.due_date,
            currency=system.loan_manager.currency,
            dispatcher=system.dispatcher
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    borrower.add_loan(loan)

    payload = loan.to_dict()
    if loan.construction_error:
        payload["warning"] = loan.construction_error.message
    return payload
