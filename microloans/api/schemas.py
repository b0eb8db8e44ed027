"""
Pydantic schemas for API requests and responses
"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field


class CreateBorrowerRequest(BaseModel):
    name: str = Field(..., min_length=1)
    date_of_loan: date = Field(..., description="Issuance date (YYYY-MM-DD)")


class CreateLoanRequest(BaseModel):
    loan_amount: str = Field(..., description="Decimal principal as string")
    due_date: date = Field(..., description="Repayment deadline (YYYY-MM-DD)")


class RepaymentRequest(BaseModel):
    amount: str = Field(..., description="Decimal repayment amount as string")


class ValidationErrorResponse(BaseModel):
    error: str
    message: str


class BorrowerResponse(BaseModel):
    id: str
    name: str
    date_of_loan: str
    loan_ids: List[str]


class LoanResponse(BaseModel):
    id: str
    borrower_id: Optional[str] = None
    currency: str
    loan_amount: str
    outstanding_balance: str
    amount_repaid: str
    due_date: str
    is_overdue: bool
    is_paid_off: bool
    transaction_log: List[str]
    warning: Optional[str] = None


class RepaymentResponse(BaseModel):
    loan_id: str
    amount: str
    balance_after: str
    currency: str
    paid_on: str
    entry: str
    fully_repaid: bool


class StatementResponse(BaseModel):
    loan_id: str
    lines: List[str]


class OverdueResponse(BaseModel):
    loan_id: str
    due_date: str
    is_overdue: bool


class PortfolioResponse(BaseModel):
    currency: str
    total_outstanding: str
    lines: List[str]


class PortfolioSummaryResponse(BaseModel):
    borrower_count: int
    loan_count: int
    currency: str
    total_principal: str
    total_outstanding: str
    total_repaid: str
    paid_off_count: int
    overdue_count: int


class OverdueLoanEntry(BaseModel):
    borrower_id: str
    borrower_name: str
    loan_id: str
    due_date: str
    outstanding_balance: str
