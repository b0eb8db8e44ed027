"""
Microloans Ledger

Community micro-loan tracking: borrowers hold loans, loans accrue
repayments against an outstanding balance, and a portfolio manager
reports totals. All money arithmetic uses Decimal.
"""

__version__ = "1.0.0"
