"""
Pydantic schemas for the read-only ledger projections.

Balances are derived from posted lines, never stored.
All amounts are integer cents.
"""

from datetime import date

from pydantic import BaseModel

from booking_ledger.models.enums import AccountType


class AccountBalanceResponse(BaseModel):
    """Balance of one account, signed by its normal side."""
    account_id: int
    account_code: str
    account_name: str
    account_type: AccountType
    balance: int


class AccountLedgerRow(BaseModel):
    """One posted line as it appears on an account sheet."""
    line_id: int
    journal_entry_id: int
    booking_date: date
    description: str
    debit: int
    credit: int
    balance: int


class AccountLedgerResponse(BaseModel):
    account_id: int
    account_code: str
    account_type: AccountType
    from_date: date | None
    to_date: date | None
    opening_balance: int
    rows: list[AccountLedgerRow]
    total_debit: int
    total_credit: int
    closing_balance: int


class TrialBalanceRow(BaseModel):
    account_id: int
    account_code: str
    account_name: str
    account_type: AccountType
    total_debit: int
    total_credit: int
    balance: int


class TrialBalanceResponse(BaseModel):
    as_of: date | None
    rows: list[TrialBalanceRow]
    total_debit: int
    total_credit: int
    is_balanced: bool


class IntegrityReport(BaseModel):
    """Whole-ledger check: posted debits equal posted credits."""
    total_debits: int
    total_credits: int
    difference: int
    is_balanced: bool
    unbalanced_entry_ids: list[int]
