"""
Ledger API endpoints.

Read-only views over posted bookings: balances, account
sheets, the trial balance and an integrity check.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from booking_ledger.exceptions import NotFoundError
from booking_ledger.models.base import get_db
from booking_ledger.services.ledger_service import LedgerService
from booking_ledger.schemas.ledger import (
    AccountBalanceResponse,
    AccountLedgerResponse,
    IntegrityReport,
    TrialBalanceResponse,
)
from booking_ledger.tenancy import TenantContext, get_tenant_context

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.get("/balances", response_model=list[AccountBalanceResponse])
def get_balances(
    as_of: date | None = None,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """All accounts with their current balances."""
    return LedgerService(db).get_balances(ctx, as_of)


@router.get(
    "/accounts/{account_id}/balance",
    response_model=AccountBalanceResponse,
)
def get_account_balance(
    account_id: int,
    as_of: date | None = None,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Get the balance of one account.

    Balance is calculated from posted lines, not stored.
    """
    service = LedgerService(db)
    try:
        account = service.accounts.find_by_id(ctx, account_id)
        balance = service.get_account_balance(ctx, account_id, as_of)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return AccountBalanceResponse(
        account_id=account.id,
        account_code=account.code,
        account_name=account.name,
        account_type=account.account_type,
        balance=balance,
    )


@router.get(
    "/accounts/{account_id}/entries",
    response_model=AccountLedgerResponse,
)
def get_account_ledger(
    account_id: int,
    from_date: date | None = None,
    to_date: date | None = None,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Posted lines of an account with a running balance."""
    service = LedgerService(db)
    try:
        return service.get_account_ledger(ctx, account_id, from_date, to_date)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/trial-balance", response_model=TrialBalanceResponse)
def get_trial_balance(
    as_of: date | None = None,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    return LedgerService(db).get_trial_balance(ctx, as_of)


@router.get("/integrity", response_model=IntegrityReport)
def check_integrity(
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Whole-ledger check that debits equal credits."""
    return LedgerService(db).check_integrity(ctx)
