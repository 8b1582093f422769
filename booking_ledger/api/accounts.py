"""
Tenant and chart-of-accounts API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from booking_ledger.exceptions import BookingError, NotFoundError
from booking_ledger.models.base import get_db
from booking_ledger.models.enums import AccountType
from booking_ledger.services.account_service import AccountService
from booking_ledger.services.tenant_service import TenantService
from booking_ledger.schemas.account import (
    AccountCreate,
    AccountResponse,
    TenantCreate,
    TenantResponse,
)
from booking_ledger.tenancy import TenantContext, get_tenant_context

router = APIRouter(tags=["Accounts"])


# --- Tenant Endpoints ---

@router.post("/tenants", response_model=TenantResponse, status_code=201)
def create_tenant(
    request: TenantCreate,
    db: Session = Depends(get_db),
):
    """Create a new tenant (company)."""
    service = TenantService(db)
    try:
        tenant = service.create_tenant(request)
        db.commit()
        return tenant
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


# --- Account Endpoints ---

@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Add an account to the chart of accounts.

    Every account must exist before lines can be booked to it.
    """
    service = AccountService(db)
    try:
        account = service.create_account(ctx, request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/accounts", response_model=list[AccountResponse])
def list_accounts(
    account_type: AccountType | None = None,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    return AccountService(db).list_accounts(ctx, account_type)


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    service = AccountService(db)
    try:
        return service.find_by_id(ctx, account_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/accounts/{account_id}/deactivate",
    response_model=AccountResponse,
)
def deactivate_account(
    account_id: int,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Stop an account from receiving new booking lines."""
    service = AccountService(db)
    try:
        account = service.deactivate_account(ctx, account_id)
        db.commit()
        return account
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/accounts/{account_id}", status_code=204)
def delete_account(
    account_id: int,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Delete an unused account.

    Accounts with booking lines or system accounts are
    refused with 422; deactivate them instead.
    """
    service = AccountService(db)
    try:
        service.delete_account(ctx, account_id)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except BookingError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    return Response(status_code=204)
