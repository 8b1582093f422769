"""
Booking API endpoints.

The API layer is thin: it resolves the tenant, calls the
BookingService, commits on success and rolls back on any
error. Not-found errors become 404; every other rejected
booking becomes 422 with the service's message.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from booking_ledger.exceptions import BookingError, NotFoundError
from booking_ledger.models.base import get_db
from booking_ledger.models.enums import JournalEntryStatus
from booking_ledger.services.booking_service import BookingService
from booking_ledger.schemas.booking import (
    BookingCreate,
    BookingFilter,
    JournalEntryResponse,
)
from booking_ledger.tenancy import TenantContext, get_tenant_context

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=JournalEntryResponse, status_code=201)
def create_booking(
    request: BookingCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Create a draft booking.

    Debit and credit totals must be equal; otherwise the
    response is 422 naming both sums.
    """
    service = BookingService(db)
    try:
        entry = service.create_booking(ctx, request)
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except BookingError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))


@router.get("", response_model=list[JournalEntryResponse])
def list_bookings(
    status: JournalEntryStatus | None = None,
    search: str | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    limit: int = 50,
    offset: int = 0,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """List the journal, newest first."""
    try:
        filters = BookingFilter(
            status=status,
            search=search,
            from_date=from_date,
            to_date=to_date,
            limit=limit,
            offset=offset,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return BookingService(db).list_entries(ctx, filters)


@router.get("/{entry_id}", response_model=JournalEntryResponse)
def get_booking(
    entry_id: int,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    service = BookingService(db)
    try:
        return service.get_entry(ctx, entry_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{entry_id}", response_model=JournalEntryResponse)
def update_booking(
    entry_id: int,
    request: BookingCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Replace a draft booking. Locked bookings are refused."""
    service = BookingService(db)
    try:
        entry = service.update_draft(ctx, entry_id, request)
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except BookingError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))


@router.delete("/{entry_id}", status_code=204)
def delete_booking(
    entry_id: int,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Delete a draft booking. Locked bookings must be reversed."""
    service = BookingService(db)
    try:
        service.delete_draft(ctx, entry_id)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except BookingError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    return Response(status_code=204)


@router.post("/{entry_id}/lock", response_model=JournalEntryResponse)
def lock_booking(
    entry_id: int,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Post a booking (GoBD lock).

    After this the booking can no longer be edited or deleted,
    only reversed.
    """
    service = BookingService(db)
    try:
        entry = service.lock_booking(ctx, entry_id)
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except BookingError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/{entry_id}/reverse", response_model=JournalEntryResponse)
def reverse_booking(
    entry_id: int,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Reverse (Storno) a locked booking.

    Returns the new reversal entry; the original is marked
    cancelled.
    """
    service = BookingService(db)
    try:
        reversal = service.reverse_booking(ctx, entry_id)
        db.commit()
        return reversal
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except BookingError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
