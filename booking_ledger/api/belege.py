"""
Source document (Beleg) API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from booking_ledger.exceptions import NotFoundError
from booking_ledger.models.base import get_db
from booking_ledger.services.beleg_service import BelegService
from booking_ledger.schemas.beleg import BelegCreate, BelegResponse
from booking_ledger.tenancy import TenantContext, get_tenant_context

router = APIRouter(prefix="/belege", tags=["Belege"])


@router.post("", response_model=BelegResponse, status_code=201)
def create_beleg(
    request: BelegCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Register a source document in draft status."""
    service = BelegService(db)
    try:
        beleg = service.create_beleg(ctx, request)
        db.commit()
        return beleg
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{beleg_id}", response_model=BelegResponse)
def get_beleg(
    beleg_id: int,
    ctx: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    service = BelegService(db)
    try:
        return service.find_by_id(ctx, beleg_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
