"""
Beleg service — source documents a booking can reference.

The booking engine only needs find_by_id and update_status;
creation lives here so the documents can exist at all.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from booking_ledger.exceptions import BookingError, SourceDocumentNotFoundError
from booking_ledger.models.beleg import Beleg
from booking_ledger.models.enums import BelegStatus
from booking_ledger.schemas.beleg import BelegCreate
from booking_ledger.tenancy import TenantContext


class BelegService:

    def __init__(self, db: Session):
        self.db = db

    def create_beleg(self, ctx: TenantContext, request: BelegCreate) -> Beleg:
        """Register a source document in draft status."""
        existing = self.db.execute(
            select(Beleg).where(
                Beleg.tenant_id == ctx.tenant_id,
                Beleg.document_number == request.document_number,
            )
        ).scalar_one_or_none()

        if existing:
            raise BookingError(
                f"Beleg with number '{request.document_number}' already exists"
            )

        beleg = Beleg(
            tenant_id=ctx.tenant_id,
            document_number=request.document_number,
            document_type=request.document_type,
            title=request.title,
            document_date=request.document_date,
            amount=request.amount,
            tax_amount=request.tax_amount,
            status=BelegStatus.DRAFT,
        )
        self.db.add(beleg)
        self.db.flush()
        return beleg

    def find_by_id(self, ctx: TenantContext, beleg_id: int) -> Beleg:
        beleg = self.db.execute(
            select(Beleg).where(
                Beleg.tenant_id == ctx.tenant_id,
                Beleg.id == beleg_id,
            )
        ).scalar_one_or_none()

        if not beleg:
            raise SourceDocumentNotFoundError(beleg_id)
        return beleg

    def update_status(
        self, ctx: TenantContext, beleg_id: int, status: BelegStatus
    ) -> Beleg:
        beleg = self.find_by_id(ctx, beleg_id)
        beleg.status = status
        self.db.flush()
        return beleg
