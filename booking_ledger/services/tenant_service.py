"""
Tenant service — creates and looks up tenants.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from booking_ledger.exceptions import BookingError, TenantNotFoundError
from booking_ledger.models.tenant import Tenant
from booking_ledger.schemas.account import TenantCreate


class TenantService:

    def __init__(self, db: Session):
        self.db = db

    def create_tenant(self, request: TenantCreate) -> Tenant:
        """Create a new tenant. Slugs are globally unique."""
        existing = self.db.execute(
            select(Tenant).where(Tenant.slug == request.slug)
        ).scalar_one_or_none()

        if existing:
            raise BookingError(f"Tenant '{request.slug}' already exists")

        tenant = Tenant(name=request.name, slug=request.slug)
        self.db.add(tenant)
        self.db.flush()
        return tenant

    def get_tenant(self, tenant_id: int) -> Tenant:
        tenant = self.db.get(Tenant, tenant_id)
        if not tenant:
            raise TenantNotFoundError(tenant_id)
        return tenant
