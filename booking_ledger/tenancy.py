"""
Request-scoped tenant context.

Tenant resolution (login, tenant-from-path) happens outside the
booking engine. Whatever resolves it hands a TenantContext into
every service call; services never look up a "current tenant"
on their own.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from booking_ledger.exceptions import TenantNotFoundError
from booking_ledger.models.base import get_db


@dataclass(frozen=True)
class TenantContext:
    """Who is acting, on behalf of which tenant."""
    tenant_id: int
    user_id: int | None = None


def get_tenant_context(
    x_tenant_id: int = Header(...),
    x_user_id: int | None = Header(default=None),
    db: Session = Depends(get_db),
) -> TenantContext:
    """
    Build the TenantContext for one request.

    The tenant id comes from the X-Tenant-ID header, the acting
    user from X-User-ID. An unknown tenant is a 404.
    """
    from booking_ledger.services.tenant_service import TenantService

    try:
        TenantService(db).get_tenant(x_tenant_id)
    except TenantNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return TenantContext(tenant_id=x_tenant_id, user_id=x_user_id)
