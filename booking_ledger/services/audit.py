"""
Audit trail for journal state transitions.

Records are added to the caller's session and committed
together with the change they describe, so an audit record
exists if and only if the change does.
"""

import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from booking_ledger.models.audit_log import AuditLog
from booking_ledger.tenancy import TenantContext


class AuditAction:
    """Standardized audit action constants."""
    ENTRY_CREATED = "journal_entry.created"
    ENTRY_UPDATED = "journal_entry.updated"
    ENTRY_DELETED = "journal_entry.deleted"
    ENTRY_LOCKED = "journal_entry.locked"
    ENTRY_REVERSED = "journal_entry.reversed"
    ACCOUNT_CREATED = "account.created"
    ACCOUNT_DEACTIVATED = "account.deactivated"
    ACCOUNT_DELETED = "account.deleted"


def record_event(
    db: Session,
    ctx: TenantContext,
    action: str,
    entity_type: str,
    entity_id: int,
    details: dict[str, Any] | None = None,
) -> AuditLog:
    """Append one audit record for the acting tenant and user."""
    entry = AuditLog(
        tenant_id=ctx.tenant_id,
        user_id=ctx.user_id,
        event_type=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=json.dumps(details or {}, default=str, sort_keys=True),
    )
    db.add(entry)
    return entry


def get_events(
    db: Session,
    ctx: TenantContext,
    entity_type: str,
    entity_id: int,
) -> list[AuditLog]:
    """Audit history of one entity, oldest first."""
    return list(db.execute(
        select(AuditLog)
        .where(
            AuditLog.tenant_id == ctx.tenant_id,
            AuditLog.entity_type == entity_type,
            AuditLog.entity_id == entity_id,
        )
        .order_by(AuditLog.id)
    ).scalars().all())
