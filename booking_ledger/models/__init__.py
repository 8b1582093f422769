"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from booking_ledger.models.base import Base
from booking_ledger.models.enums import (
    AccountType,
    EntryType,
    JournalEntryStatus,
    BelegStatus,
    BelegType,
)
from booking_ledger.models.tenant import Tenant
from booking_ledger.models.audit_log import AuditLog
from booking_ledger.models.ledger_account import Account
from booking_ledger.models.beleg import Beleg
from booking_ledger.models.journal_entry_line import JournalEntryLine
from booking_ledger.models.journal_entry import JournalEntry

__all__ = [
    "Base",
    "AccountType",
    "EntryType",
    "JournalEntryStatus",
    "BelegStatus",
    "BelegType",
    "Tenant",
    "AuditLog",
    "Account",
    "Beleg",
    "JournalEntryLine",
    "JournalEntry",
]
