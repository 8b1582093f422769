"""
Shared enumerations for database models.

Values are stored lowercase, matching the wire format of the
booking API ("debit", "credit", "draft", ...).
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


# Accounts whose balance grows with debits. All other types
# grow with credits.
DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})


class EntryType(str, enum.Enum):
    """Side of a journal entry line."""
    DEBIT = "debit"
    CREDIT = "credit"

    def swapped(self) -> "EntryType":
        """Return the opposite side."""
        if self is EntryType.DEBIT:
            return EntryType.CREDIT
        return EntryType.DEBIT


class JournalEntryStatus(str, enum.Enum):
    """Lifecycle of a journal entry: draft -> posted -> cancelled."""
    DRAFT = "draft"
    POSTED = "posted"
    CANCELLED = "cancelled"


class BelegStatus(str, enum.Enum):
    """Lifecycle of a source document (receipt, invoice)."""
    DRAFT = "draft"
    BOOKED = "booked"
    PAID = "paid"
    CANCELLED = "cancelled"


class BelegType(str, enum.Enum):
    """Outgoing, incoming, open or other source documents."""
    AUSGANG = "ausgang"
    EINGANG = "eingang"
    OFFEN = "offen"
    SONSTIGE = "sonstige"


def enum_values(enum_cls) -> list[str]:
    """Persist enum values rather than member names."""
    return [member.value for member in enum_cls]
