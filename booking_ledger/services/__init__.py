"""Business logic services."""

from booking_ledger.services.account_service import AccountService
from booking_ledger.services.beleg_service import BelegService
from booking_ledger.services.booking_service import BookingService
from booking_ledger.services.ledger_service import LedgerService
from booking_ledger.services.tenant_service import TenantService

__all__ = [
    "AccountService",
    "BelegService",
    "BookingService",
    "LedgerService",
    "TenantService",
]
