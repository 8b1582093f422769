"""
Typed errors raised by the booking engine and its collaborators.

Every error is a ValueError so callers that only care about
"the request was rejected" can keep catching ValueError. The
HTTP layer maps the not-found family to 404 and everything
else to 422. Messages always name the violated rule.
"""


class BookingError(ValueError):
    """Base class for all rejected ledger operations."""


class NotFoundError(BookingError):
    """A referenced row does not exist in the current tenant."""


class EntryNotFoundError(NotFoundError):
    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"Journal entry {entry_id} not found")


class AccountNotFoundError(NotFoundError):
    def __init__(self, account_ids):
        if isinstance(account_ids, int):
            account_ids = [account_ids]
        self.account_ids = sorted(account_ids)
        ids = ", ".join(str(i) for i in self.account_ids)
        super().__init__(f"Accounts not found: {ids}")


class SourceDocumentNotFoundError(NotFoundError):
    def __init__(self, beleg_id: int):
        self.beleg_id = beleg_id
        super().__init__(f"Beleg {beleg_id} not found")


class TenantNotFoundError(NotFoundError):
    def __init__(self, tenant_id):
        self.tenant_id = tenant_id
        super().__init__(f"Tenant {tenant_id} not found")


class UnbalancedEntryError(BookingError):
    """Debit and credit sums of an entry differ."""

    def __init__(self, debit_sum: int, credit_sum: int):
        self.debit_sum = debit_sum
        self.credit_sum = credit_sum
        super().__init__(
            f"Booking is not balanced: debit={debit_sum}, "
            f"credit={credit_sum}, difference={debit_sum - credit_sum}"
        )


class AlreadyLockedError(BookingError):
    def __init__(self, entry_id: int, locked_at):
        self.entry_id = entry_id
        self.locked_at = locked_at
        super().__init__(
            f"Journal entry {entry_id} is already locked "
            f"(posted at {locked_at.isoformat()})"
        )


class NotLockedError(BookingError):
    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(
            f"Journal entry {entry_id} is a draft; drafts are deleted, "
            f"only locked bookings can be reversed"
        )


class AlreadyCancelledError(BookingError):
    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(
            f"Journal entry {entry_id} has already been reversed"
        )


class EntryLockedError(BookingError):
    """A draft-only operation was attempted on a locked entry."""

    def __init__(self, entry_id: int, action: str):
        self.entry_id = entry_id
        super().__init__(
            f"Journal entry {entry_id} is locked and cannot be {action}; "
            f"reverse it instead"
        )


class ImmutableEntryError(BookingError):
    """A write path tried to alter a locked entry behind the service's back."""


class InactiveAccountError(BookingError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Account {code} is not active")


class DuplicateAccountError(BookingError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Account with code '{code}' already exists")


class AccountInUseError(BookingError):
    def __init__(self, code: str, reason: str):
        self.code = code
        super().__init__(f"Account {code} cannot be deleted: {reason}")
