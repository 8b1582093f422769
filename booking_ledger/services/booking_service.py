"""
Booking service — the double-entry journal engine.

This service enforces the bookkeeping rules (GoBD):
1. Every booking must balance (debits = credits, in cents)
2. Drafts are mutable and deletable; locked bookings are not
3. A locked booking is corrected only by a reversal (Storno),
   which posts a mirrored entry and cancels the original
4. Every read and write is scoped to one tenant

No other code writes journal entries. The service validates
everything before it writes anything and only flushes; the
caller commits or rolls back, so each operation is one
database transaction.
"""

import logging
import uuid
from datetime import datetime
from typing import Iterable, Protocol

from sqlalchemy import func, select, or_
from sqlalchemy.orm import Session, selectinload

from booking_ledger.exceptions import (
    AlreadyCancelledError,
    AlreadyLockedError,
    EntryLockedError,
    EntryNotFoundError,
    InactiveAccountError,
    NotLockedError,
    UnbalancedEntryError,
)
from booking_ledger.models.beleg import Beleg
from booking_ledger.models.enums import BelegStatus, EntryType, JournalEntryStatus
from booking_ledger.models.journal_entry import JournalEntry
from booking_ledger.models.journal_entry_line import JournalEntryLine
from booking_ledger.models.ledger_account import Account
from booking_ledger.schemas.booking import (
    BookingCreate,
    BookingFilter,
    BookingLineCreate,
)
from booking_ledger.services.account_service import AccountService
from booking_ledger.services.audit import AuditAction, record_event
from booking_ledger.services.beleg_service import BelegService
from booking_ledger.tenancy import TenantContext

logger = logging.getLogger(__name__)

# Column limit of journal_entries.description
DESCRIPTION_MAX_LENGTH = 255

# Put in front of the description of every reversal (GoBD audit text)
REVERSAL_PREFIX = "Storno: "


class AccountRegistry(Protocol):
    def find_many(
        self, ctx: TenantContext, account_ids: set[int]
    ) -> dict[int, Account]: ...


class SourceDocuments(Protocol):
    def find_by_id(self, ctx: TenantContext, beleg_id: int) -> Beleg: ...

    def update_status(
        self, ctx: TenantContext, beleg_id: int, status: BelegStatus
    ) -> Beleg: ...


def new_batch_id() -> str:
    return str(uuid.uuid4())


def sum_by_type(lines: Iterable) -> tuple[int, int]:
    """Return (debit total, credit total) of booking lines in cents."""
    debit_sum = 0
    credit_sum = 0
    for line in lines:
        if line.type == EntryType.DEBIT:
            debit_sum += line.amount
        else:
            credit_sum += line.amount
    return debit_sum, credit_sum


def assert_balanced(lines: Iterable) -> int:
    """
    Raise UnbalancedEntryError unless debits equal credits.

    Returns the balanced total.
    """
    debit_sum, credit_sum = sum_by_type(lines)
    if debit_sum != credit_sum:
        raise UnbalancedEntryError(debit_sum, credit_sum)
    return debit_sum


def mirror_line(line: JournalEntryLine) -> JournalEntryLine:
    """Copy of a line with debit and credit swapped."""
    return JournalEntryLine(
        account_id=line.account_id,
        entry_type=line.entry_type.swapped(),
        amount=line.amount,
        tax_key=line.tax_key,
        tax_amount=line.tax_amount,
    )


def build_reversal(original: JournalEntry, locked_at: datetime) -> JournalEntry:
    """
    Build the Storno entry for a locked journal entry.

    Only the named header fields are copied; id, timestamps and
    status never carry over. The reversal is posted right away.
    """
    description = f"{REVERSAL_PREFIX}{original.description}"
    return JournalEntry(
        tenant_id=original.tenant_id,
        batch_id=new_batch_id(),
        booking_date=original.booking_date,
        description=description[:DESCRIPTION_MAX_LENGTH],
        contact_id=original.contact_id,
        beleg_id=original.beleg_id,
        user_id=original.user_id,
        status=JournalEntryStatus.POSTED,
        locked_at=locked_at,
        lines=[mirror_line(line) for line in original.lines],
    )


class BookingService:
    """
    All journal writes pass through this service.

    The account registry and the source-document collaborator
    can be injected; by default they are built on the same
    session, so their writes join the same transaction.
    """

    def __init__(
        self,
        db: Session,
        accounts: AccountRegistry | None = None,
        belege: SourceDocuments | None = None,
    ):
        self.db = db
        self.accounts = accounts or AccountService(db)
        self.belege = belege or BelegService(db)

    # --- Write paths ---

    def create_booking(
        self, ctx: TenantContext, request: BookingCreate
    ) -> JournalEntry:
        """
        Create a balanced booking in draft status.

        Checks, in order:
        - debit total equals credit total
        - every account exists in the tenant and is active
        - the referenced Beleg, if any, exists in the tenant

        A linked Beleg still in draft is marked booked in the
        same transaction.
        """
        total = assert_balanced(request.lines)
        self._validate_accounts(ctx, request.lines)
        beleg = self._find_beleg(ctx, request.beleg_id)

        entry = JournalEntry(
            tenant_id=ctx.tenant_id,
            batch_id=new_batch_id(),
            booking_date=request.booking_date,
            description=request.description,
            contact_id=request.contact_id,
            beleg_id=request.beleg_id,
            status=JournalEntryStatus.DRAFT,
            locked_at=None,
            user_id=ctx.user_id,
            lines=[self._build_line(line) for line in request.lines],
        )
        self.db.add(entry)
        self.db.flush()

        self._mark_beleg_booked(ctx, beleg)
        record_event(
            self.db, ctx, AuditAction.ENTRY_CREATED, "journal_entry", entry.id,
            {"batch_id": entry.batch_id, "total": total},
        )
        self.db.flush()

        logger.info(
            "Created draft booking %s (tenant=%s, batch=%s, total=%s)",
            entry.id, ctx.tenant_id, entry.batch_id, total,
        )
        return entry

    def update_draft(
        self, ctx: TenantContext, entry_id: int, request: BookingCreate
    ) -> JournalEntry:
        """
        Replace the header fields and all lines of a draft.

        The new lines are validated exactly like a new booking.
        Locked entries raise EntryLockedError. A Beleg the draft
        no longer points at goes back to draft once nothing else
        books it.
        """
        entry = self._get_for_update(ctx, entry_id)
        if entry.locked_at is not None:
            logger.warning(
                "Rejected edit of locked booking %s (tenant=%s)",
                entry.id, ctx.tenant_id,
            )
            raise EntryLockedError(entry.id, "edited")

        total = assert_balanced(request.lines)
        self._validate_accounts(ctx, request.lines)
        beleg = self._find_beleg(ctx, request.beleg_id)

        previous_beleg_id = entry.beleg_id
        entry.booking_date = request.booking_date
        entry.description = request.description
        entry.contact_id = request.contact_id
        entry.beleg_id = request.beleg_id
        entry.lines = [self._build_line(line) for line in request.lines]
        self.db.flush()

        self._mark_beleg_booked(ctx, beleg)
        if previous_beleg_id != request.beleg_id:
            self._release_beleg(ctx, previous_beleg_id, entry.id)
        record_event(
            self.db, ctx, AuditAction.ENTRY_UPDATED, "journal_entry", entry.id,
            {"total": total, "lines": len(request.lines)},
        )
        self.db.flush()
        return entry

    def delete_draft(self, ctx: TenantContext, entry_id: int) -> None:
        """
        Delete a draft together with its lines.

        Anything that was ever locked raises EntryLockedError;
        posted bookings are reversed, never deleted. The linked
        Beleg goes back to draft once nothing else books it.
        """
        entry = self._get_for_update(ctx, entry_id)
        if entry.locked_at is not None:
            logger.warning(
                "Rejected delete of locked booking %s (tenant=%s)",
                entry.id, ctx.tenant_id,
            )
            raise EntryLockedError(entry.id, "deleted")

        record_event(
            self.db, ctx, AuditAction.ENTRY_DELETED, "journal_entry", entry.id,
            {"batch_id": entry.batch_id, "description": entry.description},
        )
        self._release_beleg(ctx, entry.beleg_id, entry.id)
        self.db.delete(entry)
        self.db.flush()
        logger.info(
            "Deleted draft booking %s (tenant=%s)", entry_id, ctx.tenant_id
        )

    def lock_booking(self, ctx: TenantContext, entry_id: int) -> JournalEntry:
        """
        Post a booking: make it immutable.

        The row is read FOR UPDATE so two concurrent locks of the
        same entry serialize; the second one sees locked_at and
        fails with AlreadyLockedError.
        """
        entry = self._get_for_update(ctx, entry_id, with_lines=False)
        if entry.locked_at is not None:
            logger.warning(
                "Booking %s is already locked (tenant=%s)",
                entry.id, ctx.tenant_id,
            )
            raise AlreadyLockedError(entry.id, entry.locked_at)

        entry.status = JournalEntryStatus.POSTED
        entry.locked_at = datetime.utcnow()
        record_event(
            self.db, ctx, AuditAction.ENTRY_LOCKED, "journal_entry", entry.id,
            {"locked_at": entry.locked_at},
        )
        self.db.flush()

        logger.info("Locked booking %s (tenant=%s)", entry.id, ctx.tenant_id)
        return entry

    def reverse_booking(
        self, ctx: TenantContext, entry_id: int
    ) -> JournalEntry:
        """
        Reverse (Storno) a locked booking.

        Posts a new entry with every line's debit and credit
        swapped and marks the original cancelled. The original
        keeps its locked_at. Returns the reversal.
        """
        original = self._get_for_update(ctx, entry_id)
        if original.locked_at is None:
            logger.warning(
                "Rejected reversal of draft %s (tenant=%s)",
                original.id, ctx.tenant_id,
            )
            raise NotLockedError(original.id)
        if original.status == JournalEntryStatus.CANCELLED:
            logger.warning(
                "Booking %s was already reversed (tenant=%s)",
                original.id, ctx.tenant_id,
            )
            raise AlreadyCancelledError(original.id)

        reversal = build_reversal(original, locked_at=datetime.utcnow())
        # A swap cannot unbalance a balanced entry; check anyway.
        total = assert_balanced(reversal.lines)

        self.db.add(reversal)
        original.status = JournalEntryStatus.CANCELLED
        self.db.flush()

        record_event(
            self.db, ctx, AuditAction.ENTRY_REVERSED, "journal_entry",
            original.id,
            {"reversal_id": reversal.id, "reversal_batch_id": reversal.batch_id,
             "total": total},
        )
        self.db.flush()

        logger.info(
            "Reversed booking %s with %s (tenant=%s)",
            original.id, reversal.id, ctx.tenant_id,
        )
        return reversal

    # --- Read paths ---

    def get_entry(self, ctx: TenantContext, entry_id: int) -> JournalEntry:
        entry = self.db.execute(
            select(JournalEntry)
            .where(
                JournalEntry.tenant_id == ctx.tenant_id,
                JournalEntry.id == entry_id,
            )
            .options(selectinload(JournalEntry.lines))
        ).scalar_one_or_none()

        if not entry:
            raise EntryNotFoundError(entry_id)
        return entry

    def list_entries(
        self, ctx: TenantContext, filters: BookingFilter | None = None
    ) -> list[JournalEntry]:
        """Return the tenant's journal entries, newest first."""
        filters = filters or BookingFilter()
        query = (
            select(JournalEntry)
            .where(JournalEntry.tenant_id == ctx.tenant_id)
            .options(selectinload(JournalEntry.lines))
        )

        if filters.status is not None:
            query = query.where(JournalEntry.status == filters.status)
        if filters.search:
            conditions = [JournalEntry.description.ilike(f"%{filters.search}%")]
            if filters.search.isdigit():
                conditions.append(JournalEntry.id == int(filters.search))
            query = query.where(or_(*conditions))
        if filters.from_date is not None:
            query = query.where(JournalEntry.booking_date >= filters.from_date)
        if filters.to_date is not None:
            query = query.where(JournalEntry.booking_date <= filters.to_date)

        query = (
            query.order_by(JournalEntry.id.desc())
            .limit(filters.limit)
            .offset(filters.offset)
        )
        return list(self.db.execute(query).scalars().all())

    # --- Helpers ---

    def _get_for_update(
        self, ctx: TenantContext, entry_id: int, with_lines: bool = True
    ) -> JournalEntry:
        """
        Load an entry of this tenant with a row lock.

        populate_existing makes the session re-read the row after
        the lock is granted instead of trusting a stale copy.
        """
        query = (
            select(JournalEntry)
            .where(
                JournalEntry.tenant_id == ctx.tenant_id,
                JournalEntry.id == entry_id,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        if with_lines:
            query = query.options(selectinload(JournalEntry.lines))

        entry = self.db.execute(query).scalar_one_or_none()
        if not entry:
            raise EntryNotFoundError(entry_id)
        return entry

    def _validate_accounts(
        self, ctx: TenantContext, lines: list[BookingLineCreate]
    ) -> None:
        account_ids = {line.account_id for line in lines}
        accounts = self.accounts.find_many(ctx, account_ids)
        for account in accounts.values():
            if not account.is_active:
                raise InactiveAccountError(account.code)

    def _find_beleg(
        self, ctx: TenantContext, beleg_id: int | None
    ) -> Beleg | None:
        if beleg_id is None:
            return None
        return self.belege.find_by_id(ctx, beleg_id)

    def _mark_beleg_booked(
        self, ctx: TenantContext, beleg: Beleg | None
    ) -> None:
        if beleg is not None and beleg.status == BelegStatus.DRAFT:
            self.belege.update_status(ctx, beleg.id, BelegStatus.BOOKED)

    def _release_beleg(
        self, ctx: TenantContext, beleg_id: int | None, entry_id: int
    ) -> None:
        """Return a booked Beleg to draft if no other entry references it."""
        if beleg_id is None:
            return
        other_refs = self.db.execute(
            select(func.count(JournalEntry.id)).where(
                JournalEntry.tenant_id == ctx.tenant_id,
                JournalEntry.beleg_id == beleg_id,
                JournalEntry.id != entry_id,
            )
        ).scalar()
        if other_refs:
            return
        beleg = self.belege.find_by_id(ctx, beleg_id)
        if beleg.status == BelegStatus.BOOKED:
            self.belege.update_status(ctx, beleg_id, BelegStatus.DRAFT)

    @staticmethod
    def _build_line(line: BookingLineCreate) -> JournalEntryLine:
        return JournalEntryLine(
            account_id=line.account_id,
            entry_type=line.type,
            amount=line.amount,
            tax_key=line.tax_key,
            tax_amount=line.tax_amount,
        )
