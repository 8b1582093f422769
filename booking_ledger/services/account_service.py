"""
Account service — the chart of accounts (ledger account registry).

Read-mostly: the booking engine looks accounts up here to make
sure every line points at an active account of the current
tenant. Accounts that carry booking lines are never deleted.
"""

import logging

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from booking_ledger.exceptions import (
    AccountInUseError,
    AccountNotFoundError,
    DuplicateAccountError,
)
from booking_ledger.models.enums import AccountType
from booking_ledger.models.journal_entry import JournalEntry
from booking_ledger.models.journal_entry_line import JournalEntryLine
from booking_ledger.models.ledger_account import Account
from booking_ledger.schemas.account import AccountCreate
from booking_ledger.services.audit import AuditAction, record_event
from booking_ledger.tenancy import TenantContext

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, db: Session):
        self.db = db

    def create_account(
        self, ctx: TenantContext, request: AccountCreate
    ) -> Account:
        """
        Add an account to the tenant's chart of accounts.

        Raises DuplicateAccountError if the code is taken in
        this tenant. Other tenants may use the same code.
        """
        existing = self.db.execute(
            select(Account).where(
                Account.tenant_id == ctx.tenant_id,
                Account.code == request.code,
            )
        ).scalar_one_or_none()

        if existing:
            raise DuplicateAccountError(request.code)

        account = Account(
            tenant_id=ctx.tenant_id,
            code=request.code,
            name=request.name,
            account_type=request.account_type,
            tax_key_code=request.tax_key_code,
            is_system=request.is_system,
        )
        self.db.add(account)
        self.db.flush()
        record_event(
            self.db, ctx, AuditAction.ACCOUNT_CREATED, "account", account.id,
            {"code": account.code, "type": account.account_type.value},
        )
        return account

    def find_by_id(self, ctx: TenantContext, account_id: int) -> Account:
        account = self.db.execute(
            select(Account).where(
                Account.tenant_id == ctx.tenant_id,
                Account.id == account_id,
            )
        ).scalar_one_or_none()

        if not account:
            raise AccountNotFoundError(account_id)
        return account

    def find_many(
        self, ctx: TenantContext, account_ids: set[int]
    ) -> dict[int, Account]:
        """
        Look up several accounts at once, keyed by id.

        Raises AccountNotFoundError naming every id that does
        not exist in this tenant.
        """
        accounts = self.db.execute(
            select(Account).where(
                Account.tenant_id == ctx.tenant_id,
                Account.id.in_(account_ids),
            )
        ).scalars().all()

        accounts_by_id = {a.id: a for a in accounts}
        missing = set(account_ids) - set(accounts_by_id)
        if missing:
            raise AccountNotFoundError(missing)
        return accounts_by_id

    def list_accounts(
        self,
        ctx: TenantContext,
        account_type: AccountType | None = None,
    ) -> list[Account]:
        """Return the tenant's accounts ordered by code."""
        query = select(Account).where(Account.tenant_id == ctx.tenant_id)
        if account_type is not None:
            query = query.where(Account.account_type == account_type)
        return list(
            self.db.execute(query.order_by(Account.code)).scalars().all()
        )

    def deactivate_account(
        self, ctx: TenantContext, account_id: int
    ) -> Account:
        """Stop new lines from being booked against an account."""
        account = self.find_by_id(ctx, account_id)
        if account.is_active:
            account.is_active = False
            record_event(
                self.db, ctx, AuditAction.ACCOUNT_DEACTIVATED,
                "account", account.id, {"code": account.code},
            )
            self.db.flush()
        return account

    def delete_account(self, ctx: TenantContext, account_id: int) -> None:
        """
        Delete an account that has never been booked against.

        System accounts and accounts referenced by any journal
        entry line (posted or draft) are refused with
        AccountInUseError. Deactivate those instead.
        """
        account = self.find_by_id(ctx, account_id)

        if account.is_system:
            raise AccountInUseError(account.code, "it is a system account")

        posted, drafts = self._count_references(ctx, account_id)
        if posted:
            raise AccountInUseError(
                account.code, f"referenced by {posted} posted line(s)"
            )
        if drafts:
            raise AccountInUseError(
                account.code, f"referenced by {drafts} draft line(s)"
            )

        record_event(
            self.db, ctx, AuditAction.ACCOUNT_DELETED, "account", account.id,
            {"code": account.code},
        )
        self.db.delete(account)
        self.db.flush()
        logger.info(
            "Deleted account %s (tenant=%s)", account.code, ctx.tenant_id
        )

    def _count_references(
        self, ctx: TenantContext, account_id: int
    ) -> tuple[int, int]:
        """Number of (locked, draft) lines booked against an account."""
        base = (
            select(func.count(JournalEntryLine.id))
            .join(JournalEntry, JournalEntryLine.journal_entry_id == JournalEntry.id)
            .where(
                JournalEntry.tenant_id == ctx.tenant_id,
                JournalEntryLine.account_id == account_id,
            )
        )
        locked = self.db.execute(
            base.where(JournalEntry.locked_at.is_not(None))
        ).scalar()
        drafts = self.db.execute(
            base.where(JournalEntry.locked_at.is_(None))
        ).scalar()
        return locked, drafts
