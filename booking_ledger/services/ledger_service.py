"""
Ledger service — read-only projections over the journal.

Balances are never stored; they are always folded from lines.
Only lines of entries that were locked count: drafts are
excluded, while a cancelled original and its reversal are both
summed, so the pair nets to zero without any special case.

Sign convention:
    ASSET, EXPENSE:               balance = debits - credits
    LIABILITY, EQUITY, REVENUE:   balance = credits - debits
"""

from datetime import date

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from booking_ledger.models.enums import (
    AccountType,
    DEBIT_NORMAL_TYPES,
    EntryType,
)
from booking_ledger.models.journal_entry import JournalEntry
from booking_ledger.models.journal_entry_line import JournalEntryLine
from booking_ledger.schemas.ledger import (
    AccountBalanceResponse,
    AccountLedgerResponse,
    AccountLedgerRow,
    IntegrityReport,
    TrialBalanceResponse,
    TrialBalanceRow,
)
from booking_ledger.services.account_service import AccountService
from booking_ledger.tenancy import TenantContext


def signed_balance(account_type: AccountType, debits: int, credits: int) -> int:
    """Balance of an account on its normal side."""
    if account_type in DEBIT_NORMAL_TYPES:
        return debits - credits
    return credits - debits


_debit_amount = case(
    (JournalEntryLine.entry_type == EntryType.DEBIT, JournalEntryLine.amount),
    else_=0,
)
_credit_amount = case(
    (JournalEntryLine.entry_type == EntryType.CREDIT, JournalEntryLine.amount),
    else_=0,
)


class LedgerService:

    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountService(db)

    def _posted_totals(
        self,
        ctx: TenantContext,
        account_id: int | None = None,
        as_of: date | None = None,
        before: date | None = None,
    ) -> dict[int, tuple[int, int]]:
        """(debits, credits) per account over locked entries."""
        query = (
            select(
                JournalEntryLine.account_id,
                func.coalesce(func.sum(_debit_amount), 0),
                func.coalesce(func.sum(_credit_amount), 0),
            )
            .join(JournalEntry, JournalEntryLine.journal_entry_id == JournalEntry.id)
            .where(
                JournalEntry.tenant_id == ctx.tenant_id,
                JournalEntry.locked_at.is_not(None),
            )
            .group_by(JournalEntryLine.account_id)
        )
        if account_id is not None:
            query = query.where(JournalEntryLine.account_id == account_id)
        if as_of is not None:
            query = query.where(JournalEntry.booking_date <= as_of)
        if before is not None:
            query = query.where(JournalEntry.booking_date < before)

        # SUM over BIGINT comes back as Decimal on PostgreSQL
        return {
            acc_id: (int(debits), int(credits))
            for acc_id, debits, credits in self.db.execute(query).all()
        }

    def get_account_balance(
        self,
        ctx: TenantContext,
        account_id: int,
        as_of: date | None = None,
    ) -> int:
        """
        Balance of one account in cents, from posted lines.

        Raises AccountNotFoundError for unknown accounts.
        """
        account = self.accounts.find_by_id(ctx, account_id)
        debits, credits = self._posted_totals(
            ctx, account_id=account_id, as_of=as_of
        ).get(account_id, (0, 0))
        return signed_balance(account.account_type, debits, credits)

    def get_balances(
        self, ctx: TenantContext, as_of: date | None = None
    ) -> list[AccountBalanceResponse]:
        """Every account of the tenant with its balance."""
        totals = self._posted_totals(ctx, as_of=as_of)
        balances = []
        for account in self.accounts.list_accounts(ctx):
            debits, credits = totals.get(account.id, (0, 0))
            balances.append(AccountBalanceResponse(
                account_id=account.id,
                account_code=account.code,
                account_name=account.name,
                account_type=account.account_type,
                balance=signed_balance(account.account_type, debits, credits),
            ))
        return balances

    def get_account_ledger(
        self,
        ctx: TenantContext,
        account_id: int,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> AccountLedgerResponse:
        """
        Account sheet: posted lines with a running balance.

        The running balance starts from the balance of everything
        booked before from_date.
        """
        account = self.accounts.find_by_id(ctx, account_id)

        opening = 0
        if from_date is not None:
            debits, credits = self._posted_totals(
                ctx, account_id=account_id, before=from_date
            ).get(account_id, (0, 0))
            opening = signed_balance(account.account_type, debits, credits)

        query = (
            select(JournalEntryLine, JournalEntry)
            .join(JournalEntry, JournalEntryLine.journal_entry_id == JournalEntry.id)
            .where(
                JournalEntry.tenant_id == ctx.tenant_id,
                JournalEntry.locked_at.is_not(None),
                JournalEntryLine.account_id == account_id,
            )
            .order_by(JournalEntry.booking_date, JournalEntryLine.id)
        )
        if from_date is not None:
            query = query.where(JournalEntry.booking_date >= from_date)
        if to_date is not None:
            query = query.where(JournalEntry.booking_date <= to_date)

        rows = []
        running = opening
        total_debit = 0
        total_credit = 0
        for line, entry in self.db.execute(query).all():
            debit = line.amount if line.entry_type == EntryType.DEBIT else 0
            credit = line.amount if line.entry_type == EntryType.CREDIT else 0
            total_debit += debit
            total_credit += credit
            running += signed_balance(account.account_type, debit, credit)
            rows.append(AccountLedgerRow(
                line_id=line.id,
                journal_entry_id=entry.id,
                booking_date=entry.booking_date,
                description=entry.description,
                debit=debit,
                credit=credit,
                balance=running,
            ))

        return AccountLedgerResponse(
            account_id=account.id,
            account_code=account.code,
            account_type=account.account_type,
            from_date=from_date,
            to_date=to_date,
            opening_balance=opening,
            rows=rows,
            total_debit=total_debit,
            total_credit=total_credit,
            closing_balance=running,
        )

    def get_trial_balance(
        self, ctx: TenantContext, as_of: date | None = None
    ) -> TrialBalanceResponse:
        """
        Debit and credit totals per account (Summen- und Saldenliste).

        Accounts without posted activity are left out. Grand
        totals must match; is_balanced says whether they do.
        """
        totals = self._posted_totals(ctx, as_of=as_of)
        rows = []
        for account in self.accounts.list_accounts(ctx):
            if account.id not in totals:
                continue
            debits, credits = totals[account.id]
            rows.append(TrialBalanceRow(
                account_id=account.id,
                account_code=account.code,
                account_name=account.name,
                account_type=account.account_type,
                total_debit=debits,
                total_credit=credits,
                balance=signed_balance(account.account_type, debits, credits),
            ))

        total_debit = sum(row.total_debit for row in rows)
        total_credit = sum(row.total_credit for row in rows)
        return TrialBalanceResponse(
            as_of=as_of,
            rows=rows,
            total_debit=total_debit,
            total_credit=total_credit,
            is_balanced=total_debit == total_credit,
        )

    def check_integrity(self, ctx: TenantContext) -> IntegrityReport:
        """
        Verify the journal as a whole.

        Posted debits must equal posted credits, and every single
        entry (drafts included) must balance on its own.
        """
        totals = self._posted_totals(ctx)
        total_debits = sum(d for d, _ in totals.values())
        total_credits = sum(c for _, c in totals.values())

        unbalanced = self.db.execute(
            select(JournalEntry.id)
            .join(JournalEntryLine, JournalEntryLine.journal_entry_id == JournalEntry.id)
            .where(JournalEntry.tenant_id == ctx.tenant_id)
            .group_by(JournalEntry.id)
            .having(func.sum(_debit_amount) != func.sum(_credit_amount))
            .order_by(JournalEntry.id)
        ).scalars().all()

        return IntegrityReport(
            total_debits=total_debits,
            total_credits=total_credits,
            difference=total_debits - total_credits,
            is_balanced=total_debits == total_credits and not unbalanced,
            unbalanced_entry_ids=list(unbalanced),
        )
