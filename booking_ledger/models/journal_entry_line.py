"""
Journal entry line model.

Each line is one debit or credit against a ledger account.
Lines belong to exactly one journal entry and are only ever
written together with it. Amounts are integer cents.
"""

from datetime import datetime

from sqlalchemy import (
    BigInteger, String, DateTime, ForeignKey, CheckConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from booking_ledger.models.base import Base
from booking_ledger.models.enums import EntryType, enum_values


class JournalEntryLine(Base):
    """
    A debit or credit line of a journal entry.

    Within an entry, the sum of debit amounts must equal the
    sum of credit amounts. This invariant is enforced by the
    BookingService, not by the model.
    """

    __tablename__ = "journal_entry_lines"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_journal_entry_lines_amount_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    journal_entry_id: Mapped[int] = mapped_column(
        ForeignKey("journal_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    entry_type: Mapped[EntryType] = mapped_column(
        SAEnum(EntryType, name="entry_type_enum", values_callable=enum_values),
        nullable=False,
    )
    # Amount in cents
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # e.g. "UST_19", "VST_19"
    tax_key: Mapped[str | None] = mapped_column(String(20), nullable=True)
    tax_amount: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    journal_entry: Mapped["JournalEntry"] = relationship(
        back_populates="lines"
    )
    account: Mapped["Account"] = relationship(back_populates="lines")

    @property
    def type(self) -> EntryType:
        return self.entry_type

    def __repr__(self) -> str:
        return f"<JournalEntryLine {self.entry_type.value} {self.amount}>"
