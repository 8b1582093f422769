"""
Journal entry model (the booking header).

A journal entry owns an ordered set of lines. It starts as a
draft, becomes immutable when locked (posted), and can then
only be corrected by a reversal, which marks it cancelled.

locked_at is the authoritative "this entry is immutable"
signal. It is never cleared, not even on cancellation: it
records when the entry was originally posted.
"""

from datetime import date, datetime

from sqlalchemy import (
    String, Date, DateTime, ForeignKey, Integer,
    Enum as SAEnum, event, inspect,
)
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from booking_ledger.exceptions import ImmutableEntryError
from booking_ledger.models.base import Base
from booking_ledger.models.enums import JournalEntryStatus, enum_values
from booking_ledger.models.journal_entry_line import JournalEntryLine


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id"), nullable=False, index=True
    )
    # Groups the lines of one logical booking. An original and
    # its reversal get independent batch ids.
    batch_id: Mapped[str] = mapped_column(
        String(36), nullable=False, index=True
    )
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    # Contacts live outside the booking engine; no FK here.
    contact_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    beleg_id: Mapped[int | None] = mapped_column(
        ForeignKey("belege.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status: Mapped[JournalEntryStatus] = mapped_column(
        SAEnum(
            JournalEntryStatus,
            name="journal_entry_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=JournalEntryStatus.DRAFT,
        index=True,
    )
    locked_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    lines: Mapped[list[JournalEntryLine]] = relationship(
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=JournalEntryLine.id,
    )

    @property
    def is_locked(self) -> bool:
        return self.locked_at is not None

    def __repr__(self) -> str:
        return f"<JournalEntry {self.id} {self.batch_id} ({self.status.value})>"


# Maintained by the ORM on every flush.
ORM_MAINTAINED = frozenset({"updated_at"})

# The only status change a locked entry may still make: a reversal
# cancels the posted original.
LOCKED_STATUS_TRANSITIONS = frozenset({
    (JournalEntryStatus.POSTED, JournalEntryStatus.CANCELLED),
})


def _committed_value(obj, key):
    """Value of an attribute as it was before the pending flush."""
    history = inspect(obj).attrs[key].load_history()
    if history.deleted:
        return history.deleted[0]
    if history.unchanged:
        return history.unchanged[0]
    return None


def _was_locked(session: Session, entry: JournalEntry | None) -> bool:
    if entry is None or entry in session.new:
        return False
    return _committed_value(entry, "locked_at") is not None


def _owning_entry(session: Session, line: JournalEntryLine):
    """The entry a line belonged to before the pending flush."""
    entry_id = _committed_value(line, "journal_entry_id")
    if entry_id is None:
        if line.journal_entry is not None:
            return line.journal_entry
        entry_id = line.journal_entry_id
    if entry_id is None:
        return None
    return session.get(JournalEntry, entry_id)


@event.listens_for(Session, "before_flush")
def reject_changes_to_locked_entries(session, flush_context, instances):
    """
    Refuse any ORM flush that alters a locked journal entry.

    Lines of a locked entry cannot be added, changed or removed,
    and a locked entry cannot be deleted. Its status may only go
    from posted to cancelled. A reversal is inserted together
    with its lines in one flush, so it is still pending when
    this runs and passes.

    Only unit-of-work flushes pass through here. Core statements
    such as session.execute(update(JournalEntry)) bypass the
    hook and are not guarded.
    """
    for obj in session.dirty:
        if isinstance(obj, JournalEntry) and _was_locked(session, obj):
            state = inspect(obj)
            changed = {
                attr.key for attr in state.attrs
                if attr.key not in ORM_MAINTAINED
                and attr.history.has_changes()
            }
            if "status" in changed:
                old_status = _committed_value(obj, "status")
                if (old_status, obj.status) not in LOCKED_STATUS_TRANSITIONS:
                    raise ImmutableEntryError(
                        f"Journal entry {obj.id} is locked; status cannot "
                        f"change from {old_status.value} to {obj.status.value}"
                    )
                changed.discard("status")
            if changed:
                raise ImmutableEntryError(
                    f"Journal entry {obj.id} is locked; "
                    f"cannot change {', '.join(sorted(changed))}"
                )
        elif isinstance(obj, JournalEntryLine):
            if session.is_modified(obj) and _was_locked(
                session, _owning_entry(session, obj)
            ):
                raise ImmutableEntryError(
                    f"Line {obj.id} belongs to a locked journal entry"
                )

    for obj in session.deleted:
        if isinstance(obj, JournalEntry) and _was_locked(session, obj):
            raise ImmutableEntryError(
                f"Journal entry {obj.id} is locked and cannot be deleted"
            )
        if isinstance(obj, JournalEntryLine) and _was_locked(
            session, _owning_entry(session, obj)
        ):
            raise ImmutableEntryError(
                f"Line {obj.id} belongs to a locked journal entry"
            )

    for obj in session.new:
        if isinstance(obj, JournalEntryLine):
            entry = _owning_entry(session, obj)
            if _was_locked(session, entry):
                raise ImmutableEntryError(
                    f"Cannot add lines to locked journal entry {entry.id}"
                )
