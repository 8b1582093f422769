"""
Pydantic schemas for bookings (journal entries).

These define the API contract. Amounts are integer cents;
floats are rejected outright so that the balance check never
sees a rounding error.
"""

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, Field

from booking_ledger.models.enums import EntryType, JournalEntryStatus


# --- Request Schemas ---

class BookingLineCreate(BaseModel):
    """A single debit or credit line of a booking."""
    account_id: int
    type: EntryType
    amount: int = Field(gt=0, strict=True)
    tax_key: str | None = Field(default=None, max_length=20)
    tax_amount: int = Field(default=0, ge=0, strict=True)


class BookingCreate(BaseModel):
    """
    A complete booking: header fields plus the lines that
    must balance. Also used to replace the contents of a draft.
    """
    booking_date: date = Field(
        validation_alias=AliasChoices("date", "booking_date")
    )
    description: str = Field(min_length=3, max_length=255)
    contact_id: int | None = None
    beleg_id: int | None = None
    lines: list[BookingLineCreate] = Field(min_length=1)


class BookingFilter(BaseModel):
    """Query options for listing journal entries."""
    status: JournalEntryStatus | None = None
    search: str | None = None
    from_date: date | None = None
    to_date: date | None = None
    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


# --- Response Schemas ---

class JournalEntryLineResponse(BaseModel):
    id: int
    account_id: int
    type: EntryType
    amount: int
    tax_key: str | None
    tax_amount: int

    model_config = {"from_attributes": True}


class JournalEntryResponse(BaseModel):
    id: int
    batch_id: str
    booking_date: date
    description: str
    contact_id: int | None
    beleg_id: int | None
    status: JournalEntryStatus
    locked_at: datetime | None
    user_id: int | None
    created_at: datetime
    lines: list[JournalEntryLineResponse]

    model_config = {"from_attributes": True}
