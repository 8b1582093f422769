"""
Pydantic schemas for source documents (Belege).
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from booking_ledger.models.enums import BelegStatus, BelegType


class BelegCreate(BaseModel):
    document_number: str = Field(min_length=1, max_length=50)
    document_type: BelegType
    title: str = Field(min_length=1, max_length=255)
    document_date: date
    amount: int = Field(default=0, ge=0, strict=True)
    tax_amount: int = Field(default=0, ge=0, strict=True)


class BelegResponse(BaseModel):
    id: int
    document_number: str
    document_type: BelegType
    title: str
    document_date: date
    amount: int
    tax_amount: int
    status: BelegStatus
    created_at: datetime

    model_config = {"from_attributes": True}
