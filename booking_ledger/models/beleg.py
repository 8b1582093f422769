"""
Source document (Beleg) model.

A Beleg is the receipt or invoice a booking is based on.
The booking engine only reads it and flips its status from
draft to booked; everything else about it belongs to the
document management side of the application.
"""

from datetime import date, datetime

from sqlalchemy import (
    BigInteger, String, Date, DateTime, ForeignKey, UniqueConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from booking_ledger.models.base import Base
from booking_ledger.models.enums import BelegStatus, BelegType, enum_values


class Beleg(Base):
    __tablename__ = "belege"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "document_number", name="uq_belege_tenant_number"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[int] = mapped_column(
        ForeignKey("tenants.id"), nullable=False, index=True
    )
    document_number: Mapped[str] = mapped_column(String(50), nullable=False)
    document_type: Mapped[BelegType] = mapped_column(
        SAEnum(BelegType, name="beleg_type_enum", values_callable=enum_values),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    document_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    tax_amount: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0
    )
    status: Mapped[BelegStatus] = mapped_column(
        SAEnum(
            BelegStatus,
            name="beleg_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=BelegStatus.DRAFT,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Beleg {self.document_number} ({self.status.value})>"
