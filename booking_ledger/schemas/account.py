"""
Pydantic schemas for tenants and the chart of accounts.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from booking_ledger.models.enums import AccountType


# --- Tenant Schemas ---

class TenantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")


class TenantResponse(BaseModel):
    id: int
    name: str
    slug: str
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Account Schemas ---

class AccountCreate(BaseModel):
    """Request to add an account to the chart of accounts."""
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=255)
    account_type: AccountType
    tax_key_code: str | None = Field(default=None, max_length=20)
    is_system: bool = False


class AccountResponse(BaseModel):
    id: int
    code: str
    name: str
    account_type: AccountType
    tax_key_code: str | None
    is_system: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
