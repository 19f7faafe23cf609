"""Customer schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from packages.core.customer_import.models import CustomerStatus


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CustomerCreate(BaseModel):
    """Request schema for creating a customer."""

    name: str = Field(..., min_length=1, max_length=255)
    account_number: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=50)
    nominee: str | None = Field(None, max_length=255)
    nid: str | None = Field(None, max_length=100)
    status: CustomerStatus = CustomerStatus.ACTIVE
    notes: str | None = None
    photo_url: str | None = Field(None, max_length=1024)

    @field_validator("name", "account_number", "phone", mode="before")
    @classmethod
    def strip_required(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("nominee", "nid", "notes", "photo_url", mode="before")
    @classmethod
    def blank_optional_to_none(cls, value: object) -> object:
        return _blank_to_none(value) if isinstance(value, str) else value

    @field_validator("status", mode="before")
    @classmethod
    def default_unknown_status(cls, value: object) -> object:
        # Unknown or missing status falls back to active
        if isinstance(value, str) and value in {s.value for s in CustomerStatus}:
            return value
        return CustomerStatus.ACTIVE


class CustomerUpdate(BaseModel):
    """
    Request schema for updating a customer.

    Only fields present in the request body are changed.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    account_number: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, min_length=1, max_length=50)
    nominee: str | None = Field(None, max_length=255)
    nid: str | None = Field(None, max_length=100)
    status: CustomerStatus | None = None
    notes: str | None = None
    photo_url: str | None = Field(None, max_length=1024)

    @field_validator("name", "account_number", "phone", mode="before")
    @classmethod
    def strip_required(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("nominee", "nid", "notes", "photo_url", mode="before")
    @classmethod
    def blank_optional_to_none(cls, value: object) -> object:
        return _blank_to_none(value) if isinstance(value, str) else value


class CustomerResponse(BaseModel):
    """Response schema for a customer record."""

    id: UUID
    name: str
    account_number: str
    phone: str
    nominee: str | None
    nid: str | None
    status: CustomerStatus
    notes: str | None
    photo_url: str | None
    created_by: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CustomerEnvelope(BaseModel):
    """Single customer wrapped in ``data``."""

    data: CustomerResponse


class Pagination(BaseModel):
    """Pagination block of a customer listing."""

    page: int
    limit: int
    total: int
    totalPages: int


class CustomerListResponse(BaseModel):
    """Paginated customer listing."""

    data: list[CustomerResponse]
    pagination: Pagination


class DeleteResponse(BaseModel):
    """Response schema for a successful delete."""

    success: bool = True
