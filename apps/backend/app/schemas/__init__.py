"""Pydantic schemas."""

from app.schemas.auth import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from app.schemas.customer import (
    CustomerCreate,
    CustomerEnvelope,
    CustomerListResponse,
    CustomerResponse,
    CustomerUpdate,
    DeleteResponse,
    Pagination,
)

__all__ = [
    # Auth
    "AuthResponse",
    "CurrentUserResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserResponse",
    # Customers
    "CustomerCreate",
    "CustomerEnvelope",
    "CustomerListResponse",
    "CustomerResponse",
    "CustomerUpdate",
    "DeleteResponse",
    "Pagination",
]
