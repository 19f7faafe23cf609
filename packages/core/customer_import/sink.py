"""Persistence contract the import pipeline writes customers through."""

from typing import Protocol
from uuid import UUID

from packages.core.customer_import.models import CustomerPayload


class CustomerSink(Protocol):
    """
    Store that accepts one customer at a time.

    Implementations must apply each insert atomically and raise:

    - ``DuplicateAccountNumberError`` when the account number already exists.
    - ``CustomerStoreError`` for any other rejection.

    A failed insert must leave previously inserted customers untouched.
    """

    async def insert(
        self,
        payload: CustomerPayload,
        created_by: UUID | None,
    ) -> None:
        """Insert one customer created by ``created_by``."""
        ...
