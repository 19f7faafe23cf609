"""Customer persistence: CRUD helpers and the import sink."""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from packages.core.customer_import.errors import (
    CustomerStoreError,
    DuplicateAccountNumberError,
)
from packages.core.customer_import.models import CustomerPayload

from app.models.customer import Customer
from app.schemas.customer import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)

# SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

SEARCHABLE_COLUMNS = (
    Customer.name,
    Customer.account_number,
    Customer.phone,
    Customer.nominee,
    Customer.nid,
)

# Required columns a partial update may not clear
_NON_NULLABLE_FIELDS = ("name", "account_number", "phone", "status")


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell a unique-constraint violation apart from other integrity errors."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION
    # SQLite reports no SQLSTATE
    return "UNIQUE constraint failed" in str(orig)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ──────────────────────────────────────────────
# CRUD
# ──────────────────────────────────────────────


async def list_customers(
    session: AsyncSession,
    search: str = "",
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Customer], int]:
    """
    List customers newest first.

    Args:
        session: Database session.
        search: Case-insensitive substring matched against name, account
            number, phone, nominee and NID.
        page: 1-based page number.
        limit: Page size.

    Returns:
        The requested page and the total number of matching customers.
    """
    query = select(Customer)
    search = search.strip()
    if search:
        pattern = f"%{_escape_like(search)}%"
        query = query.where(
            or_(*(column.ilike(pattern, escape="\\") for column in SEARCHABLE_COLUMNS))
        )

    total = await session.scalar(
        select(func.count()).select_from(query.subquery())
    )

    result = await session.execute(
        query.order_by(Customer.created_at.desc(), Customer.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def get_customer(session: AsyncSession, customer_id: UUID) -> Customer | None:
    """Fetch one customer by id."""
    return await session.get(Customer, customer_id)


async def create_customer(
    session: AsyncSession,
    data: CustomerCreate,
    created_by: UUID | None,
) -> Customer:
    """
    Create a customer.

    Raises:
        DuplicateAccountNumberError: If the account number is taken.
    """
    customer = Customer(**data.model_dump(), created_by=created_by)
    session.add(customer)
    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        if is_unique_violation(e):
            raise DuplicateAccountNumberError(data.account_number) from e
        raise

    await session.refresh(customer)
    logger.info(f"Customer {customer.id} created by {created_by}")
    return customer


async def update_customer(
    session: AsyncSession,
    customer_id: UUID,
    data: CustomerUpdate,
) -> Customer | None:
    """
    Apply a partial update to a customer.

    Returns None if the customer does not exist. The update is applied in
    one statement, so a duplicate account number changes nothing.

    Raises:
        DuplicateAccountNumberError: If the new account number is taken.
    """
    customer = await session.get(Customer, customer_id)
    if customer is None:
        return None

    changes = data.model_dump(exclude_unset=True)
    for field in _NON_NULLABLE_FIELDS:
        if changes.get(field, ...) is None:
            changes.pop(field)

    for field, value in changes.items():
        setattr(customer, field, value)
    customer.updated_at = func.now()

    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        if is_unique_violation(e):
            raise DuplicateAccountNumberError(changes.get("account_number", "")) from e
        raise

    await session.refresh(customer)
    logger.info(f"Customer {customer.id} updated: {sorted(changes)}")
    return customer


async def delete_customer(session: AsyncSession, customer_id: UUID) -> bool:
    """Hard-delete a customer. Returns False if it did not exist."""
    customer = await session.get(Customer, customer_id)
    if customer is None:
        return False

    await session.delete(customer)
    await session.flush()
    logger.info(f"Customer {customer_id} deleted")
    return True


# ──────────────────────────────────────────────
# Import sink
# ──────────────────────────────────────────────


class SqlAlchemyCustomerSink:
    """
    ``CustomerSink`` backed by the customers table.

    Every insert is committed on its own, so a rejected row never rolls back
    rows imported before it.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def insert(
        self,
        payload: CustomerPayload,
        created_by: UUID | None,
    ) -> None:
        self._session.add(Customer(**payload.model_dump(), created_by=created_by))
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            if is_unique_violation(e):
                raise DuplicateAccountNumberError(payload.account_number) from e
            raise CustomerStoreError(str(e.orig)) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise CustomerStoreError(str(e)) from e
