"""Customer CRUD API routes."""

import logging
import math
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from packages.core.customer_import.errors import DuplicateAccountNumberError

from app.core.constants import (
    ACCOUNT_NUMBER_EXISTS_MESSAGE,
    CUSTOMER_NOT_FOUND_MESSAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)
from app.core.dependencies import AsyncSessionDep, CurrentUser
from app.schemas.customer import (
    CustomerCreate,
    CustomerEnvelope,
    CustomerListResponse,
    CustomerResponse,
    CustomerUpdate,
    DeleteResponse,
    Pagination,
)
from app.services import customer_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=CUSTOMER_NOT_FOUND_MESSAGE,
    )


def _duplicate_account() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=ACCOUNT_NUMBER_EXISTS_MESSAGE,
    )


def _store_failure(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=message,
    )


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    current_user: CurrentUser,
    session: AsyncSessionDep,
    search: str = "",
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> CustomerListResponse:
    """List customers with search and pagination."""
    try:
        customers, total = await customer_service.list_customers(
            session, search=search, page=page, limit=limit
        )
    except SQLAlchemyError:
        logger.exception("Customers fetch error")
        raise _store_failure("Failed to fetch customers")

    return CustomerListResponse(
        data=[CustomerResponse.model_validate(c) for c in customers],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            totalPages=math.ceil(total / limit),
        ),
    )


@router.post(
    "",
    response_model=CustomerEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_customer(
    payload: CustomerCreate,
    current_user: CurrentUser,
    session: AsyncSessionDep,
) -> CustomerEnvelope:
    """
    Create a new customer owned by the current user.

    Raises:
        HTTPException 409: If the account number already exists.
    """
    created_by = current_user.id
    try:
        customer = await customer_service.create_customer(session, payload, created_by)
    except DuplicateAccountNumberError:
        raise _duplicate_account()
    except SQLAlchemyError:
        logger.exception("Customer creation error")
        raise _store_failure("Failed to create customer")

    return CustomerEnvelope(data=CustomerResponse.model_validate(customer))


@router.get("/{customer_id}", response_model=CustomerEnvelope)
async def get_customer(
    customer_id: UUID,
    current_user: CurrentUser,
    session: AsyncSessionDep,
) -> CustomerEnvelope:
    """Get a single customer."""
    try:
        customer = await customer_service.get_customer(session, customer_id)
    except SQLAlchemyError:
        logger.exception("Customer fetch error")
        raise _store_failure("Failed to fetch customer")

    if customer is None:
        raise _not_found()

    return CustomerEnvelope(data=CustomerResponse.model_validate(customer))


@router.put("/{customer_id}", response_model=CustomerEnvelope)
async def update_customer(
    customer_id: UUID,
    payload: CustomerUpdate,
    current_user: CurrentUser,
    session: AsyncSessionDep,
) -> CustomerEnvelope:
    """
    Update a customer.

    Raises:
        HTTPException 404: If the customer does not exist.
        HTTPException 409: If the new account number already exists.
    """
    try:
        customer = await customer_service.update_customer(session, customer_id, payload)
    except DuplicateAccountNumberError:
        raise _duplicate_account()
    except SQLAlchemyError:
        logger.exception("Customer update error")
        raise _store_failure("Failed to update customer")

    if customer is None:
        raise _not_found()

    return CustomerEnvelope(data=CustomerResponse.model_validate(customer))


@router.delete("/{customer_id}", response_model=DeleteResponse)
async def delete_customer(
    customer_id: UUID,
    current_user: CurrentUser,
    session: AsyncSessionDep,
) -> DeleteResponse:
    """Delete a customer permanently."""
    try:
        deleted = await customer_service.delete_customer(session, customer_id)
    except SQLAlchemyError:
        logger.exception("Customer delete error")
        raise _store_failure("Failed to delete customer")

    if not deleted:
        raise _not_found()

    return DeleteResponse(success=True)
