"""SQLAlchemy models."""

from app.models.user import User
from app.models.customer import ACCOUNT_NUMBER_CONSTRAINT, Customer

__all__ = [
    "User",
    "Customer",
    "ACCOUNT_NUMBER_CONSTRAINT",
]
