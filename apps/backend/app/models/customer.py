"""Customer model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from packages.core.customer_import.models import CustomerStatus

from app.db.base import Base

ACCOUNT_NUMBER_CONSTRAINT = "uq_customers_account_number"


class Customer(Base):
    """
    A customer record managed by CRM users.

    ``account_number`` is unique across all customers; inserts and updates
    that would duplicate it are rejected by the database.
    """

    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("account_number", name=ACCOUNT_NUMBER_CONSTRAINT),
    )

    # ── Primary key ──────────────────────────
    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )

    # ── Contact details ──────────────────────
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    account_number: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    phone: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    nominee: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    nid: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="National ID number",
    )
    status: Mapped[CustomerStatus] = mapped_column(
        Enum(
            CustomerStatus,
            name="customer_status",
            create_constraint=True,
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        default=CustomerStatus.ACTIVE,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    photo_url: Mapped[str | None] = mapped_column(
        String(1024),
        nullable=True,
        comment="Public URL of the customer photo in object storage",
    )

    # ── Provenance ───────────────────────────
    created_by: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="NULL for customers created outside an authenticated session",
    )

    # ── Timestamps ───────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # ── Relationships ────────────────────────
    creator: Mapped["User | None"] = relationship(
        "User",
        back_populates="customers",
    )

    def __repr__(self) -> str:
        return f"<Customer {self.account_number!r} {self.name!r}>"
