"""create_users_and_customers

Revision ID: 3c1d2e4f5a6b
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates the users table and the customers table with its
account number uniqueness constraint.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1d2e4f5a6b"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CUSTOMER_STATUSES = ("active", "inactive", "lead")


def upgrade() -> None:
    """Create users and customers."""

    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ── customers ─────────────────────────────────────────────────────
    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("account_number", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=False),
        sa.Column("nominee", sa.String(length=255), nullable=True),
        sa.Column("nid", sa.String(length=100), nullable=True, comment="National ID number"),
        sa.Column(
            "status",
            sa.Enum(*CUSTOMER_STATUSES, name="customer_status", create_constraint=True),
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "photo_url",
            sa.String(length=1024),
            nullable=True,
            comment="Public URL of the customer photo in object storage",
        ),
        sa.Column(
            "created_by",
            sa.Uuid(),
            nullable=True,
            comment="NULL for customers created outside an authenticated session",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("account_number", name="uq_customers_account_number"),
    )
    op.create_index("ix_customers_status", "customers", ["status"])
    op.create_index("ix_customers_created_by", "customers", ["created_by"])
    op.create_index("ix_customers_created_at", "customers", ["created_at"])


def downgrade() -> None:
    """Drop customers and users."""
    op.drop_index("ix_customers_created_at", table_name="customers")
    op.drop_index("ix_customers_created_by", table_name="customers")
    op.drop_index("ix_customers_status", table_name="customers")
    op.drop_table("customers")
    sa.Enum(name="customer_status").drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
