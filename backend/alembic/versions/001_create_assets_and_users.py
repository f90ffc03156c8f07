"""Create assets and users tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `assets` catalogue table and the `users` credentials table.
How:   Portable column types only (String/Text/JSON/BigInteger), so the same
       revision applies to PostgreSQL and to SQLite for local runs.

Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "assets",
        sa.Column(
            "id",
            sa.String(36),
            nullable=False,
            comment="Opaque unique identifier (UUID4 string)",
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),

        # Arrays of records, replaced whole on update
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),

        # Enum values stored as plain strings; the closed set lives in the app
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("category", sa.String(32), nullable=False),

        sa.Column(
            "added_at",
            sa.BigInteger(),
            nullable=False,
            comment="Creation time in epoch milliseconds (server-set)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # List endpoint orders by creation time
    op.create_index("idx_assets_added_at", "assets", ["added_at"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("username", sa.String(20), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("ix_users_username", "users", ["username"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
    op.drop_index("idx_assets_added_at", table_name="assets")
    op.drop_table("assets")
