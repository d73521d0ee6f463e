"""create_users_and_activities

Revision ID: 4c1d7e2a9b10
Revises:
Create Date: 2026-10-18 19:40:12.512774

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1d7e2a9b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create users and activities tables."""
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("display_name", sa.String(length=100), nullable=False),
        sa.Column("birthdate", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("profile_complete", sa.Boolean(), nullable=False),
        sa.Column("joined_date", sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_table(
        "activities",
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("date", sa.String(length=32), nullable=False),
        sa.Column("time", sa.String(length=16), nullable=False),
        sa.CheckConstraint("duration > 0", name="ck_activities_duration_positive"),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "id"),
    )
    # Snapshot reads per user, newest first
    op.create_index(
        "ix_activities_user_timestamp",
        "activities",
        ["user_id", "timestamp"],
        unique=False,
    )


def downgrade() -> None:
    """Drop users and activities tables."""
    op.drop_index("ix_activities_user_timestamp", table_name="activities")
    op.drop_table("activities")
    op.drop_table("users")
