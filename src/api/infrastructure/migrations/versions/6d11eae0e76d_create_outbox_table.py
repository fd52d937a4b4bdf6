"""create_outbox_table

Create the outbox table for the transactional outbox pattern.
This table stores committed changes that the relay still has to deliver
to the search index, the message bus and the realtime notifier.

Revision ID: 6d11eae0e76d
Revises: d71976bfc705
Create Date: 2026-09-14 10:15:40.081733

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "6d11eae0e76d"
down_revision: Union[str, Sequence[str], None] = "d71976bfc705"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "outbox",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column(
            "aggregate_type", sa.String(length=255), nullable=False
        ),  # e.g., "user"
        sa.Column(
            "aggregate_id", sa.String(length=26), nullable=False
        ),  # ULID of aggregate
        sa.Column("tenant_id", sa.String(length=64), nullable=False),
        sa.Column(
            "event_type", sa.String(length=255), nullable=False
        ),  # e.g., "UserCreated"
        sa.Column("payload", sa.JSON(), nullable=False),  # Minimal projection
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "processed_at", sa.DateTime(timezone=True), nullable=True
        ),  # NULL until delivered
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_outbox"),
    )
    # The relay scans pending entries oldest first
    op.create_index(
        "ix_outbox_pending",
        "outbox",
        ["occurred_at"],
        unique=False,
        postgresql_where=sa.text("processed_at IS NULL"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_outbox_pending", table_name="outbox")
    op.drop_table("outbox")
