"""Create number_sequences table for document numbering

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2025-01-15 10:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema - One counter row per (account, doc type, period, prefix)"""
    op.create_table(
        "number_sequences",
        sa.Column("account_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("doc_type", sa.String(length=20), nullable=False),
        sa.Column("period_key", sa.String(length=20), nullable=False),
        sa.Column("prefix_key", sa.String(length=50), server_default="", nullable=False),
        sa.Column("last_value", sa.Integer(), server_default="0", nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("account_id", "doc_type", "period_key", "prefix_key", name="pk_number_sequences"),
        sa.CheckConstraint("last_value >= 0", name="ck_number_sequences_last_value_non_negative"),
    )


def downgrade() -> None:
    """Downgrade schema - Drop number_sequences table"""
    op.drop_table("number_sequences")
