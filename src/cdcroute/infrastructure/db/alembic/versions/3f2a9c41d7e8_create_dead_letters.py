"""create dead_letters table

Revision ID: 3f2a9c41d7e8
Revises:
Create Date: 2026-10-18 09:12:41.513208

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f2a9c41d7e8"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JSON_TYPE = sa.JSON(none_as_null=True).with_variant(
    postgresql.JSONB(none_as_null=True), "postgresql"
)


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "dead_letters",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            sa.Identity(start=1),
            nullable=False,
            comment="Insertion order.",
        ),
        sa.Column(
            "routing_target",
            sa.String(length=255),
            nullable=False,
            comment="Collection the record was addressed at.",
        ),
        sa.Column("record_key", JSON_TYPE, nullable=True, comment="Record key."),
        sa.Column("record_value", JSON_TYPE, nullable=True, comment="Record value."),
        sa.Column(
            "error_type",
            sa.String(length=100),
            nullable=False,
            comment="Exception class name.",
        ),
        sa.Column("reason", sa.Text(), nullable=False, comment="Failure reason."),
        sa.Column(
            "failed_at",
            sa.DateTime(),
            nullable=False,
            comment="UTC time of the failure.",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_dead_letters")),
    )
    op.create_index(
        op.f("ix_dead_letters_routing_target"),
        "dead_letters",
        ["routing_target"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index(op.f("ix_dead_letters_routing_target"), table_name="dead_letters")
    op.drop_table("dead_letters")
