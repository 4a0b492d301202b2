"""create availability tables

Revision ID: 3f6c2a9d41b7
Revises:
Create Date: 2026-10-17

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from slotkeeper.adapters.db.sa_types import UTCDateTime

# deal with alembic stuff
# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f6c2a9d41b7"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "slots",
        sa.Column(
            "id",
            sa.String(length=64),
            nullable=False,
            comment="Slot identifier (ULID by default).",
        ),
        sa.Column(
            "provider_id",
            sa.String(length=200),
            nullable=False,
            comment="Owning provider.",
        ),
        sa.Column(
            "slot_date",
            sa.Date(),
            nullable=False,
            comment="Provider-local calendar date of the slot.",
        ),
        sa.Column(
            "start_time",
            sa.Time(),
            nullable=False,
            comment="Provider-local start time, normalized to whole seconds.",
        ),
        sa.Column(
            "end_time",
            sa.Time(),
            nullable=False,
            comment="start_time plus the service duration (wraps past midnight).",
        ),
        sa.Column(
            "is_booked",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
            comment="Set by the booking side; booked slots are immutable here.",
        ),
        sa.Column(
            "created_at",
            UTCDateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="Server-assigned UTC timestamp.",
        ),
        sa.CheckConstraint("length(id) >= 1", name=op.f("ck_slots_id_not_empty")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_slots")),
        sa.UniqueConstraint(
            "provider_id",
            "slot_date",
            "start_time",
            name=op.f("uq_slots_provider_id_slot_date_start_time"),
        ),
        comment="Bookable time slots. Deleted rows are gone for good.",
    )
    op.create_index(
        op.f("ix_slots_provider_id_slot_date"),
        "slots",
        ["provider_id", "slot_date"],
        unique=False,
    )

    op.create_table(
        "working_days",
        sa.Column("provider_id", sa.String(length=200), nullable=False),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column(
            "is_working",
            sa.Boolean(),
            nullable=False,
            comment="True when the date accepts slots. Independent of slot rows.",
        ),
        sa.PrimaryKeyConstraint(
            "provider_id", "work_date", name=op.f("pk_working_days")
        ),
        comment="Per-provider working-day map.",
    )

    op.create_table(
        "providers",
        sa.Column("provider_id", sa.String(length=200), nullable=False),
        sa.Column(
            "is_visible",
            sa.Boolean(),
            server_default=sa.text("true"),
            nullable=False,
            comment="Whether customers can discover the provider at all.",
        ),
        sa.PrimaryKeyConstraint("provider_id", name=op.f("pk_providers")),
        comment="Provider-level flags. Missing rows read as visible.",
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("providers")
    op.drop_table("working_days")
    op.drop_index(op.f("ix_slots_provider_id_slot_date"), table_name="slots")
    op.drop_table("slots")
