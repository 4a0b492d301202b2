"""Availability schema.

Defines the three tables behind the SQLAlchemy adapters:

- ``slots``: one row per bookable slot.
- ``working_days``: the per-provider working-day map, one row per date.
- ``providers``: the provider's discoverability flag.

Constraints (enforced here):

| Constraint                                   | Purpose                              |
|----------------------------------------------|--------------------------------------|
| UNIQUE(provider_id, slot_date, start_time)   | no two slots share a start on a day  |
| CHECK(length(id) >= 1)                       | slot ids are non-empty               |
| PK(provider_id, work_date)                   | one working flag per provider-date   |

Slot dates and times are naive and provider-local; ``created_at`` is UTC.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    Index,
    String,
    Table,
    Time,
    UniqueConstraint,
    text,
)

from .metadata import metadata
from .sa_types import UTCDateTime

__all__ = ["providers", "slots", "working_days"]

slots = Table(
    "slots",
    metadata,
    Column(
        "id",
        String(64),
        primary_key=True,
        comment="Slot identifier (ULID by default).",
    ),
    Column(
        "provider_id",
        String(200),
        nullable=False,
        comment="Owning provider.",
    ),
    Column(
        "slot_date",
        Date,
        nullable=False,
        comment="Provider-local calendar date of the slot.",
    ),
    Column(
        "start_time",
        Time,
        nullable=False,
        comment="Provider-local start time, normalized to whole seconds.",
    ),
    Column(
        "end_time",
        Time,
        nullable=False,
        comment="start_time plus the service duration (wraps past midnight).",
    ),
    Column(
        "is_booked",
        Boolean,
        nullable=False,
        server_default=text("false"),
        comment="Set by the booking side; booked slots are immutable here.",
    ),
    Column(
        "created_at",
        UTCDateTime(),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="Server-assigned UTC timestamp.",
    ),
    UniqueConstraint("provider_id", "slot_date", "start_time"),
    CheckConstraint("length(id) >= 1", name="id_not_empty"),
    Index(None, "provider_id", "slot_date"),
    comment="Bookable time slots. Deleted rows are gone for good.",
)

working_days = Table(
    "working_days",
    metadata,
    Column("provider_id", String(200), primary_key=True),
    Column("work_date", Date, primary_key=True),
    Column(
        "is_working",
        Boolean,
        nullable=False,
        comment="True when the date accepts slots. Independent of slot rows.",
    ),
    comment="Per-provider working-day map.",
)

providers = Table(
    "providers",
    metadata,
    Column("provider_id", String(200), primary_key=True),
    Column(
        "is_visible",
        Boolean,
        nullable=False,
        server_default=text("true"),
        comment="Whether customers can discover the provider at all.",
    ),
    comment="Provider-level flags. Missing rows read as visible.",
)
