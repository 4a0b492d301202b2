"""The `MetaData` every SLOTKEEPER table is declared on.

Its naming convention gives indexes and constraints the names the Alembic
migration spells out, e.g. ``ix_slots_provider_id_slot_date`` and
``uq_slots_provider_id_slot_date_start_time``, so ``create_all()`` in tests
and ``alembic upgrade`` in production build the same schema.
"""

from sqlalchemy import MetaData

NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "ix": "ix_%(table_name)s_%(column_0_N_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_N_name)s_%(referred_table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)
