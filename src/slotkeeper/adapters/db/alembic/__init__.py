"""Packaged Alembic migration environment for SLOTKEEPER."""
