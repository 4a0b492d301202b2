"""SLOTKEEPER

An availability scheduling engine for service providers. It decides which
calendar days a provider works, which time slots are bookable on those days,
and how bulk generation, single-slot edits, and external changes (bookings,
periodic refresh) are reconciled without corrupting state.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
