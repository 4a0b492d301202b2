"""Slot store port for SLOTKEEPER.

This module defines:
- The canonical `SlotRecord` DTO for a stored slot.
- The `SlotPatch` DTO for partial updates.
- The `SlotStore` port (framework-free ABC).

Contract overview
-----------------
Writes:
- `create` persists a new slot. A second slot with the same
  ``(provider_id, slot_date, start_time)`` raises `SlotTimeTakenError`.
- `update` applies a patch; unknown ids raise `SlotNotFoundError`.
- `delete` removes a slot; unknown ids raise `SlotNotFoundError`.
- `delete_range` removes every slot of a provider between two dates
  (inclusive) and returns how many were removed.

Reads:
- `get` returns the authoritative record (including ``is_booked``) or None.
- `list_by_date_range` returns the provider's slots between two dates
  (inclusive) ordered by ``(slot_date, start_time)``; booked slots included.

The store never checks the booked flag itself: refusing to touch booked
slots is a service-layer rule, evaluated against `get`/`list_by_date_range`
inside the same unit of work as the write.

Errors:
- `StoreUnavailableError`: transient driver/DB issues; callers may retry.
"""

import abc
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, time

from .unsettable import UNSET, Unsettable


@dataclass(frozen=True, slots=True)
class SlotRecord:
    """A persisted slot.

    Times are naive, second-precision times of day in the provider's timezone.
    """

    # pylint: disable=too-many-instance-attributes

    id: str  # pylint: disable=invalid-name
    provider_id: str
    slot_date: date
    start_time: time
    end_time: time
    is_booked: bool = False

    def __post_init__(self) -> None:
        if not self.id.strip() or not self.provider_id.strip():
            raise ValueError("id and provider_id must be non-empty.")
        if self.start_time.microsecond or self.end_time.microsecond:
            raise ValueError("slot times must be normalized to whole seconds.")

    @property
    def available(self) -> bool:
        """A slot is available exactly when it is not booked."""
        return not self.is_booked


@dataclass(frozen=True, slots=True)
class SlotPatch:
    """Partial update for a stored slot; UNSET fields are left unchanged."""

    start_time: Unsettable[time] = UNSET
    end_time: Unsettable[time] = UNSET
    is_booked: Unsettable[bool] = UNSET


class SlotStore(abc.ABC):
    """An abstract base class for a slot store."""

    @abc.abstractmethod
    def create(self, slot: SlotRecord) -> SlotRecord:
        """Persist a new slot.

        Raises:
            SlotTimeTakenError: when the provider-day already has a slot
                starting at ``slot.start_time``.
            StoreUnavailableError: for operational errors.

        Returns:
            The stored record.
        """

    @abc.abstractmethod
    def update(self, slot_id: str, patch: SlotPatch) -> SlotRecord:
        """Apply a partial update to a slot.

        Raises:
            SlotNotFoundError: if no slot has this id.
            SlotTimeTakenError: if the new start time collides with another slot.
            StoreUnavailableError: for operational errors.

        Returns:
            The updated record.
        """

    @abc.abstractmethod
    def delete(self, slot_id: str) -> None:
        """Remove a slot.

        Raises:
            SlotNotFoundError: if no slot has this id.
            StoreUnavailableError: for operational errors.
        """

    @abc.abstractmethod
    def delete_range(self, provider_id: str, date_from: date, date_to: date) -> int:
        """Remove every slot of a provider with ``date_from <= slot_date <= date_to``.

        Raises:
            ValueError: if ``date_to < date_from``.
            StoreUnavailableError: for operational errors.

        Returns:
            The number of slots removed.
        """

    @abc.abstractmethod
    def get(self, slot_id: str) -> SlotRecord | None:
        """Return the authoritative record for ``slot_id``, or None."""

    @abc.abstractmethod
    def list_by_date_range(
        self, provider_id: str, date_from: date, date_to: date
    ) -> Sequence[SlotRecord]:
        """Return a provider's slots between two dates (inclusive), ordered.

        Raises:
            ValueError: if ``date_to < date_from``.
            StoreUnavailableError: for operational errors.
        """
