"""Error kinds shared by ports and their adapters.

Adapters translate backend failures into these types so the service layer can
decide how to react without knowing which backend is in use:

- `AuthError`: missing or expired session credential.
- `NotFoundError`: the targeted record no longer exists in the store.
- `ConflictError`: the store's authoritative state forbids the change
  (e.g., the slot was booked after the client last read it).
- `StorageError`: transport or transaction failure; callers may retry.

Validation errors are not defined here; they belong to the domain and are
raised before any port is called.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date, time


class SlotkeeperError(Exception):
    """Base class for errors crossing the port boundary."""


# --- error kinds ---


class AuthError(SlotkeeperError):
    """The caller's session credential is missing or no longer valid."""


class NotFoundError(SlotkeeperError):
    """The targeted record does not exist in the store."""


class ConflictError(SlotkeeperError):
    """Authoritative store state conflicts with the requested change."""


class StorageError(SlotkeeperError):
    """The store could not complete the operation."""


# --- concrete errors ---


class MissingCredentialError(AuthError):
    """No session credential was supplied."""

    def __init__(self) -> None:
        super().__init__("No active session credential; please log in.")


class ExpiredCredentialError(AuthError):
    """The supplied session credential has expired or belongs to someone else."""

    def __init__(self, reason: str = "session expired") -> None:
        super().__init__(f"Session credential rejected: {reason}.")
        self.reason = reason


class SlotNotFoundError(NotFoundError):
    """The slot is no longer present in the store."""

    def __init__(self, slot_id: str) -> None:
        super().__init__(f"Slot '{slot_id}' was not found.")
        self.slot_id = slot_id


class SlotBookedError(ConflictError):
    """The slot is booked and therefore immutable."""

    def __init__(self, slot_id: str) -> None:
        super().__init__(
            f"Slot '{slot_id}' is booked and cannot be changed or removed."
        )
        self.slot_id = slot_id


class SlotTimeTakenError(ConflictError):
    """The store already holds a slot at this start time for the provider-day."""

    def __init__(self, provider_id: str, slot_date: date, start_time: time) -> None:
        super().__init__(
            f"Provider '{provider_id}' already has a slot at "
            f"{start_time.isoformat()} on {slot_date.isoformat()}."
        )
        self.provider_id = provider_id
        self.slot_date = slot_date
        self.start_time = start_time


class StoreUnavailableError(StorageError):
    """Operational/timeout/connection errors; callers may retry."""
