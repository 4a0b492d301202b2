"""Change-notification channel port.

A channel delivers a `SlotChange` whenever a slot of the subscribed provider
is mutated outside this engine (typically: it gets booked or released). A
subscription is scoped to exactly one provider id.

Callbacks may be invoked from any thread; subscribers must not assume they run
on their own event loop.
"""

from __future__ import annotations

import abc
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class ChangeKind(str, Enum):
    """What happened to the slot."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class SlotChange:
    """Notification payload for one external slot mutation."""

    provider_id: str
    kind: ChangeKind = ChangeKind.UPDATED
    slot_id: str | None = None


@dataclass(frozen=True, slots=True)
class Subscription:
    """Opaque handle returned by `ChangeChannel.subscribe`."""

    handle_id: str
    provider_id: str


type ChangeCallback = Callable[[SlotChange], None]


class ChangeChannel(abc.ABC):
    """Push channel for external slot mutations."""

    @abc.abstractmethod
    def subscribe(self, provider_id: str, on_change: ChangeCallback) -> Subscription:
        """Start delivering changes for ``provider_id`` to ``on_change``."""

    @abc.abstractmethod
    def unsubscribe(self, subscription: Subscription) -> None:
        """Stop delivering changes for the handle. Unknown handles are ignored."""
