"""In-process change channel.

`LocalChangeChannel` fans a published `SlotChange` out to every subscriber of
the affected provider, synchronously, on the publishing thread. The booking
side of a deployment (or a test) calls `publish` after it flips a slot's
booked flag.
"""

from __future__ import annotations

import itertools
import logging
import threading

from slotkeeper.interfaces.change_channel import (
    ChangeCallback,
    ChangeChannel,
    ChangeKind,
    SlotChange,
    Subscription,
)

logger = logging.getLogger(__name__)


class LocalChangeChannel(ChangeChannel):
    """Thread-safe publish/subscribe channel scoped by provider id."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._subscribers: dict[str, tuple[str, ChangeCallback]] = {}

    def subscribe(self, provider_id: str, on_change: ChangeCallback) -> Subscription:
        with self._lock:
            handle_id = f"sub-{next(self._counter)}"
            self._subscribers[handle_id] = (provider_id, on_change)
        logger.debug("Subscribed %s to provider %s", handle_id, provider_id)
        return Subscription(handle_id=handle_id, provider_id=provider_id)

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            removed = self._subscribers.pop(subscription.handle_id, None)
        if removed is not None:
            logger.debug("Unsubscribed %s", subscription.handle_id)

    def publish(
        self,
        provider_id: str,
        kind: ChangeKind = ChangeKind.UPDATED,
        slot_id: str | None = None,
    ) -> int:
        """Deliver a change to the provider's subscribers.

        Returns:
            The number of subscribers notified.
        """
        change = SlotChange(provider_id=provider_id, kind=kind, slot_id=slot_id)
        with self._lock:
            targets = [
                cb for pid, cb in self._subscribers.values() if pid == provider_id
            ]
        for callback in targets:
            try:
                callback(change)
            except Exception:  # pylint: disable=broad-exception-caught
                # the remaining subscribers still receive the change
                logger.exception("Change subscriber failed for %s", provider_id)
        return len(targets)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
