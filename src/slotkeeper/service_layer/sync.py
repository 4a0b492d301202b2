"""Reconciliation of background refreshes, push notifications and local edits.

`SyncController` owns *when* the authoritative window may be re-read:

- A periodic poll and the push channel both only *request* a refresh. Requests
  set a single wakeup event consumed by one reconcile loop, so requests that
  arrive while a fetch is in flight collapse into one follow-up fetch.
- While an `EditSession` is open, background requests are dropped, not
  deferred. Nothing replays them when the session closes.
- Foreground refetches (`refresh_now`, `settle`) are never suppressed; the
  facade calls `settle` exactly once after every mutation.
- Fetches never overlap: every fetch runs under one lock.

Push callbacks may fire on any thread and are marshalled onto the
controller's event loop with ``call_soon_threadsafe``.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import time
from typing import TYPE_CHECKING

from slotkeeper.interfaces.errors import SlotkeeperError

from .errors import EditSessionBusyError

if TYPE_CHECKING:
    from slotkeeper.interfaces.change_channel import (
        ChangeChannel,
        SlotChange,
        Subscription,
    )

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0

type Refetch = Callable[[], Awaitable[None]]

_session_ids = itertools.count(1)


@dataclass(eq=False)
class EditSession:
    """Token for the one slot currently being edited.

    Obtained from `SyncController.open_session` and handed back through
    `SyncController.release`. A released token stays closed for good.
    """

    provider_id: str
    slot_id: str
    original_time: time | None = None
    session_id: int = field(default_factory=lambda: next(_session_ids))
    closed: bool = False

    @property
    def is_open(self) -> bool:
        return not self.closed


class SyncController:  # pylint: disable=too-many-instance-attributes
    """Decide when the facade's view is re-read from storage.

    Args:
        refetch: Coroutine function that reloads the authoritative window.
        channel: Push channel for external slot changes; None disables push.
        poll_interval: Seconds between background refresh requests.
    """

    def __init__(
        self,
        refetch: Refetch,
        channel: ChangeChannel | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")
        self._refetch = refetch
        self._channel = channel
        self.poll_interval = poll_interval

        self.provider_id: str | None = None
        self._session: EditSession | None = None
        self._subscription: Subscription | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tasks: list[asyncio.Task[None]] = []
        self._wakeup = asyncio.Event()
        self._fetch_lock = asyncio.Lock()

        self.fetch_count = 0
        self.skipped_count = 0

    # --------------------------------------------------------------------- #
    # Lifecycle
    # --------------------------------------------------------------------- #

    @property
    def running(self) -> bool:
        """True while background polling and push delivery are active."""
        return bool(self._tasks)

    @property
    def session(self) -> EditSession | None:
        return self._session

    async def start(self, provider_id: str, *, background: bool = True) -> None:
        """Observe ``provider_id``.

        With ``background=False`` only foreground refetches happen: no poll
        task and no push subscription are created.
        """
        if self.provider_id is not None:
            await self.stop()

        self._loop = asyncio.get_running_loop()
        self.provider_id = provider_id
        self._wakeup.clear()

        if background:
            if self._channel is not None:
                self._subscription = self._channel.subscribe(
                    provider_id, self._on_change
                )
            self._tasks = [
                asyncio.create_task(self._reconcile_loop(), name="sync-reconcile"),
                asyncio.create_task(self._poll_loop(), name="sync-poll"),
            ]
        logger.debug(
            "Sync started for %s (background=%s, poll=%ss)",
            provider_id,
            background,
            self.poll_interval,
        )

    async def switch_provider(
        self, provider_id: str, *, background: bool | None = None
    ) -> None:
        """Tear down everything for the current provider and observe another.

        ``background`` defaults to the mode the controller is running in.
        """
        if background is None:
            background = self.running
        await self.stop()
        await self.start(provider_id, background=background)

    async def stop(self) -> None:
        """Cancel polling, drop the push subscription, close any edit session."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        if self._subscription is not None and self._channel is not None:
            self._channel.unsubscribe(self._subscription)
        self._subscription = None

        if self._session is not None:
            self.release(self._session)
        if self.provider_id is not None:
            logger.debug("Sync stopped for %s", self.provider_id)
        self.provider_id = None
        self._wakeup.clear()

    # --------------------------------------------------------------------- #
    # Refresh requests
    # --------------------------------------------------------------------- #

    def request_refresh(self, source: str = "poll") -> bool:
        """Ask the reconcile loop for a refetch.

        Returns:
            False when the request was dropped because an edit session is open.
        """
        if self._session is not None:
            self.skipped_count += 1
            logger.debug(
                "Skipping %s refresh for %s: slot %s is being edited",
                source,
                self.provider_id,
                self._session.slot_id,
            )
            return False
        self._wakeup.set()
        return True

    def _on_change(self, change: SlotChange) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._accept_change, change)

    def _accept_change(self, change: SlotChange) -> None:
        if change.provider_id != self.provider_id:
            logger.debug("Ignoring change for %s", change.provider_id)
            return
        self.request_refresh("push")

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            self.request_refresh("poll")

    async def _reconcile_loop(self) -> None:
        while True:
            await self._wakeup.wait()
            self._wakeup.clear()
            if self._session is not None:
                self.skipped_count += 1
                continue
            try:
                await self._fetch()
            except SlotkeeperError as e:
                logger.warning("Background refresh failed: %s", e)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Background refresh crashed")

    # --------------------------------------------------------------------- #
    # Foreground refetches
    # --------------------------------------------------------------------- #

    async def _fetch(self) -> None:
        async with self._fetch_lock:
            self.fetch_count += 1
            await self._refetch()

    async def refresh_now(self) -> None:
        """Refetch immediately, even during an edit session; errors propagate."""
        await self._fetch()

    async def settle(self) -> bool:
        """The single refetch that follows a mutation.

        Errors are logged rather than raised so they never mask the outcome
        of the mutation itself.

        Returns:
            True if the refetch succeeded.
        """
        try:
            await self._fetch()
        except SlotkeeperError as e:
            logger.warning("Refetch after mutation failed: %s", e)
            return False
        return True

    # --------------------------------------------------------------------- #
    # Edit sessions
    # --------------------------------------------------------------------- #

    def open_session(
        self, slot_id: str, original_time: time | None = None
    ) -> EditSession:
        """Open the provider's edit session for ``slot_id``.

        Raises:
            RuntimeError: If the controller has not been started.
            EditSessionBusyError: If another session is already open.
        """
        if self.provider_id is None:
            raise RuntimeError("SyncController is not started")
        if self._session is not None:
            raise EditSessionBusyError(self._session.slot_id)
        self._session = EditSession(
            provider_id=self.provider_id, slot_id=slot_id, original_time=original_time
        )
        logger.debug(
            "Edit session %s opened for slot %s", self._session.session_id, slot_id
        )
        return self._session

    def is_current(self, session: EditSession) -> bool:
        """True if ``session`` is the open session of this controller."""
        return session.is_open and session is self._session

    def release(self, session: EditSession) -> None:
        """Close ``session``. Releasing a stale or closed token is a no-op."""
        session.closed = True
        if session is self._session:
            self._session = None
            logger.debug("Edit session %s released", session.session_id)
