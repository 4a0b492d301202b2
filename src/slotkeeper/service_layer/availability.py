"""Async facade over the availability engine.

`AvailabilityService` is what entrypoints talk to. It holds the provider's
session credential, the page being looked at, and the last authoritative
`PageView`. Every mutation follows one pattern:

1. check the credential (`AuthError`);
2. validate against the current view; validation errors are raised here and
   nothing reaches storage;
3. dispatch the command through the message bus in a worker thread;
4. refetch the window exactly once, whether step 3 succeeded or failed.

The handlers repeat every check against storage, so a stale view can only
cause a false *rejection* here, never a bad write.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from functools import partial
from datetime import date
from typing import TYPE_CHECKING, Any

from slotkeeper.domain.calendar import CalendarWindow
from slotkeeper.domain.conflicts import is_duplicate
from slotkeeper.domain.errors import DuplicateSlotTimeError, FirstSlotTimeRequiredError
from slotkeeper.domain.schedule import check_not_past, check_working_day
from slotkeeper.domain.slot_generator import validate_range
from slotkeeper.domain.times import TimeLike, parse_time
from slotkeeper.interfaces.errors import (
    AuthError,
    ExpiredCredentialError,
    MissingCredentialError,
    SlotBookedError,
    SlotNotFoundError,
)
from slotkeeper.service_layer import commands, queries

from .errors import NoActiveEditSessionError
from .sync import DEFAULT_POLL_INTERVAL, EditSession, SyncController

if TYPE_CHECKING:
    from slotkeeper.domain.schedule import PageView
    from slotkeeper.interfaces.change_channel import ChangeChannel
    from slotkeeper.interfaces.clock import Clock
    from slotkeeper.interfaces.credentials import SessionCredential
    from slotkeeper.interfaces.slot_store import SlotRecord

    from .handlers.batch_handlers import ClearResult, QuickSetupResult
    from .messagebus import MessageBus

logger = logging.getLogger(__name__)

type ViewListener = Callable[[PageView], None]


# pylint: disable=too-many-instance-attributes,too-many-public-methods
class AvailabilityService:
    """One provider's availability calendar, kept in sync with storage.

    Args:
        bus: Message bus wired with the command handlers.
        clock: Provider-local clock; decides *today* and the past-time guards.
        channel: Push channel for external slot changes.
        poll_interval: Seconds between background refreshes.
        on_view_change: Called with every new view (authoritative or the
            optimistic one applied by `clear`).
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        bus: MessageBus,
        clock: Clock,
        *,
        channel: ChangeChannel | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        on_view_change: ViewListener | None = None,
    ) -> None:
        self.bus = bus
        self.clock = clock
        self.sync = SyncController(self._reload, channel, poll_interval)
        self._on_view_change = on_view_change
        self._credential: SessionCredential | None = None
        self._page_index = 0
        self._view: PageView | None = None
        self._io_lock = asyncio.Lock()

    # --------------------------------------------------------------------- #
    # State
    # --------------------------------------------------------------------- #

    @property
    def view(self) -> PageView | None:
        """The last view shown; None before `start`."""
        return self._view

    @property
    def page_index(self) -> int:
        return self._page_index

    @property
    def provider_id(self) -> str | None:
        return self._credential.provider_id if self._credential else None

    def _window(self) -> CalendarWindow:
        return CalendarWindow(self.clock.today())

    def _authorize(self) -> str:
        if self._credential is None:
            raise MissingCredentialError
        if self._credential.is_expired(self.clock.now()):
            raise ExpiredCredentialError()
        return self._credential.provider_id

    def _publish(self, view: PageView) -> None:
        self._view = view
        if self._on_view_change is not None:
            self._on_view_change(view)

    async def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        async with self._io_lock:
            return await asyncio.to_thread(fn, *args)

    async def _reload(self) -> None:
        if (provider_id := self.sync.provider_id) is None:
            return
        view = await self._run(
            queries.load_page,
            self.bus.uow,
            provider_id,
            self._window(),
            self._page_index,
        )
        self._publish(view)

    # --------------------------------------------------------------------- #
    # Lifecycle
    # --------------------------------------------------------------------- #

    async def start(
        self,
        credential: SessionCredential | None,
        *,
        page_index: int = 0,
        background: bool = True,
    ) -> PageView | None:
        """Begin observing the credential's provider and load the first view.

        Raises:
            AuthError: If the credential is missing or expired.
            PageOutOfRangeError: If ``page_index`` is outside the calendar.
        """
        self._credential = credential
        provider_id = self._authorize()
        self._window().page_start(page_index)
        self._page_index = page_index
        self._view = None
        if self.sync.provider_id is None:
            await self.sync.start(provider_id, background=background)
        else:
            await self.sync.switch_provider(provider_id, background=background)
        await self.sync.refresh_now()
        logger.info("Observing provider %s from page %d", provider_id, page_index)
        return self._view

    async def stop(self) -> None:
        """Stop polling, drop the push subscription and forget the view."""
        await self.sync.stop()
        self._view = None

    async def refresh(self) -> PageView | None:
        """Reload the current page from storage."""
        await self.sync.refresh_now()
        return self._view

    # --------------------------------------------------------------------- #
    # Navigation
    # --------------------------------------------------------------------- #

    async def go_to_page(self, page_index: int) -> PageView | None:
        """Show page ``page_index``.

        Raises:
            PageOutOfRangeError: If ``page_index`` is outside ``[0, MAX_PAGES)``.
        """
        self._window().page_start(page_index)
        self._page_index = page_index
        return await self.refresh()

    async def next_page(self) -> PageView | None:
        return await self.go_to_page(CalendarWindow.clamp_page(self._page_index + 1))

    async def previous_page(self) -> PageView | None:
        return await self.go_to_page(CalendarWindow.clamp_page(self._page_index - 1))

    # --------------------------------------------------------------------- #
    # Mutations
    # --------------------------------------------------------------------- #

    async def _mutate(
        self,
        build: Callable[[str], commands.Command],
        precheck: Callable[[], Any] | None = None,
    ) -> Any:
        try:
            provider_id = self._authorize()
        except AuthError:
            await self.sync.settle()
            raise
        if precheck is not None:
            precheck()
        try:
            return await self._run(self.bus.handle, build(provider_id))
        finally:
            await self.sync.settle()

    async def toggle_day_off(self, day: date) -> bool:
        """Flip ``day`` between working and off; returns the new working flag."""
        return await self._mutate(lambda pid: commands.ToggleDayOff(pid, day=day))

    async def add_slot(
        self, day: date, start_time: TimeLike | None = None
    ) -> SlotRecord:
        """Add a 60-minute slot on ``day``.

        Without ``start_time`` the slot goes 30 minutes after the day's latest
        start; the first slot of a day needs an explicit time.
        """

        def precheck() -> None:
            shown = self._view.day(day) if self._view else None
            if shown is not None:
                check_working_day(day, {day: shown.is_working_day})
                if start_time is None and not shown.has_slots:
                    raise FirstSlotTimeRequiredError(day)
            if start_time is not None:
                start = parse_time(start_time)
                check_not_past(day, start, self.clock.now())
                if shown is not None and is_duplicate(shown.slots, start):
                    raise DuplicateSlotTimeError(day, start)

        return await self._mutate(
            lambda pid: commands.AddSlot(pid, slot_date=day, start_time=start_time),
            precheck,
        )

    def begin_edit(self, slot_id: str) -> EditSession:
        """Open the edit session for ``slot_id``; background refreshes pause.

        Raises:
            AuthError: If the credential is missing or expired.
            SlotNotFoundError: If the slot is not on the current page.
            SlotBookedError: If the current view shows the slot as booked.
            EditSessionBusyError: If another slot is being edited.
        """
        self._authorize()
        found = self._view.find_slot(slot_id) if self._view else None
        if found is None:
            raise SlotNotFoundError(slot_id)
        _, slot = found
        if getattr(slot, "is_booked", False):
            raise SlotBookedError(slot_id)
        return self.sync.open_session(slot_id, original_time=slot.start_time)

    def cancel_edit(self, session: EditSession) -> None:
        """Close the edit session without saving. No refetch happens."""
        self.sync.release(session)

    async def save_edit(self, session: EditSession, new_time: TimeLike) -> SlotRecord:
        """Move the edited slot to ``new_time`` and close the session.

        The session is closed whatever the outcome.

        Raises:
            NoActiveEditSessionError: If ``session`` is not the open session.
        """
        if not self.sync.is_current(session):
            raise NoActiveEditSessionError

        def precheck() -> None:
            start = parse_time(new_time)
            found = self._view.find_slot(session.slot_id) if self._view else None
            if found is not None:
                day, _ = found
                check_not_past(day.date, start, self.clock.now())
                if is_duplicate(day.slots, start, exclude_id=session.slot_id):
                    raise DuplicateSlotTimeError(day.date, start)

        try:
            return await self._mutate(
                lambda pid: commands.EditSlotTime(
                    pid, slot_id=session.slot_id, new_time=new_time
                ),
                precheck,
            )
        finally:
            self.sync.release(session)

    async def delete_slot(self, slot_id: str) -> None:
        """Remove an unbooked slot."""
        await self._mutate(lambda pid: commands.DeleteSlot(pid, slot_id=slot_id))

    async def requires_confirmation(self) -> bool:
        """True if any slot exists in the quick-setup window right now."""
        provider_id = self._authorize()
        window = self._window().batch_window()
        existing = await self._run(
            queries.count_slots_between,
            self.bus.uow,
            provider_id,
            window[0],
            window[-1],
        )
        return existing > 0

    async def quick_setup(
        self,
        from_time: TimeLike,
        to_time: TimeLike,
        duration_minutes: int,
        *,
        confirmed: bool = False,
    ) -> QuickSetupResult:
        """Replace the next 7 days with generated slots.

        Raises:
            InvalidTimeRangeError: Before any store call, for an unusable range.
            ConfirmationRequiredError: If slots exist and ``confirmed`` is false.
            SlotBookedError: If a booked slot sits in the window.
        """
        return await self._mutate(
            lambda pid: commands.RunQuickSetup(
                pid,
                from_time=from_time,
                to_time=to_time,
                duration_minutes=duration_minutes,
                confirmed=confirmed,
            ),
            partial(validate_range, from_time, to_time, duration_minutes),
        )

    async def clear(self) -> ClearResult:
        """Clear every slot from today on; the view is emptied immediately."""

        def optimistic_clear() -> None:
            if self._view is not None:
                self._publish(self._view.cleared_from(self.clock.today()))

        return await self._mutate(commands.ClearSchedule, optimistic_clear)

    async def set_visibility(self, visible: bool) -> bool:
        """Show or hide the provider from customers."""
        return await self._mutate(
            lambda pid: commands.SetVisibility(pid, visible=visible)
        )

    async def is_visible(self) -> bool:
        """The provider's current discoverability flag."""
        provider_id = self._authorize()
        return await self._run(queries.is_visible, self.bus.uow, provider_id)
