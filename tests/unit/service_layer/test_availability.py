"""Unit tests for the AvailabilityService facade over in-memory storage."""

from __future__ import annotations

import asyncio
from datetime import time, timedelta

import pytest
import pytest_asyncio

from slotkeeper.adapters.change_channel import LocalChangeChannel
from slotkeeper.domain.errors import (
    DayOffError,
    DuplicateSlotTimeError,
    FirstSlotTimeRequiredError,
    InvalidTimeRangeError,
    PageOutOfRangeError,
    PastSlotTimeError,
)
from slotkeeper.interfaces.credentials import SessionCredential
from slotkeeper.interfaces.errors import (
    ExpiredCredentialError,
    MissingCredentialError,
    SlotBookedError,
    SlotNotFoundError,
)
from slotkeeper.service_layer.availability import AvailabilityService
from slotkeeper.service_layer.errors import (
    ConfirmationRequiredError,
    EditSessionBusyError,
    NoActiveEditSessionError,
)
from tests.fixtures.datagen import NOW, PROVIDER, TODAY, days_from_today

# pylint: disable=magic-value-comparison
# pylint: disable=redefined-outer-name
# pylint: disable=too-few-public-methods

TOMORROW = days_from_today(1)


@pytest.fixture
def credential() -> SessionCredential:
    return SessionCredential(PROVIDER, "token", expires_at=NOW + timedelta(hours=1))


@pytest.fixture
def views() -> list:
    return []


@pytest.fixture
def channel() -> LocalChangeChannel:
    return LocalChangeChannel()


@pytest.fixture
def service(bus, clock, channel, views) -> AvailabilityService:
    return AvailabilityService(
        bus, clock, channel=channel, poll_interval=3600, on_view_change=views.append
    )


@pytest_asyncio.fixture
async def started(service, credential):
    """The facade observing `PROVIDER` without background tasks."""
    await service.start(credential, background=False)
    yield service
    await service.stop()


@pytest_asyncio.fixture
async def shown(started, seed, make_slot):
    """Started facade showing a free slot at 09:00 and a booked one at 10:00."""
    seed(
        make_slot(id="free", start_time=time(9)),
        make_slot(id="taken", start_time=time(10), is_booked=True),
    )
    await started.refresh()
    return started


def fetches(service: AvailabilityService) -> int:
    return service.sync.fetch_count


class TestLifecycle:
    """Tests for start, stop and navigation."""

    @staticmethod
    @pytest.mark.asyncio
    async def test_start_loads_the_first_page(service, credential, views):
        view = await service.start(credential, background=False)

        assert view is service.view is views[-1]
        assert view.dates[0] == TODAY
        assert len(view.days) == 8
        assert fetches(service) == 1
        await service.stop()
        assert service.view is None

    @staticmethod
    @pytest.mark.asyncio
    async def test_restart_honors_the_background_flag(service, credential):
        await service.start(credential)
        assert service.sync.running
        other = SessionCredential("p-other", "t", expires_at=NOW + timedelta(hours=1))
        try:
            await service.start(other, background=False)
            assert not service.sync.running
            assert service.provider_id == "p-other"
            await service.start(credential, background=True)
            assert service.sync.running
        finally:
            await service.stop()

    @staticmethod
    @pytest.mark.asyncio
    async def test_start_without_credential(service):
        with pytest.raises(MissingCredentialError):
            await service.start(None)
        assert fetches(service) == 0

    @staticmethod
    @pytest.mark.asyncio
    async def test_start_with_expired_credential(service):
        expired = SessionCredential(PROVIDER, "t", expires_at=NOW)
        with pytest.raises(ExpiredCredentialError):
            await service.start(expired)

    @staticmethod
    @pytest.mark.asyncio
    async def test_start_on_a_page_outside_the_calendar(service, credential):
        with pytest.raises(PageOutOfRangeError):
            await service.start(credential, page_index=3)

    @staticmethod
    @pytest.mark.asyncio
    async def test_navigation_clamps_at_the_edges(started):
        assert (await started.previous_page()).page_index == 0
        assert (await started.next_page()).page_index == 1
        await started.next_page()
        view = await started.next_page()
        assert view.page_index == 2
        assert view.dates[0] == days_from_today(16)

    @staticmethod
    @pytest.mark.asyncio
    async def test_go_to_page_validates_before_fetching(started):
        before = fetches(started)
        with pytest.raises(PageOutOfRangeError):
            await started.go_to_page(-1)
        assert fetches(started) == before
        assert started.page_index == 0

    @staticmethod
    @pytest.mark.asyncio
    async def test_push_refreshes_the_view(
        service, credential, channel, seed, make_slot
    ):
        await service.start(credential)
        try:
            (slot,) = seed(make_slot())
            await asyncio.to_thread(channel.publish, PROVIDER)
            for _ in range(200):
                if service.view.find_slot(slot.id):
                    break
                await asyncio.sleep(0.001)
            assert service.view.find_slot(slot.id) is not None
        finally:
            await service.stop()


class TestMutations:
    """Tests for the validate, dispatch, settle sequence."""

    @staticmethod
    @pytest.mark.asyncio
    async def test_success_refetches_exactly_once(started, set_working):
        set_working([TOMORROW])
        await started.refresh()
        before = fetches(started)

        slot = await started.add_slot(TOMORROW, "09:00")

        assert fetches(started) == before + 1
        assert started.view.day(TOMORROW).slots == (slot,)

    @staticmethod
    @pytest.mark.asyncio
    async def test_validation_error_does_not_touch_storage(
        started, set_working, stored
    ):
        set_working([TODAY, TOMORROW])
        await started.refresh()
        await started.add_slot(TOMORROW, "09:00")
        before = fetches(started)

        with pytest.raises(DuplicateSlotTimeError):
            await started.add_slot(TOMORROW, "09:00")
        with pytest.raises(PastSlotTimeError):
            await started.add_slot(TODAY, "08:00")
        with pytest.raises(InvalidTimeRangeError):
            await started.quick_setup("12:00", "09:00", 30)

        assert fetches(started) == before
        assert len(stored()) == 1

    @staticmethod
    @pytest.mark.asyncio
    async def test_prechecks_use_the_shown_working_flag(started):
        before = fetches(started)
        with pytest.raises(DayOffError):
            await started.add_slot(TOMORROW, "09:00")
        assert fetches(started) == before

    @staticmethod
    @pytest.mark.asyncio
    async def test_first_slot_needs_a_time(started, set_working):
        set_working([TOMORROW])
        await started.refresh()
        with pytest.raises(FirstSlotTimeRequiredError):
            await started.add_slot(TOMORROW)

    @staticmethod
    @pytest.mark.asyncio
    async def test_store_rejection_still_refetches(
        started, set_working, seed, make_slot
    ):
        """A slot added behind the view's back is caught by the handler."""
        set_working([TOMORROW])
        await started.refresh()
        (theirs,) = seed(make_slot(start_time=time(9)))
        before = fetches(started)

        with pytest.raises(DuplicateSlotTimeError):
            await started.add_slot(TOMORROW, "09:00")

        assert fetches(started) == before + 1
        assert started.view.find_slot(theirs.id) is not None

    @staticmethod
    @pytest.mark.asyncio
    async def test_expired_credential_refetches_then_raises(started, clock):
        before = fetches(started)
        clock.advance(hours=2)
        with pytest.raises(ExpiredCredentialError):
            await started.toggle_day_off(TOMORROW)
        assert fetches(started) == before + 1

    @staticmethod
    @pytest.mark.asyncio
    async def test_toggle_day_off(started):
        assert await started.toggle_day_off(TOMORROW) is True
        assert started.view.day(TOMORROW).is_working_day
        assert await started.toggle_day_off(TOMORROW) is False
        assert started.view.day(TOMORROW).is_off

    @staticmethod
    @pytest.mark.asyncio
    async def test_delete_booked_slot(started, seed, make_slot):
        (slot,) = seed(make_slot(is_booked=True))
        with pytest.raises(SlotBookedError):
            await started.delete_slot(slot.id)

    @staticmethod
    @pytest.mark.asyncio
    async def test_visibility_round_trip(started):
        assert await started.is_visible() is True
        assert await started.set_visibility(False) is False
        assert await started.is_visible() is False


class TestEditSession:
    """Tests for begin_edit, save_edit and cancel_edit."""

    @staticmethod
    @pytest.mark.asyncio
    async def test_save_moves_the_slot_and_closes_the_session(shown):
        session = shown.begin_edit("free")
        assert session.original_time == time(9)
        assert shown.sync.request_refresh() is False
        before = fetches(shown)

        updated = await shown.save_edit(session, "11:00")

        assert updated.start_time == time(11)
        assert fetches(shown) == before + 1
        assert session.closed
        with pytest.raises(NoActiveEditSessionError):
            await shown.save_edit(session, "12:00")

    @staticmethod
    @pytest.mark.asyncio
    async def test_failed_save_closes_the_session(shown):
        session = shown.begin_edit("free")
        with pytest.raises(DuplicateSlotTimeError):
            await shown.save_edit(session, "10:00")
        assert session.closed
        assert shown.sync.session is None

    @staticmethod
    @pytest.mark.asyncio
    async def test_cancel_does_not_refetch(shown):
        session = shown.begin_edit("free")
        before = fetches(shown)
        shown.cancel_edit(session)
        assert fetches(shown) == before
        assert shown.sync.request_refresh() is True

    @staticmethod
    @pytest.mark.asyncio
    async def test_cannot_edit_booked_or_unknown_slots(shown):
        with pytest.raises(SlotBookedError):
            shown.begin_edit("taken")
        with pytest.raises(SlotNotFoundError):
            shown.begin_edit("missing")

    @staticmethod
    @pytest.mark.asyncio
    async def test_one_session_at_a_time(shown, seed, make_slot):
        seed(make_slot(id="other", start_time=time(12)))
        await shown.refresh()
        shown.begin_edit("free")
        with pytest.raises(EditSessionBusyError):
            shown.begin_edit("other")


class TestBatch:
    """Tests for quick setup and clear through the facade."""

    @staticmethod
    @pytest.mark.asyncio
    async def test_quick_setup_asks_before_replacing(started, seed, make_slot):
        assert await started.requires_confirmation() is False
        seed(make_slot())
        assert await started.requires_confirmation() is True

        with pytest.raises(ConfirmationRequiredError):
            await started.quick_setup("09:00", "12:00", 60)
        result = await started.quick_setup("09:00", "12:00", 60, confirmed=True)

        assert result.deleted == 1
        assert started.view.day(TOMORROW).is_working_day
        assert len(started.view.day(TOMORROW).slots) == 3

    @staticmethod
    @pytest.mark.asyncio
    async def test_clear_publishes_an_optimistic_view_first(
        started, views, set_working, seed, make_slot
    ):
        set_working([TOMORROW, days_from_today(2)])
        seed(
            make_slot(start_time=time(9)),
            make_slot(slot_date=days_from_today(2), is_booked=True),
        )
        await started.refresh()
        shown_before = len(views)

        result = await started.clear()

        optimistic, authoritative = views[shown_before:]
        assert not any(day.slots for day in optimistic.days)
        assert authoritative.day(days_from_today(2)).has_slots
        assert authoritative.day(TOMORROW).is_off
        assert (result.deleted, result.kept_booked) == (1, 1)
