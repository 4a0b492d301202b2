"""Unit tests for the single-slot handlers, driven through the message bus."""

from datetime import time

import pytest

from slotkeeper.domain.errors import (
    DayOffError,
    DuplicateSlotTimeError,
    FirstSlotTimeRequiredError,
    InvalidTimeError,
    PastDateError,
    PastSlotTimeError,
)
from slotkeeper.interfaces.errors import SlotBookedError, SlotNotFoundError
from slotkeeper.service_layer import commands
from tests.fixtures.datagen import OTHER_PROVIDER, PROVIDER, TODAY, days_from_today

# pylint: disable=magic-value-comparison
# pylint: disable=too-few-public-methods

TOMORROW = days_from_today(1)


class TestAddSlot:
    """Tests for the add_slot handler."""

    @staticmethod
    def test_explicit_time_creates_a_60_minute_slot(bus, set_working, stored):
        """The slot gets a generated id and ends one hour after it starts."""
        set_working([TOMORROW])
        slot = bus.handle(commands.AddSlot(PROVIDER, TOMORROW, "09:00"))

        assert slot.id == "slot-0001"
        assert (slot.start_time, slot.end_time) == (time(9), time(10))
        assert not slot.is_booked
        assert stored() == [slot]

    @staticmethod
    def test_end_time_wraps_past_midnight(bus, set_working):
        """A late slot ends on the next day's clock face."""
        set_working([TOMORROW])
        slot = bus.handle(commands.AddSlot(PROVIDER, TOMORROW, "23:30"))
        assert slot.end_time == time(0, 30)

    @staticmethod
    def test_day_off_is_rejected(bus, stored):
        """Dates missing from the working-day map are off."""
        with pytest.raises(DayOffError):
            bus.handle(commands.AddSlot(PROVIDER, TOMORROW, "09:00"))
        assert not stored()

    @staticmethod
    def test_past_date_is_rejected_before_the_store(bus, set_working, stored):
        """Past dates fail regardless of the working flag."""
        yesterday = days_from_today(-1)
        set_working([yesterday])
        with pytest.raises(PastDateError):
            bus.handle(commands.AddSlot(PROVIDER, yesterday, "12:00"))
        assert not stored()

    @staticmethod
    @pytest.mark.parametrize("start", ["10:30", "08:00"])
    def test_elapsed_time_today_is_rejected(bus, set_working, start):
        """Today's slots must start after the current minute."""
        set_working([TODAY])
        with pytest.raises(PastSlotTimeError):
            bus.handle(commands.AddSlot(PROVIDER, TODAY, start))

    @staticmethod
    def test_later_time_today_is_accepted(bus, set_working):
        """One minute after now is fine."""
        set_working([TODAY])
        slot = bus.handle(commands.AddSlot(PROVIDER, TODAY, "10:31"))
        assert slot.start_time == time(10, 31)

    @staticmethod
    def test_duplicate_start_is_rejected(bus, set_working, stored):
        """Two slots of one provider may not share a start on the same day."""
        set_working([TOMORROW])
        bus.handle(commands.AddSlot(PROVIDER, TOMORROW, "09:00"))
        with pytest.raises(DuplicateSlotTimeError):
            bus.handle(commands.AddSlot(PROVIDER, TOMORROW, "9:00"))
        assert len(stored()) == 1

    @staticmethod
    def test_other_providers_do_not_conflict(bus, set_working, seed, make_slot):
        """Duplicate detection is scoped to the provider."""
        seed(make_slot(provider_id=OTHER_PROVIDER, start_time=time(9)))
        set_working([TOMORROW])
        slot = bus.handle(commands.AddSlot(PROVIDER, TOMORROW, "09:00"))
        assert slot.provider_id == PROVIDER

    @staticmethod
    def test_first_slot_needs_an_explicit_time(bus, set_working):
        """No default exists for an empty day."""
        set_working([TOMORROW])
        with pytest.raises(FirstSlotTimeRequiredError):
            bus.handle(commands.AddSlot(PROVIDER, TOMORROW))

    @staticmethod
    def test_default_start_follows_the_latest_slot(bus, set_working, seed, make_slot):
        """The default is the latest start plus 30 minutes, not the last added."""
        set_working([TOMORROW])
        seed(make_slot(start_time=time(11)), make_slot(start_time=time(9)))

        slot = bus.handle(commands.AddSlot(PROVIDER, TOMORROW))

        assert (slot.start_time, slot.end_time) == (time(11, 30), time(12, 30))

    @staticmethod
    def test_default_start_may_not_cross_midnight(bus, set_working, seed, make_slot):
        """A default past 23:59 is an invalid time."""
        set_working([TOMORROW])
        seed(make_slot(start_time=time(23, 45)))
        with pytest.raises(InvalidTimeError):
            bus.handle(commands.AddSlot(PROVIDER, TOMORROW))

    @staticmethod
    def test_default_start_today_is_checked_against_now(
        bus, set_working, seed, make_slot
    ):
        """A default that has already elapsed today is rejected."""
        set_working([TODAY])
        seed(make_slot(slot_date=TODAY, start_time=time(9)))
        with pytest.raises(PastSlotTimeError):
            bus.handle(commands.AddSlot(PROVIDER, TODAY))


class TestEditSlotTime:
    """Tests for the edit_slot_time handler."""

    @staticmethod
    def test_moves_slot_and_recomputes_end(bus, seed, make_slot, stored):
        """The end is always start + 60 minutes after an edit."""
        (slot,) = seed(make_slot(start_time=time(9), end_time=time(9, 45)))

        updated = bus.handle(commands.EditSlotTime(PROVIDER, slot.id, "14:15"))

        assert (updated.start_time, updated.end_time) == (time(14, 15), time(15, 15))
        assert stored() == [updated]

    @staticmethod
    def test_same_time_is_not_a_duplicate_of_itself(bus, seed, make_slot):
        """The edited slot is excluded from the duplicate check."""
        (slot,) = seed(make_slot(start_time=time(9)))
        updated = bus.handle(commands.EditSlotTime(PROVIDER, slot.id, "09:00"))
        assert updated.start_time == time(9)

    @staticmethod
    def test_duplicate_of_a_sibling_is_rejected(bus, seed, make_slot, stored):
        """Moving onto another slot's start fails and changes nothing."""
        first, _ = seed(make_slot(start_time=time(9)), make_slot(start_time=time(10)))
        with pytest.raises(DuplicateSlotTimeError):
            bus.handle(commands.EditSlotTime(PROVIDER, first.id, "10:00"))
        assert [s.start_time for s in stored()] == [time(9), time(10)]

    @staticmethod
    def test_booked_slot_is_immutable(bus, seed, make_slot, stored):
        """The booked flag is read from the store, not from the caller."""
        (slot,) = seed(make_slot(is_booked=True))
        with pytest.raises(SlotBookedError):
            bus.handle(commands.EditSlotTime(PROVIDER, slot.id, "15:00"))
        assert stored() == [slot]

    @staticmethod
    def test_moving_into_the_past_is_rejected(bus, seed, make_slot):
        """Today's slot cannot be moved to an elapsed time."""
        (slot,) = seed(make_slot(slot_date=TODAY, start_time=time(12)))
        with pytest.raises(PastSlotTimeError):
            bus.handle(commands.EditSlotTime(PROVIDER, slot.id, "10:00"))

    @staticmethod
    def test_unknown_slot(bus):
        with pytest.raises(SlotNotFoundError):
            bus.handle(commands.EditSlotTime(PROVIDER, "nope", "10:00"))

    @staticmethod
    def test_other_providers_slot_is_not_found(bus, seed, make_slot):
        """A provider cannot reach another provider's slot by id."""
        (slot,) = seed(make_slot(provider_id=OTHER_PROVIDER))
        with pytest.raises(SlotNotFoundError):
            bus.handle(commands.EditSlotTime(PROVIDER, slot.id, "10:00"))


class TestDeleteSlot:
    """Tests for the delete_slot handler."""

    @staticmethod
    def test_removes_the_slot(bus, seed, make_slot, stored):
        keep, doomed = seed(make_slot(start_time=time(8)), make_slot())
        bus.handle(commands.DeleteSlot(PROVIDER, doomed.id))
        assert stored() == [keep]

    @staticmethod
    def test_booked_slot_survives(bus, seed, make_slot, stored):
        """Deleting a booked slot is refused."""
        (slot,) = seed(make_slot(is_booked=True))
        with pytest.raises(SlotBookedError):
            bus.handle(commands.DeleteSlot(PROVIDER, slot.id))
        assert stored() == [slot]

    @staticmethod
    def test_unknown_slot(bus):
        with pytest.raises(SlotNotFoundError):
            bus.handle(commands.DeleteSlot(PROVIDER, "nope"))


class TestToggleDayOff:
    """Tests for the toggle_day_off handler."""

    @staticmethod
    def test_unknown_day_becomes_working(bus, uow):
        """Days absent from the map are off, so the first toggle turns them on."""
        assert bus.handle(commands.ToggleDayOff(PROVIDER, TOMORROW)) is True
        with uow:
            assert uow.working_days.get(PROVIDER) == {TOMORROW: True}

    @staticmethod
    def test_turning_off_deletes_the_days_slots(
        bus, uow, set_working, seed, make_slot, stored
    ):
        """Only the toggled day loses its slots."""
        later = days_from_today(2)
        set_working([TOMORROW, later])
        _, _, other_day = seed(
            make_slot(start_time=time(9)),
            make_slot(start_time=time(10)),
            make_slot(slot_date=later),
        )

        assert bus.handle(commands.ToggleDayOff(PROVIDER, TOMORROW)) is False

        assert stored() == [other_day]
        with uow:
            assert uow.working_days.get(PROVIDER) == {TOMORROW: False, later: True}

    @staticmethod
    def test_day_with_a_booked_slot_stays_working(
        bus, uow, set_working, seed, make_slot, stored
    ):
        """Nothing changes when the day holds a booked slot."""
        set_working([TOMORROW])
        slots = seed(
            make_slot(start_time=time(9)),
            make_slot(start_time=time(10), is_booked=True),
        )

        with pytest.raises(SlotBookedError):
            bus.handle(commands.ToggleDayOff(PROVIDER, TOMORROW))

        assert stored() == slots
        with uow:
            assert uow.working_days.get(PROVIDER) == {TOMORROW: True}

    @staticmethod
    def test_turning_on_creates_no_slots(bus, set_working, stored):
        set_working([TOMORROW], working=False)
        assert bus.handle(commands.ToggleDayOff(PROVIDER, TOMORROW)) is True
        assert not stored()

    @staticmethod
    def test_off_then_on_restores_the_flag_but_not_the_slots(
        bus, uow, set_working, seed, make_slot, stored
    ):
        """A round trip through "off" leaves a working day with no slots."""
        set_working([TOMORROW])
        seed(make_slot(start_time=time(9)), make_slot(start_time=time(10)))

        assert bus.handle(commands.ToggleDayOff(PROVIDER, TOMORROW)) is False
        assert bus.handle(commands.ToggleDayOff(PROVIDER, TOMORROW)) is True

        assert not stored()
        with uow:
            assert uow.working_days.get(PROVIDER) == {TOMORROW: True}
