"""Unit tests for domain error messages and hierarchy."""

from datetime import date, time

import pytest

from slotkeeper.domain import errors

DAY = date(2025, 3, 14)


@pytest.mark.parametrize(
    "error",
    [
        errors.InvalidTimeError("x"),
        errors.InvalidTimeRangeError(time(9), time(8), 30),
        errors.PageOutOfRangeError("page", 3, 3),
        errors.DuplicateSlotTimeError(DAY, time(9)),
        errors.PastDateError(DAY),
        errors.PastSlotTimeError(DAY, time(9)),
        errors.FirstSlotTimeRequiredError(DAY),
        errors.DayOffError(DAY),
    ],
)
def test_every_error_is_a_validation_error(error):
    assert isinstance(error, errors.ValidationError)
    assert isinstance(error, errors.DomainError)


def test_duplicate_message_names_date_and_time():
    message = str(errors.DuplicateSlotTimeError(DAY, time(9)))
    assert "09:00:00" in message
    assert "2025-03-14" in message


def test_page_out_of_range_keeps_its_fields():
    err = errors.PageOutOfRangeError("page", 5, 3)
    assert (err.what, err.value, err.upper) == ("page", 5, 3)
    assert str(err) == "page 5 is outside [0, 3)."
