"""Unit tests for the UNSET sentinel and patch resolution."""

import pickle

import pytest

from slotkeeper.interfaces.unsettable import UNSET, is_unset, resolve


def test_unset_is_falsy_and_reprs_as_unset():
    assert not UNSET
    assert repr(UNSET) == "UNSET"


def test_unset_survives_pickling_as_the_singleton():
    assert pickle.loads(pickle.dumps(UNSET)) is UNSET


def test_is_unset():
    assert is_unset(UNSET)
    assert not is_unset(None)
    assert not is_unset(False)


def test_resolve_unset_keeps_current():
    assert resolve(UNSET, "09:00", field="start_time") == "09:00"


def test_resolve_value_replaces_current():
    assert resolve(True, False, field="is_booked") is True


def test_resolve_none_is_rejected():
    with pytest.raises(ValueError, match="start_time cannot be cleared"):
        resolve(None, "09:00", field="start_time")
