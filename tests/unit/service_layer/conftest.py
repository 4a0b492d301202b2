"""Fixtures for service-layer unit tests: an in-memory unit of work and a wired bus."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date
from typing import TYPE_CHECKING

import pytest

from slotkeeper.adapters.id_generators import SimpleIdGenerator
from slotkeeper.adapters.unit_of_work import InMemoryUnitOfWork
from slotkeeper.bootstrap import build_message_bus
from slotkeeper.service_layer.handlers import COMMAND_HANDLERS
from tests.fixtures.datagen import PROVIDER

if TYPE_CHECKING:
    from slotkeeper.interfaces.slot_store import SlotRecord
    from slotkeeper.service_layer.messagebus import MessageBus
    from tests.fixtures.datagen import FakeClock

# pylint: disable=redefined-outer-name


@pytest.fixture
def uow() -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork()


@pytest.fixture
def bus(uow: InMemoryUnitOfWork, clock: FakeClock) -> MessageBus:
    """Message bus over the in-memory unit of work, with sequential slot ids."""
    return build_message_bus(
        uow, COMMAND_HANDLERS, clock=clock, id_generator=SimpleIdGenerator()
    )


@pytest.fixture
def set_working(uow: InMemoryUnitOfWork) -> Callable[..., None]:
    """Mark dates as working (or not) for a provider."""

    def _set(days: Iterable[date], working: bool = True, provider=PROVIDER) -> None:
        with uow:
            current = uow.working_days.get(provider)
            current.update(dict.fromkeys(days, working))
            uow.working_days.put(provider, current)
            uow.commit()

    return _set


@pytest.fixture
def seed(uow: InMemoryUnitOfWork) -> Callable[..., list[SlotRecord]]:
    """Store slot records directly, bypassing the handlers."""

    def _seed(*slots: SlotRecord) -> list[SlotRecord]:
        with uow:
            stored = [uow.slots.create(slot) for slot in slots]
            uow.commit()
        return stored

    return _seed


@pytest.fixture
def stored(uow: InMemoryUnitOfWork) -> Callable[..., list[SlotRecord]]:
    """Read back every stored slot of a provider, ordered by date and time."""

    def _stored(provider=PROVIDER) -> list[SlotRecord]:
        with uow:
            return list(uow.slots.list_by_date_range(provider, date.min, date.max))

    return _stored
