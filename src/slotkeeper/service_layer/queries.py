"""Read paths over the unit of work.

Reads never commit; the unit of work rolls back on exit, which is a no-op for
them.
"""

from __future__ import annotations

from operator import attrgetter
from typing import TYPE_CHECKING

from slotkeeper.domain.schedule import PageView, build_days

if TYPE_CHECKING:
    from datetime import date

    from slotkeeper.domain.calendar import CalendarWindow
    from slotkeeper.interfaces.unit_of_work import AbstractUnitOfWork


def load_page(
    uow: AbstractUnitOfWork,
    provider_id: str,
    window: CalendarWindow,
    page_index: int,
) -> PageView:
    """Read one 8-day page of authoritative state.

    Raises:
        PageOutOfRangeError: If ``page_index`` is outside ``[0, MAX_PAGES)``.
    """
    first, last = window.page_bounds(page_index)
    with uow:
        slots = uow.slots.list_by_date_range(provider_id, first, last)
        working_days = uow.working_days.get(provider_id)
    days = build_days(
        window.page_dates(page_index),
        working_days,
        slots,
        slot_date_of=attrgetter("slot_date"),
    )
    return PageView(provider_id=provider_id, page_index=page_index, days=days)


def count_slots_between(
    uow: AbstractUnitOfWork, provider_id: str, first: date, last: date
) -> int:
    """Number of stored slots of a provider in ``[first, last]``."""
    with uow:
        return len(uow.slots.list_by_date_range(provider_id, first, last))


def is_visible(uow: AbstractUnitOfWork, provider_id: str) -> bool:
    """The provider's discoverability flag."""
    with uow:
        return uow.visibility.get(provider_id)
