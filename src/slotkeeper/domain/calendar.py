"""Rolling calendar window.

The calendar is anchored at *today* (provider-local) and split into pages of
``DAYS_PER_PAGE`` consecutive days. Pages are contiguous and non-overlapping:
page ``p`` covers ``today + p*8 ... today + p*8 + 7``. Only ``MAX_PAGES`` pages
are addressable, so the horizon is 24 days.

The quick-setup batch window is separate: the 7 days ``today ... today+6``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from .errors import PageOutOfRangeError

__all__ = ["BATCH_WINDOW_DAYS", "DAYS_PER_PAGE", "MAX_PAGES", "CalendarWindow"]

DAYS_PER_PAGE = 8
MAX_PAGES = 3
BATCH_WINDOW_DAYS = 7


@dataclass(frozen=True, slots=True)
class CalendarWindow:
    """Maps page indexes to calendar dates for a fixed *today*.

    Build a new window whenever the current date may have changed; a window
    never drifts on its own.
    """

    today: date

    def page_start(self, page_index: int) -> date:
        """First date of the given page."""
        self._check_page(page_index)
        return self.today + timedelta(days=page_index * DAYS_PER_PAGE)

    def date_at(self, page_index: int, offset: int) -> date:
        """Date shown at ``offset`` (0-7) on the given page."""
        if not 0 <= offset < DAYS_PER_PAGE:
            raise PageOutOfRangeError("offset", offset, DAYS_PER_PAGE)
        return self.page_start(page_index) + timedelta(days=offset)

    def page_dates(self, page_index: int) -> tuple[date, ...]:
        """All dates of the given page, in order."""
        start = self.page_start(page_index)
        return tuple(start + timedelta(days=i) for i in range(DAYS_PER_PAGE))

    def page_bounds(self, page_index: int) -> tuple[date, date]:
        """Inclusive first and last date of the given page."""
        start = self.page_start(page_index)
        return start, start + timedelta(days=DAYS_PER_PAGE - 1)

    def batch_window(self) -> tuple[date, ...]:
        """The quick-setup window: today and the following six days."""
        return tuple(self.today + timedelta(days=i) for i in range(BATCH_WINDOW_DAYS))

    def horizon(self) -> tuple[date, date]:
        """Inclusive first and last date of the whole rolling calendar."""
        return self.today, self.today + timedelta(days=MAX_PAGES * DAYS_PER_PAGE - 1)

    def page_of(self, day: date) -> int | None:
        """Page index that shows ``day``, or None when outside the horizon."""
        delta = (day - self.today).days
        if not 0 <= delta < MAX_PAGES * DAYS_PER_PAGE:
            return None
        return delta // DAYS_PER_PAGE

    @staticmethod
    def clamp_page(page_index: int) -> int:
        """Clamp a requested page index into ``[0, MAX_PAGES)``."""
        return max(0, min(MAX_PAGES - 1, page_index))

    @staticmethod
    def _check_page(page_index: int) -> None:
        if not 0 <= page_index < MAX_PAGES:
            raise PageOutOfRangeError("page", page_index, MAX_PAGES)
