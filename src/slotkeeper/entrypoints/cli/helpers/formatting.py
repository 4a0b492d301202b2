"""Parsing and rendering helpers for schedule commands.

- `DATE` and `TIME` are Click parameter types; bad input becomes a usage
  error instead of a traceback.
- `render_page` turns a `PageView` into the plain-text block ``slotkeeper
  schedule show`` prints on stdout.
- `sanitize_url` redacts the password of a database URL for display.
"""

from __future__ import annotations

from datetime import date, time
from typing import TYPE_CHECKING, Any

import click
from sqlalchemy.engine import make_url

from slotkeeper.domain.errors import InvalidTimeError
from slotkeeper.domain.times import parse_time

if TYPE_CHECKING:
    from slotkeeper.domain.schedule import DaySchedule, PageView


class DateParamType(click.ParamType):
    """``YYYY-MM-DD`` calendar date."""

    name = "date"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> date:
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value).strip())
        except ValueError:
            self.fail(f"{value!r} is not a date (expected YYYY-MM-DD)", param, ctx)


class TimeParamType(click.ParamType):
    """``HH:MM`` or ``HH:MM:SS`` time of day."""

    name = "time"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> time:
        try:
            return parse_time(value)
        except InvalidTimeError as e:
            self.fail(str(e), param, ctx)


DATE = DateParamType()
TIME = TimeParamType()


def sanitize_url(url: str) -> str:
    """Render a database URL with its password (if any) replaced by ``***``.

    Only the password field is redacted; secrets in query parameters are not.
    """
    return make_url(url).render_as_string(hide_password=True)


def _hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def render_day(day: DaySchedule) -> list[str]:
    """One header line for the day, then one indented line per slot."""
    state = "working" if day.is_working_day else "off"
    lines = [f"{day.date.isoformat()} {day.date:%a}  [{state}]"]
    for slot in day.slots:
        booked = "  booked" if getattr(slot, "is_booked", False) else ""
        end = getattr(slot, "end_time", None)
        span = _hhmm(slot.start_time)
        if end is not None:
            span = f"{span}-{_hhmm(end)}"
        lines.append(f"    {span}  {slot.id}{booked}")
    return lines


def render_page(view: PageView, max_pages: int | None = None) -> str:
    """Plain-text rendering of an 8-day page."""
    pages = f"/{max_pages}" if max_pages else ""
    lines = [f"Provider {view.provider_id}, page {view.page_index + 1}{pages}"]
    for day in view.days:
        lines.extend(render_day(day))
    return "\n".join(lines)
