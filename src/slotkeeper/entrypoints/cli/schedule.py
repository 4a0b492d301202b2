"""SLOTKEEPER schedule CLI.

Each command bootstraps the engine against ``SLOTKEEPER_DB_URL``, opens the
provider's calendar without background refresh, performs one operation and
exits. Schedules print to **stdout**; notices go to **stderr**.

The provider comes from ``--provider`` (or ``SLOTKEEPER_PROVIDER``); without
one every command is refused as unauthenticated.

Examples
    $ slotkeeper schedule --provider p-1 setup --from 09:00 --to 17:00 --duration 60
    $ slotkeeper schedule --provider p-1 show --page 2
    $ slotkeeper schedule --provider p-1 add 2025-03-14 18:00
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, time
from typing import TYPE_CHECKING, Any

import click
import click_extra as clickx

from slotkeeper.bootstrap import bootstrap, build_availability_service
from slotkeeper.config import ConfigurationError, DatabaseUrlNotSetError
from slotkeeper.domain.calendar import MAX_PAGES, CalendarWindow
from slotkeeper.domain.errors import DomainError
from slotkeeper.domain.slot_generator import (
    DEFAULT_SETUP_DURATION,
    DEFAULT_SETUP_FROM,
    DEFAULT_SETUP_TO,
    QUICK_SETUP_DURATIONS,
)
from slotkeeper.interfaces.credentials import SessionCredential
from slotkeeper.interfaces.errors import AuthError, SlotkeeperError, SlotNotFoundError
from slotkeeper.service_layer.errors import ConfirmationRequiredError, ServiceError

from .db import MISSING_DB_URL_MSG
from .helpers import DATE, TIME, render_page, success, warn

if TYPE_CHECKING:
    from slotkeeper.service_layer.availability import AvailabilityService

logger = logging.getLogger(__name__)

PROVIDER_ENV = "SLOTKEEPER_PROVIDER"  # pragma: no mutate
TOKEN_ENV = "SLOTKEEPER_TOKEN"  # pragma: no mutate

NOT_SIGNED_IN_MSG = f"No provider session. Pass --provider or set {PROVIDER_ENV}."

type Action = Callable[[AvailabilityService], Awaitable[Any]]


@dataclass(frozen=True)
class ScheduleContext:
    """What every schedule subcommand needs from the group options."""

    credential: SessionCredential | None


def _run(ctx: click.Context, action: Action) -> Any:
    """Run ``action`` against a freshly started service and translate errors."""
    schedule_ctx: ScheduleContext = ctx.find_object(ScheduleContext)

    async def main() -> Any:
        container = bootstrap(require_db=True)
        service = build_availability_service(container)
        try:
            await service.start(schedule_ctx.credential, background=False)
            return await action(service)
        finally:
            await service.stop()

    try:
        return asyncio.run(main())
    except DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    except AuthError as e:
        message = NOT_SIGNED_IN_MSG if schedule_ctx.credential is None else str(e)
        raise click.ClickException(message) from e
    except (DomainError, SlotkeeperError, ServiceError) as e:
        raise click.ClickException(str(e)) from e


async def _show_date(service: AvailabilityService, day: date) -> None:
    """Move to the page holding ``day`` when it is inside the calendar."""
    page = CalendarWindow(service.clock.today()).page_of(day)
    if page is not None and page != service.page_index:
        await service.go_to_page(page)


async def _show_slot(service: AvailabilityService, slot_id: str) -> None:
    """Move to the page holding ``slot_id``.

    Raises:
        SlotNotFoundError: If no page shows the slot.
    """
    for page in range(MAX_PAGES):
        view = await service.go_to_page(page)
        if view is not None and view.find_slot(slot_id) is not None:
            return
    raise SlotNotFoundError(slot_id)


@click.group(cls=clickx.ExtraGroup)
@click.option(
    "--provider",
    "provider_id",
    envvar=PROVIDER_ENV,
    show_envvar=True,
    help="Provider whose calendar to manage.",
)
@click.option(
    "--token",
    envvar=TOKEN_ENV,
    show_envvar=True,
    default="cli",
    help="Opaque session token issued for the provider.",
)
@click.pass_context
def schedule(ctx: click.Context, provider_id: str | None, token: str) -> None:
    """Manage a provider's availability calendar."""
    credential = SessionCredential(provider_id, token) if provider_id else None
    ctx.obj = ScheduleContext(credential=credential)


@schedule.command()
@click.option(
    "--page",
    type=click.IntRange(1, MAX_PAGES),
    default=1,
    show_default=True,
    help="Page of the rolling calendar (8 days each).",
)
@click.pass_context
def show(ctx: click.Context, page: int) -> None:
    """Print one page of the calendar."""

    async def action(service: AvailabilityService) -> None:
        view = await service.go_to_page(page - 1)
        if view is not None:
            click.echo(render_page(view, MAX_PAGES))

    _run(ctx, action)


@schedule.command()
@click.argument("day", type=DATE)
@click.argument("start_time", type=TIME, required=False)
@click.pass_context
def add(ctx: click.Context, day: date, start_time: time | None) -> None:
    """Add a 60-minute slot on DAY.

    Without START_TIME the slot starts 30 minutes after the day's latest slot.
    """

    async def action(service: AvailabilityService) -> None:
        await _show_date(service, day)
        slot = await service.add_slot(day, start_time)
        success(
            f"Added {slot.start_time:%H:%M}-{slot.end_time:%H:%M} on {day} "
            f"({slot.id})."
        )

    _run(ctx, action)


@schedule.command()
@click.argument("slot_id")
@click.argument("new_time", type=TIME)
@click.pass_context
def edit(ctx: click.Context, slot_id: str, new_time: time) -> None:
    """Move SLOT_ID to NEW_TIME on the same day."""

    async def action(service: AvailabilityService) -> None:
        await _show_slot(service, slot_id)
        session = service.begin_edit(slot_id)
        slot = await service.save_edit(session, new_time)
        success(
            f"Moved {slot_id} to {slot.start_time:%H:%M}-{slot.end_time:%H:%M}."
        )

    _run(ctx, action)


@schedule.command()
@click.argument("slot_id")
@click.pass_context
def delete(ctx: click.Context, slot_id: str) -> None:
    """Delete the unbooked slot SLOT_ID."""

    async def action(service: AvailabilityService) -> None:
        await service.delete_slot(slot_id)
        success(f"Deleted {slot_id}.")

    _run(ctx, action)


@schedule.command()
@click.argument("day", type=DATE)
@click.pass_context
def toggle(ctx: click.Context, day: date) -> None:
    """Switch DAY between working and off.

    Turning a day off deletes its slots; days with a booked slot are refused.
    """

    async def action(service: AvailabilityService) -> None:
        await _show_date(service, day)
        working = await service.toggle_day_off(day)
        success(f"{day} is now {'a working day' if working else 'off'}.")

    _run(ctx, action)


@schedule.command()
@click.option(
    "--from",
    "from_time",
    type=TIME,
    default=f"{DEFAULT_SETUP_FROM:%H:%M}",
    show_default=True,
    help="First start.",
)
@click.option(
    "--to",
    "to_time",
    type=TIME,
    default=f"{DEFAULT_SETUP_TO:%H:%M}",
    show_default=True,
    help="End of the day.",
)
@click.option(
    "--duration",
    "duration_minutes",
    type=click.Choice([str(minutes) for minutes in QUICK_SETUP_DURATIONS]),
    default=str(DEFAULT_SETUP_DURATION),
    show_default=True,
    help="Slot length in minutes.",
)
@click.option(
    "--yes", "-y", is_flag=True, help="Replace existing slots without asking."
)
@click.pass_context
def setup(
    ctx: click.Context,
    from_time: time,
    to_time: time,
    duration_minutes: str,
    yes: bool,
) -> None:
    """Generate slots for today and the next six days.

    Every existing slot in those seven days is replaced. Today only gets the
    slots that have not started yet.
    """
    confirmed = yes
    if not confirmed and _run(ctx, lambda service: service.requires_confirmation()):
        warn("Slots already exist in the next 7 days and will be replaced.")
        click.confirm("Are you sure you want to proceed?", abort=True)
        confirmed = True

    async def action(service: AvailabilityService) -> None:
        result = await service.quick_setup(
            from_time, to_time, int(duration_minutes), confirmed=confirmed
        )
        success(
            f"Created {result.inserted} slots over {len(result.dates)} days "
            f"(replaced {result.deleted})."
        )

    try:
        _run(ctx, action)
    except click.ClickException as e:
        if isinstance(e.__cause__, ConfirmationRequiredError):
            raise click.ClickException(
                f"{e.message} Re-run with --yes to skip the prompt."
            ) from e.__cause__
        raise


@schedule.command()
@click.option("--yes", "-y", is_flag=True, help="Clear without asking.")
@click.pass_context
def clear(ctx: click.Context, yes: bool) -> None:
    """Delete every unbooked slot from today on and mark those days off."""
    if not yes:
        warn("This deletes every unbooked slot from today on.")
        click.confirm("Are you sure you want to proceed?", abort=True)

    async def action(service: AvailabilityService) -> None:
        result = await service.clear()
        success(f"Cleared {result.deleted} slots.")
        if result.kept_booked:
            warn(f"Kept {result.kept_booked} booked slots.")

    _run(ctx, action)


@schedule.command()
@click.option(
    "--on/--off",
    "visible",
    default=None,
    help="Show or hide the provider from customers. Omit to print the state.",
)
@click.pass_context
def visibility(ctx: click.Context, visible: bool | None) -> None:
    """Show or change whether customers can find the provider."""

    async def action(service: AvailabilityService) -> None:
        if visible is None:
            state = await service.is_visible()
        else:
            state = await service.set_visibility(visible)
        click.echo("visible" if state else "hidden")

    _run(ctx, action)
