"""Bootstrap the message bus with handlers, unit of work and collaborators."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from slotkeeper.adapters.change_channel import LocalChangeChannel
from slotkeeper.adapters.clock import SystemClock
from slotkeeper.adapters.db.engine import make_engine
from slotkeeper.adapters.id_generators import ULIDGenerator
from slotkeeper.adapters.unit_of_work import InMemoryUnitOfWork, SqlAlchemyUnitOfWork
from slotkeeper.config import EngineSettings
from slotkeeper.service_layer.availability import AvailabilityService
from slotkeeper.service_layer.handlers import COMMAND_HANDLERS
from slotkeeper.service_layer.messagebus import MessageBus

if TYPE_CHECKING:
    from slotkeeper.interfaces.change_channel import ChangeChannel
    from slotkeeper.interfaces.clock import Clock
    from slotkeeper.interfaces.id_generator import IdGenerator
    from slotkeeper.interfaces.unit_of_work import AbstractUnitOfWork
    from slotkeeper.service_layer.availability import ViewListener
    from slotkeeper.service_layer.commands import Command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring."""

    message_bus: MessageBus
    clock: Clock
    channel: ChangeChannel
    settings: EngineSettings

    @property
    def uow(self) -> AbstractUnitOfWork:
        return self.message_bus.uow


def build_uow(
    settings: EngineSettings, *, require_db: bool = False
) -> AbstractUnitOfWork:
    """Build the unit of work for the configured storage.

    Without a database URL the in-memory adapters are used, unless
    ``require_db`` is set.

    Raises:
        DatabaseUrlNotSetError: If ``require_db`` is set and no URL is configured.
    """
    if require_db or settings.db_url:
        engine = make_engine(settings.require_db_url())
        return SqlAlchemyUnitOfWork(engine)
    logger.info("No database configured; using in-memory storage")
    return InMemoryUnitOfWork()


def build_message_bus(
    uow: AbstractUnitOfWork,
    command_handlers: dict[type[Command], Callable[..., Any]],
    **dependencies: object,
) -> MessageBus:
    """Build a message bus with injected dependencies.

    ``uow`` is always injectable; extra keyword arguments (``clock``,
    ``id_generator``) are passed to handlers that declare them.
    """
    dependencies = {"uow": uow, **dependencies}
    injected_command_handlers = {
        command_type: inject_dependencies(handler, dependencies)
        for command_type, handler in command_handlers.items()
    }

    return MessageBus(
        uow,
        command_handlers=injected_command_handlers,
    )


def bootstrap(  # pylint: disable=too-many-arguments
    settings: EngineSettings | None = None,
    *,
    uow: AbstractUnitOfWork | None = None,
    clock: Clock | None = None,
    id_generator: IdGenerator | None = None,
    channel: ChangeChannel | None = None,
    require_db: bool = False,
) -> AppContainer:
    """Bootstrap the message bus with handlers and unit of work.

    Every collaborator can be overridden; the rest come from ``settings``
    (read from the environment when omitted).
    """
    settings = settings or EngineSettings.from_env()
    uow = uow or build_uow(settings, require_db=require_db)
    clock = clock or SystemClock(settings.timezone)
    id_generator = id_generator or ULIDGenerator()
    channel = channel or LocalChangeChannel()

    message_bus = build_message_bus(
        uow, COMMAND_HANDLERS, clock=clock, id_generator=id_generator
    )

    return AppContainer(
        message_bus=message_bus,
        clock=clock,
        channel=channel,
        settings=settings,
    )


def build_availability_service(
    container: AppContainer, *, on_view_change: ViewListener | None = None
) -> AvailabilityService:
    """Build the async facade over a bootstrapped container."""
    return AvailabilityService(
        container.message_bus,
        container.clock,
        channel=container.channel,
        poll_interval=container.settings.poll_interval,
        on_view_change=on_view_change,
    )


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> Callable:
    """Inject dependencies into a handler function based on its parameters."""
    params = inspect.signature(handler).parameters
    deps = {
        name: dependency for name, dependency in dependencies.items() if name in params
    }
    return partial(handler, **deps)
