"""Message bus routing commands to their handlers."""

import logging
from collections.abc import Callable
from typing import Any

from slotkeeper.domain.errors import DomainError
from slotkeeper.interfaces.errors import SlotkeeperError
from slotkeeper.interfaces.unit_of_work import AbstractUnitOfWork

from .commands import Command
from .errors import ServiceError

logger = logging.getLogger(__name__)

# Outcomes callers are expected to handle; logged without a traceback.
EXPECTED_ERRORS = (DomainError, SlotkeeperError, ServiceError)

# pylint: disable=too-few-public-methods


class NoHandlerForCommand(LookupError):
    """Exception raised when no handler is found for a command."""

    def __init__(self, cmd: Command) -> None:
        super().__init__(f"No handler found for command {type(cmd).__name__}")


class MessageBus:
    """Route commands to handlers, logging dispatch and failures.

    Args:
        uow: The unit of work the handlers were wired with; exposed here so
            read paths can share it.
        command_handlers: Mapping of command type to a callable taking only the
            command. Other dependencies are bound beforehand (see
            `slotkeeper.bootstrap.inject_dependencies`).

    Note:
        Dispatch is synchronous. Async callers run `handle` in a worker thread.
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        command_handlers: dict[type[Command], Callable[..., Any]],
    ) -> None:
        self.uow = uow
        self._command_handlers = command_handlers

    def handle(self, cmd: Command) -> Any:
        """Dispatch a command and return whatever its handler returns.

        Raises:
            NoHandlerForCommand: If no handler is registered for the command type.
            Exception: Whatever the handler raises, re-raised unchanged.
        """
        if handler := self._command_handlers.get(type(cmd)):
            handler_name = self._get_handler_name(handler)
            logger.debug("Handling command %s with handler %s", cmd, handler_name)
            try:
                return handler(cmd)
            except EXPECTED_ERRORS as e:
                logger.info("Command %s rejected: %s", type(cmd).__name__, e)
                raise
            except Exception:  # pylint: disable=broad-except
                logger.exception(
                    "Exception handling command %s with handler %s", cmd, handler_name
                )
                raise
        logger.error("No handler found for command %s", type(cmd).__name__)
        raise NoHandlerForCommand(cmd)

    @staticmethod
    def _get_handler_name(fn: Callable[..., Any]) -> str:
        if hasattr(fn, "__name__"):
            return fn.__name__
        if hasattr(fn, "func") and hasattr(fn.func, "__name__"):
            return fn.func.__name__
        return repr(fn)
