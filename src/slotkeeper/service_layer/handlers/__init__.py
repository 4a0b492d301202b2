"""Service layer handlers."""

from collections.abc import Callable
from typing import Any

from .batch_handlers import COMMAND_HANDLERS as BATCH_COMMAND_HANDLERS
from .slot_handlers import COMMAND_HANDLERS as SLOT_COMMAND_HANDLERS
from .visibility_handlers import COMMAND_HANDLERS as VISIBILITY_COMMAND_HANDLERS

__all__ = ["COMMAND_HANDLERS"]

COMMAND_HANDLERS: dict[type, Callable[..., Any]] = {
    **SLOT_COMMAND_HANDLERS,
    **BATCH_COMMAND_HANDLERS,
    **VISIBILITY_COMMAND_HANDLERS,
}
