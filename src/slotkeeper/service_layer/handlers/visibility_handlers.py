"""Provider visibility handler."""

import logging
from collections.abc import Callable
from typing import Any

from slotkeeper.interfaces.unit_of_work import AbstractUnitOfWork
from slotkeeper.service_layer import commands

logger = logging.getLogger(__name__)


def set_visibility(cmd: commands.SetVisibility, uow: AbstractUnitOfWork) -> bool:
    """Persist the provider's discoverability flag and return it."""
    with uow:
        uow.visibility.set(cmd.provider_id, cmd.visible)
        uow.commit()

    logger.info(
        "Provider %s is now %s",
        cmd.provider_id,
        "visible" if cmd.visible else "hidden",
    )
    return cmd.visible


COMMAND_HANDLERS: dict[type, Callable[..., Any]] = {
    commands.SetVisibility: set_visibility,
}
