"""Clock port.

The engine never calls ``datetime.now()`` directly: past-time guards and the
rolling calendar both read the provider-local wall clock through this port so
tests can pin it.
"""

import abc
from datetime import date, datetime

# pylint: disable=too-few-public-methods


class Clock(abc.ABC):
    """Source of the provider-local current time."""

    @abc.abstractmethod
    def now(self) -> datetime:
        """Return the current tz-aware datetime in the provider's timezone."""

    def today(self) -> date:
        """Return the provider-local calendar date."""
        return self.now().date()
