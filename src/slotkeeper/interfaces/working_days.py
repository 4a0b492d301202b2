"""Working-day state port.

The working-day map (``date -> bool``) is the sole authority on whether a day
accepts slots. It is stored per provider and survives the deletion of every
slot on a day. Dates absent from the map are not working days.
"""

import abc
from datetime import date

type WorkingDayMap = dict[date, bool]


class WorkingDayStore(abc.ABC):
    """Per-provider storage for the working-day map."""

    @abc.abstractmethod
    def get(self, provider_id: str) -> WorkingDayMap:
        """Return the provider's full working-day map (empty if never set).

        Raises:
            StoreUnavailableError: for operational errors.
        """

    @abc.abstractmethod
    def put(self, provider_id: str, working_days: WorkingDayMap) -> None:
        """Replace the provider's working-day map wholesale.

        Raises:
            StoreUnavailableError: for operational errors.
        """
