"""Port for minting slot identifiers.

Slot ids are opaque strings chosen by the engine, not by storage, so a batch
can be planned in full before the first insert.
"""

import abc


class IdGenerator(abc.ABC):
    """Source of unique slot ids."""

    @abc.abstractmethod
    def new_id(self) -> str:
        """Return an id never handed out before by this generator."""

    def new_ids(self, count: int) -> list[str]:
        """Return ``count`` fresh ids in generation order.

        Raises:
            ValueError: If ``count`` is negative.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        return [self.new_id() for _ in range(count)]
