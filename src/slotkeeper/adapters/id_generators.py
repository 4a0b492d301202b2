"""Slot id generators.

`ULIDGenerator` is what `bootstrap` wires in. The other two exist for tests
and for deployments that would rather not leak creation times in ids.
"""

import itertools
import threading
import uuid

from ulid import monotonic

from slotkeeper.interfaces.id_generator import IdGenerator


class ULIDGenerator(IdGenerator):
    """Monotonic ULIDs from `ulid-py`, safe to share between worker threads.

    Ids sort by creation time, so the slots of one quick setup keep the order
    they were generated in even within the same millisecond.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            return str(monotonic.new())

    def new_ids(self, count: int) -> list[str]:
        """Mint a whole batch under one lock so no other caller interleaves."""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        with self._lock:
            return [str(monotonic.new()) for _ in range(count)]


class UUIDv4Generator(IdGenerator):
    """Random, unordered ids."""

    def new_id(self) -> str:
        return str(uuid.uuid4())


class SimpleIdGenerator(IdGenerator):
    """Readable sequential ids such as ``slot-0001``.

    Note:
        Not suitable for production use; primarily for tests and demos.
    """

    def __init__(self, prefix: str = "slot-", width: int = 4) -> None:
        self._prefix = prefix
        self._width = width
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            n = next(self._counter)
        return f"{self._prefix}{n:0{self._width}d}"
