"""Duplicate start-time detection within one provider-day."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import time
from typing import Protocol

from .times import TimeLike, parse_time

__all__ = ["SlotLike", "find_duplicate", "is_duplicate"]


class SlotLike(Protocol):  # pylint: disable=too-few-public-methods
    """Anything with an id and a start time (stored records, view slots)."""

    @property
    def id(self) -> str: ...  # pylint: disable=invalid-name

    @property
    def start_time(self) -> time: ...


def find_duplicate(
    slots: Iterable[SlotLike], start_time: TimeLike, exclude_id: str | None = None
) -> SlotLike | None:
    """Return the slot that already starts at ``start_time``, if any.

    Both sides are normalized first, so ``"09:00"`` matches a stored
    ``09:00:00``. The slot whose id equals ``exclude_id`` is ignored, which is
    how an edit avoids colliding with itself.
    """
    wanted = parse_time(start_time)
    for slot in slots:
        if slot.id == exclude_id:
            continue
        if parse_time(slot.start_time) == wanted:
            return slot
    return None


def is_duplicate(
    slots: Iterable[SlotLike], start_time: TimeLike, exclude_id: str | None = None
) -> bool:
    """True iff another slot on the same day starts at ``start_time``."""
    return find_duplicate(slots, start_time, exclude_id) is not None
