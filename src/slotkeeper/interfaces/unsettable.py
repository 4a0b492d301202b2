"""Tri-state handling for slot patch fields.

This module defines the ``UNSET`` sentinel, the `Unsettable` type alias,
and the `resolve` helper for applying partial updates to stored slots.

A field of type ``Unsettable[T]`` can take two meaningful states:

* ``UNSET``: the field is intentionally left unchanged in a patch.
* concrete ``T``: the field is explicitly updated to a new value.

Slot fields are never clearable, so ``None`` is rejected by `resolve`.
"""

from dataclasses import dataclass
from typing import TypeVar


def _get_unset() -> "_UnsetType":
    # Factory used by pickle to retrieve the one true instance.
    return UNSET


@dataclass(frozen=True)
class _UnsetType:
    """Sentinel to mark fields intentionally left unset in patches."""

    def __bool__(self) -> bool:  # falsy to simplify conditionals
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __reduce__(self):  # keep singleton on pickle
        return (_get_unset, ())


# Singleton instance
UNSET = _UnsetType()

T = TypeVar("T")
type Unsettable[T] = T | _UnsetType


def is_unset(value: object) -> bool:
    """True if ``value`` is the ``UNSET`` sentinel."""
    return isinstance(value, _UnsetType)


def resolve(value: "T | _UnsetType", current: T, *, field: str) -> T:
    """Resolve a patch value against the current value.

    Args:
        value: The new value from the patch (UNSET or a concrete value).
        current: The current stored value.
        field: The name of the field (for error messages).

    Returns:
        ``current`` when ``value`` is UNSET, otherwise ``value``.

    Raises:
        ValueError: If ``value`` is None; slot fields cannot be cleared.
    """
    if isinstance(value, _UnsetType):
        return current
    if value is None:
        raise ValueError(f"{field} cannot be cleared")
    return value
