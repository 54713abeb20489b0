"""
Iteration guard -- detects structural mutation during lazy traversal.

Every Book collection (accounts, units, transactions, the moves of each
transaction) carries a revision counter that structural mutations bump.
A guarded sequence remembers the revision current when it was handed out
and refuses to continue once it changes.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterator
from typing import TypeVar

from bookkeeping.exceptions import ConcurrentModificationError

T = TypeVar("T")


def guarded(
    items: list[T],
    revision: Callable[[], Hashable],
    collection: str,
    enabled: bool = True,
) -> Iterator[T]:
    """
    Iterate over ``items`` while ``revision()`` stays unchanged.

    ``items`` is consumed as given; callers pass a snapshot so that an
    unguarded iteration still sees a consistent sequence.

    Raises:
        ConcurrentModificationError: On the first step after ``revision()``
            differs from its value at call time (only when ``enabled``),
            including the step that would end the sequence.
    """
    expected = revision()

    def _check() -> None:
        if enabled and revision() != expected:
            raise ConcurrentModificationError(collection)

    def _iterate() -> Iterator[T]:
        for item in items:
            _check()
            yield item
        _check()

    return _iterate()
