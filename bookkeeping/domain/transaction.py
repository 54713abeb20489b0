"""
Transaction -- An ordered group of moves sharing metadata.

Responsibility:
    Holds moves in caller-controlled positional order. A MoveIndex is a
    position in this order and shifts when moves are inserted or removed
    before it.

Architecture position:
    Kernel > Domain. Transactions are created and structurally mutated only
    through the Book; they expose their local data and metadata.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from bookkeeping.domain.iteration import guarded
from bookkeeping.domain.keys import MoveIndex, check_index
from bookkeeping.domain.move import Move


class Transaction:
    """
    Represents a transaction.

    Contract:
        ``moves()`` yields ``(MoveIndex, Move)`` in current position order.
        It may be called repeatedly; a sequence in progress raises
        ConcurrentModificationError if moves are inserted or removed before
        it is exhausted.
    """

    __slots__ = ("_moves", "_metadata", "_revision", "_guard_iteration")

    def __init__(self, metadata: Any = None, *, guard_iteration: bool = True) -> None:
        self._moves: list[Move] = []
        self._metadata = metadata
        self._revision = 0
        self._guard_iteration = guard_iteration

    def moves(self) -> Iterator[tuple[MoveIndex, Move]]:
        """Yield ``(index, move)`` pairs in position order."""
        return guarded(
            list(enumerate(self._moves)),
            lambda: self._revision,
            "moves",
            self._guard_iteration,
        )

    def get_move(self, index: MoveIndex) -> Move:
        return self._moves[check_index("move", index, len(self._moves))]

    @property
    def metadata(self) -> Any:
        return self._metadata

    def get_metadata(self) -> Any:
        return self._metadata

    def set_metadata(self, metadata: Any) -> None:
        self._metadata = metadata

    # Structural mutation, called by the Book after validation.

    def _insert(self, index: MoveIndex, move: Move) -> None:
        self._moves.insert(index, move)
        self._revision += 1

    def _replace(self, index: MoveIndex, move: Move) -> None:
        self._moves[index] = move

    def _remove(self, index: MoveIndex) -> Move:
        removed = self._moves.pop(index)
        self._revision += 1
        return removed

    def __len__(self) -> int:
        return len(self._moves)

    def __repr__(self) -> str:
        return f"Transaction({self._metadata!r}, moves={len(self._moves)})"
