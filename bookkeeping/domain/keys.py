"""
Keys -- Opaque entity handles and positional indices.

Responsibility:
    Defines the identifiers through which callers address Book-owned
    entities: UnitKey and AccountKey (minted by a Book, stable for the
    lifetime of the entity), TransactionIndex and MoveIndex (positional,
    shift on insertion and removal), and the Side selector.

Architecture position:
    Kernel > Domain -- pure value types, zero I/O.

Invariants enforced:
    STABLE_KEYS -- keys carry a never-reused serial and the id of the Book
                   that minted them, so a key never resolves in another Book
                   and never aliases a later entity.

Failure modes:
    - TypeError from ``check_index`` when an index is not an integer.
    - IndexOutOfBoundsError from ``check_index`` when an index is negative
      or past the permitted end.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum

from bookkeeping.exceptions import IndexOutOfBoundsError

# Positional indices. Plain ints; they are only meaningful until the next
# structural mutation of the collection they address.
TransactionIndex = int
MoveIndex = int


class Side(str, Enum):
    """
    Which side of a move an account sits on.

    Contract:
        Exactly two values: DEBIT and CREDIT.
    """

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def opposite(self) -> Side:
        return Side.CREDIT if self is Side.DEBIT else Side.DEBIT


@dataclass(frozen=True, order=True, slots=True)
class UnitKey:
    """
    Handle of a Unit inside one Book.

    Ordering is (book_id, serial); within one Book that is the order in
    which units were inserted. Sums and Balances iterate in this order.
    """

    book_id: int
    serial: int

    def __repr__(self) -> str:
        return f"UnitKey({self.book_id}v{self.serial})"


@dataclass(frozen=True, order=True, slots=True)
class AccountKey:
    """Handle of an Account inside one Book."""

    book_id: int
    serial: int

    def __repr__(self) -> str:
        return f"AccountKey({self.book_id}v{self.serial})"


def check_index(
    collection: str,
    index: int,
    length: int,
    *,
    inclusive_end: bool = False,
) -> int:
    """
    Validate a positional index against a collection length.

    Preconditions:
        - ``index`` supports ``__index__`` (ints, not floats or strings).

    Postconditions:
        - Returns the index as a plain int with ``0 <= index < length``,
          or ``0 <= index <= length`` when ``inclusive_end`` is set
          (insert positions).

    Raises:
        TypeError: If ``index`` is not an integer.
        IndexOutOfBoundsError: If ``index`` is outside the permitted range.
    """
    if isinstance(index, bool):
        raise TypeError(f"{collection} index must be an int, got bool")
    position = operator.index(index)
    upper = length if inclusive_end else length - 1
    if position < 0 or position > upper:
        raise IndexOutOfBoundsError(collection, position, length)
    return position
