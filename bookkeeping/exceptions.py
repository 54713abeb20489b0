"""
Typed Exception Hierarchy for the bookkeeping kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of a ledger must react to precise failure kinds. Parsing message
strings is fragile, so every error is:
  1. A TYPED exception class (catch by type, not message)
  2. Identified by a CODE class attribute (machine-readable)
  3. Carrying structured DATA (the offending key, index, collection)

Example:
    try:
        book.insert_move(0, 0, wallet, bank, total, "deposit")
    except UnknownAccountError as e:
        log.warning("unknown account %s", e.account_key)
    except IndexOutOfBoundsError as e:
        log.warning("%s %d past end (%d)", e.collection, e.index, e.length)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    BookkeepingError (base)
    |
    +-- AccountError
    |   +-- UnknownAccountError
    |
    +-- UnitError
    |   +-- UnknownUnitError
    |
    +-- PositionError
    |   +-- IndexOutOfBoundsError
    |
    +-- MoveError
    |   +-- InvariantViolationError
    |
    +-- ConcurrencyError
        +-- ConcurrentModificationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                     | When Raised
----------------|--------------------------|------------------------------------
Account         | UNKNOWN_ACCOUNT          | AccountKey does not resolve
Unit            | UNKNOWN_UNIT             | UnitKey in a Sum does not resolve
Position        | INDEX_OUT_OF_BOUNDS      | Transaction/move index out of range
Move            | INVARIANT_VIOLATION      | Debit and credit are the same account
Concurrency     | CONCURRENT_MODIFICATION  | Collection changed while iterating

A failed Book operation never partially applies: validation completes before
any state is touched.
"""

from __future__ import annotations

from typing import Any

from bookkeeping.invariants import BookInvariant


class BookkeepingError(Exception):
    """
    Base exception for all bookkeeping kernel errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "BOOKKEEPING_ERROR"


# Account-related exceptions


class AccountError(BookkeepingError):
    """Base exception for account-related errors."""

    code: str = "ACCOUNT_ERROR"


class UnknownAccountError(AccountError):
    """AccountKey does not resolve in this book."""

    code: str = "UNKNOWN_ACCOUNT"

    def __init__(self, account_key: Any):
        self.account_key = account_key
        super().__init__(f"Unknown account: {account_key!r}")


# Unit-related exceptions


class UnitError(BookkeepingError):
    """Base exception for unit-related errors."""

    code: str = "UNIT_ERROR"


class UnknownUnitError(UnitError):
    """UnitKey does not resolve in this book."""

    code: str = "UNKNOWN_UNIT"

    def __init__(self, unit_key: Any):
        self.unit_key = unit_key
        super().__init__(f"Unknown unit: {unit_key!r}")


# Position-related exceptions


class PositionError(BookkeepingError):
    """Base exception for positional addressing errors."""

    code: str = "POSITION_ERROR"


class IndexOutOfBoundsError(PositionError):
    """
    A TransactionIndex or MoveIndex is outside the permitted range.

    ``length`` is the size of the addressed collection at the time of the
    call. Insert operations accept ``0 <= index <= length``; lookups,
    mutations and removals accept ``0 <= index < length``.
    """

    code: str = "INDEX_OUT_OF_BOUNDS"

    def __init__(self, collection: str, index: int, length: int):
        self.collection = collection
        self.index = index
        self.length = length
        super().__init__(
            f"{collection} index {index} out of bounds (length {length})"
        )


# Move-related exceptions


class MoveError(BookkeepingError):
    """Base exception for move-related errors."""

    code: str = "MOVE_ERROR"


class InvariantViolationError(MoveError):
    """A move would have the same account on its debit and credit side."""

    code: str = "INVARIANT_VIOLATION"

    def __init__(
        self,
        account_key: Any,
        invariant: BookInvariant = BookInvariant.DISTINCT_SIDES,
    ):
        self.account_key = account_key
        self.invariant = invariant
        super().__init__(
            f"Debit and credit accounts are the same: {account_key!r}"
        )


# Concurrency-related exceptions


class ConcurrencyError(BookkeepingError):
    """Base exception for concurrent access misuse."""

    code: str = "CONCURRENCY_ERROR"


class ConcurrentModificationError(ConcurrencyError):
    """
    A collection was structurally modified while a lazy sequence over it
    was still being consumed.
    """

    code: str = "CONCURRENT_MODIFICATION"

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(
            f"{collection} were modified during iteration"
        )
