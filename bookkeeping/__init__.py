"""
Bookkeeping - in-memory double-entry bookkeeping core.

A Book records units of measurement, accounts and ordered transactions of
balanced debit/credit moves, and derives account balances at any position
in its history:
- Positional insertion of transactions and moves
- Multi-unit sums (currencies or any other unit)
- Typed, non-partial failures
- Structured logging of every mutation
"""

from bookkeeping.domain import (
    Account,
    AccountKey,
    Balance,
    Book,
    Move,
    MoveIndex,
    Side,
    Sum,
    Transaction,
    TransactionIndex,
    Unit,
    UnitKey,
)
from bookkeeping.exceptions import (
    BookkeepingError,
    ConcurrentModificationError,
    IndexOutOfBoundsError,
    InvariantViolationError,
    UnknownAccountError,
    UnknownUnitError,
)

__version__ = "0.1.0"

__all__ = [
    "Account",
    "AccountKey",
    "Balance",
    "Book",
    "Move",
    "MoveIndex",
    "Side",
    "Sum",
    "Transaction",
    "TransactionIndex",
    "Unit",
    "UnitKey",
    "BookkeepingError",
    "ConcurrentModificationError",
    "IndexOutOfBoundsError",
    "InvariantViolationError",
    "UnknownAccountError",
    "UnknownUnitError",
]
