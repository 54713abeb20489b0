"""
Pure domain layer.

This module contains the in-memory ledger model: keys, Sum, Balance,
Account, Unit, Move, Transaction and the Book aggregate with its balance
engine. It has NO dependencies on:
- Persistence or serialization
- Time/clock
- Configuration (bookkeeping_config sits above the kernel)
"""

from bookkeeping.domain.account import Account
from bookkeeping.domain.balance import Balance
from bookkeeping.domain.book import Book
from bookkeeping.domain.keys import (
    AccountKey,
    MoveIndex,
    Side,
    TransactionIndex,
    UnitKey,
)
from bookkeeping.domain.move import Move
from bookkeeping.domain.sum import Sum
from bookkeeping.domain.transaction import Transaction
from bookkeeping.domain.unit import Unit

__all__ = [
    # Keys
    "AccountKey",
    "UnitKey",
    "TransactionIndex",
    "MoveIndex",
    "Side",
    # Values
    "Sum",
    "Balance",
    # Entities
    "Account",
    "Unit",
    "Move",
    "Transaction",
    # Aggregate
    "Book",
]
