"""
Bridges -- turn a BookkeepingConfig into kernel objects.

The kernel never imports this package; these functions are the only place
where configuration values become Book arguments and logging setup.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Any

from bookkeeping.domain import AccountKey, Book, UnitKey
from bookkeeping.logging_config import configure_logging
from bookkeeping_config.schema import BookkeepingConfig

_AMOUNT_TYPES: dict[str, Callable[..., Any]] = {
    "int": int,
    "decimal": Decimal,
    "fraction": Fraction,
}


@dataclass(frozen=True)
class SeededBook:
    """A Book built from configuration, with chart names resolved to keys."""

    book: Book
    unit_keys: dict[str, UnitKey]
    account_keys: dict[str, AccountKey]


def resolve_amount_type(name: str) -> Callable[..., Any]:
    """Map a configured amount type name to its numeric type."""
    try:
        return _AMOUNT_TYPES[name]
    except KeyError:
        raise ValueError(f"Unknown balance amount type: {name}") from None


def configure_logging_from(config: BookkeepingConfig) -> None:
    """Apply the logging section (idempotent, like configure_logging)."""
    configure_logging(
        level=logging.getLevelName(config.logging.level),
        structured=config.logging.structured,
    )


def build_book(config: BookkeepingConfig) -> SeededBook:
    """
    Create a Book with the configured settings and seed its chart.

    Unit and account metadata is the definition's metadata mapping with the
    name added under ``"name"``. Chart order is insertion order.
    """
    book = Book(
        config.book.metadata,
        balance_amount_type=resolve_amount_type(config.book.balance_amount_type),
        guard_iteration=config.book.guard_iteration,
    )
    unit_keys = {
        unit.name: book.insert_unit({**unit.metadata, "name": unit.name})
        for unit in config.units
    }
    account_keys = {
        account.name: book.insert_account({**account.metadata, "name": account.name})
        for account in config.accounts
    }
    return SeededBook(book=book, unit_keys=unit_keys, account_keys=account_keys)
