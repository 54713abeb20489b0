"""
Module: bookkeeping.selectors.ledger_selector
Responsibility: Read-only ledger queries over a Book: trial balance, the
    system-wide total across all accounts, the double-entry check, and
    per-account activity. Every result derives from the Book's moves at
    query time; nothing is stored.
Architecture position: Kernel > Selectors. May import from domain/. MUST NOT
    mutate the Book.

Invariants enforced:
    DOUBLE_ENTRY_BALANCE -- is_balanced() verifies that the balances of all
        accounts through a transaction sum to zero in every unit.

Failure modes:
    - UnknownAccountError / IndexOutOfBoundsError propagate from the Book.
    - Queries over an empty set of accounts return empty results and a
      balanced (empty) system total.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from bookkeeping.domain.balance import Balance
from bookkeeping.domain.book import Book
from bookkeeping.domain.keys import (
    AccountKey,
    MoveIndex,
    Side,
    TransactionIndex,
    check_index,
)
from bookkeeping.domain.sum import Sum
from bookkeeping.logging_config import get_logger

logger = get_logger("selectors.ledger")


@dataclass(frozen=True)
class TrialBalanceRow:
    """Balance of a single account in a trial balance."""

    account_key: AccountKey
    balance: Balance


@dataclass(frozen=True)
class AccountPosting:
    """One move touching an account, seen from that account."""

    transaction_index: TransactionIndex
    move_index: MoveIndex
    side: Side
    sum: Sum

    def signed(self, amount_type: Callable[..., Any] = int) -> Balance:
        """Contribution of this posting to the account's balance."""
        balance = Balance(amount_type)
        if self.side is Side.DEBIT:
            balance += self.sum
        else:
            balance -= self.sum
        return balance


class LedgerSelector:
    """
    Selector for ledger queries over one Book.

    Contract:
        All queries read the Book as it is at call time. Transaction order
        is Book order and move order is position order.

    Non-goals:
        - Does NOT convert between units
        - Does NOT cache results across calls
    """

    def __init__(self, book: Book):
        self.book = book

    def trial_balance(
        self,
        transaction_index: TransactionIndex,
        amount_type: Callable[..., Any] | None = None,
    ) -> list[TrialBalanceRow]:
        """
        Balance of every account through ``transaction_index``, in account
        insertion order.
        """
        return [
            TrialBalanceRow(
                account_key=key,
                balance=self.book.account_balance_at_transaction(
                    key, transaction_index, amount_type
                ),
            )
            for key, _ in self.book.accounts()
        ]

    def system_total(
        self,
        transaction_index: TransactionIndex,
        amount_type: Callable[..., Any] | None = None,
    ) -> Balance:
        """Sum of every account's balance through ``transaction_index``."""
        total = Balance(amount_type or self.book.balance_amount_type)
        for row in self.trial_balance(transaction_index, amount_type):
            total += row.balance
        return total

    def is_balanced(
        self,
        transaction_index: TransactionIndex,
        amount_type: Callable[..., Any] | None = None,
    ) -> bool:
        """
        True when the system total is zero in every unit.

        Holds for every Book built through its public operations; a False
        result is logged at ERROR.
        """
        # INVARIANT: DOUBLE_ENTRY_BALANCE
        total = self.system_total(transaction_index, amount_type)
        balanced = total.is_zero()
        if not balanced:
            logger.error(
                "double_entry_violation",
                extra={
                    "transaction_index": transaction_index,
                    "system_total": repr(total),
                },
            )
        return balanced

    def account_activity(
        self,
        account_key: AccountKey,
        through: TransactionIndex | None = None,
    ) -> list[AccountPosting]:
        """
        Every move touching ``account_key`` in Book order, optionally only
        through transaction ``through`` (inclusive).

        Raises:
            UnknownAccountError: If ``account_key`` is not in the Book.
            IndexOutOfBoundsError: If ``through`` is past the last transaction.
        """
        self.book.get_account(account_key)
        last = None
        if through is not None:
            last = check_index("transaction", through, self.book.transaction_count)

        postings: list[AccountPosting] = []
        for transaction_index, transaction in self.book.transactions():
            if last is not None and transaction_index > last:
                break
            for move_index, move in transaction.moves():
                side = move.side_of(account_key)
                if side is not None:
                    postings.append(
                        AccountPosting(
                            transaction_index=transaction_index,
                            move_index=move_index,
                            side=side,
                            sum=move.sum,
                        )
                    )
        return postings
