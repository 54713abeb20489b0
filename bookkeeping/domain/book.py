"""
Book -- Root aggregate of the ledger and its balance engine.

Responsibility:
    Owns every Unit, Account and Transaction (and, through transactions,
    every Move). Mints entity keys, validates every mutation against the
    book-wide invariants and computes account balances at a position in
    history.

Architecture position:
    Kernel > Domain -- in-memory, single-threaded, synchronous. Entities
    expose only their local data; every cross-entity operation goes
    through the Book.

Invariants enforced:
    DISTINCT_SIDES   -- insert_move / set_move_side reject debit == credit
    ACCOUNTS_RESOLVE -- insert_move / set_move_side reject unknown accounts
    UNITS_RESOLVE    -- insert_move / set_move_sum reject unknown units
    ORDER_PRESERVED  -- positional inserts shift later entries right,
                        removals shift them left; traversal is positional
    STABLE_KEYS      -- keys are never reused; metadata setters never
                        touch keys

Failure modes:
    - UnknownAccountError, UnknownUnitError, IndexOutOfBoundsError,
      InvariantViolationError from the operation that detects them.
    - ConcurrentModificationError from a lazy sequence whose collection
      was structurally modified while it was being consumed.
    Every failing operation leaves the Book unchanged.

Balance convention:
    Debits on the target account increase its balance, credits decrease
    it. Negate a Balance for the opposite convention.
"""

from __future__ import annotations

import functools
import itertools
from collections.abc import Callable, Iterator
from typing import Any

from bookkeeping.domain.account import Account
from bookkeeping.domain.balance import Balance
from bookkeeping.domain.iteration import guarded
from bookkeeping.domain.keys import (
    AccountKey,
    MoveIndex,
    Side,
    TransactionIndex,
    UnitKey,
    check_index,
)
from bookkeeping.domain.move import Move
from bookkeeping.domain.sum import Sum
from bookkeeping.domain.transaction import Transaction
from bookkeeping.domain.unit import Unit
from bookkeeping.exceptions import (
    BookkeepingError,
    UnknownAccountError,
    UnknownUnitError,
)
from bookkeeping.logging_config import LogContext, get_logger

logger = get_logger("domain.book")

_book_ids = itertools.count()


def _book_operation(method: Callable[..., Any]) -> Callable[..., Any]:
    """Bind log context for a Book method and log rejected calls."""

    @functools.wraps(method)
    def wrapper(self: Book, *args: Any, **kwargs: Any) -> Any:
        with LogContext.bind(book_id=str(self._id), operation=method.__name__):
            try:
                return method(self, *args, **kwargs)
            except BookkeepingError as e:
                logger.warning(
                    "book_operation_rejected",
                    extra={"error_code": e.code, "reason": str(e)},
                )
                raise

    return wrapper


class Book:
    """
    The ledger: units, accounts and ordered transactions of moves.

    Contract:
        - ``insert_*`` operations return the new entity's key or index.
        - ``accounts()``/``units()`` yield ``(key, entity)`` in insertion
          order; ``transactions()`` yields ``(index, transaction)`` in
          position order. Each call starts a fresh sequence.
        - Balances are derived on demand, never stored.

    Guarantees:
        - Validation completes before any mutation, so a raised error
          leaves the Book exactly as it was.
        - Keys from another Book never resolve here.

    Non-goals:
        - Does NOT persist, serialize or lock anything
        - Does NOT remove or reorder transactions, accounts or units
        - Does NOT convert between units or round amounts
    """

    def __init__(
        self,
        metadata: Any = None,
        *,
        balance_amount_type: Callable[..., Any] = int,
        guard_iteration: bool = True,
    ) -> None:
        self._id = next(_book_ids)
        self._metadata = metadata
        self._balance_amount_type = balance_amount_type
        self._guard_iteration = guard_iteration

        self._units: dict[UnitKey, Unit] = {}
        self._accounts: dict[AccountKey, Account] = {}
        self._transactions: list[Transaction] = []

        self._unit_serials = itertools.count()
        self._account_serials = itertools.count()

        self._units_revision = 0
        self._accounts_revision = 0
        self._transactions_revision = 0
        # Bumped by every change to a move's accounts or sum, in any transaction.
        self._postings_revision = 0

    # ------------------------------------------------------------------
    # Book metadata
    # ------------------------------------------------------------------

    @property
    def id(self) -> int:
        return self._id

    @property
    def metadata(self) -> Any:
        return self._metadata

    def set_book_metadata(self, metadata: Any) -> None:
        self._metadata = metadata

    @property
    def balance_amount_type(self) -> Callable[..., Any]:
        return self._balance_amount_type

    @property
    def transaction_count(self) -> int:
        return len(self._transactions)

    # ------------------------------------------------------------------
    # Resolution helpers
    # ------------------------------------------------------------------

    def _account(self, key: AccountKey) -> Account:
        try:
            return self._accounts[key]
        except (KeyError, TypeError):
            raise UnknownAccountError(key) from None

    def _unit(self, key: UnitKey) -> Unit:
        try:
            return self._units[key]
        except (KeyError, TypeError):
            raise UnknownUnitError(key) from None

    def _transaction(self, index: TransactionIndex) -> Transaction:
        position = check_index("transaction", index, len(self._transactions))
        return self._transactions[position]

    def _locate_move(
        self, transaction_index: TransactionIndex, move_index: MoveIndex
    ) -> tuple[Transaction, int]:
        transaction = self._transaction(transaction_index)
        position = check_index("move", move_index, len(transaction))
        return transaction, position

    def _check_sum(self, sum: Sum) -> Sum:
        if not isinstance(sum, Sum):
            raise TypeError(f"sum must be a Sum, got {type(sum).__name__}")
        # INVARIANT: UNITS_RESOLVE
        for unit_key in sum.unit_keys():
            self._unit(unit_key)
        return sum

    # ------------------------------------------------------------------
    # Entity insertion
    # ------------------------------------------------------------------

    @_book_operation
    def insert_unit(self, metadata: Any = None) -> UnitKey:
        """Add a unit and return its key."""
        key = UnitKey(self._id, next(self._unit_serials))
        self._units[key] = Unit(metadata)
        self._units_revision += 1
        logger.debug("unit_inserted", extra={"unit_key": key})
        return key

    @_book_operation
    def insert_account(self, metadata: Any = None) -> AccountKey:
        """Add an account and return its key."""
        key = AccountKey(self._id, next(self._account_serials))
        self._accounts[key] = Account(metadata)
        self._accounts_revision += 1
        logger.debug("account_inserted", extra={"account_key": key})
        return key

    @_book_operation
    def insert_transaction(
        self, position: TransactionIndex, metadata: Any = None
    ) -> TransactionIndex:
        """
        Insert an empty transaction at ``position``.

        Transactions at ``position`` and later shift right by one.
        ``position == transaction_count`` appends.

        Raises:
            IndexOutOfBoundsError: If ``position > transaction_count``.
        """
        index = check_index(
            "transaction", position, len(self._transactions), inclusive_end=True
        )
        self._transactions.insert(
            index, Transaction(metadata, guard_iteration=self._guard_iteration)
        )
        self._transactions_revision += 1
        logger.debug(
            "transaction_inserted",
            extra={
                "transaction_index": index,
                "transaction_count": len(self._transactions),
            },
        )
        return index

    @_book_operation
    def insert_move(
        self,
        transaction_index: TransactionIndex,
        move_index: MoveIndex,
        debit_account_key: AccountKey,
        credit_account_key: AccountKey,
        sum: Sum,
        metadata: Any = None,
    ) -> MoveIndex:
        """
        Insert a move at ``move_index`` within the transaction at
        ``transaction_index``. Moves at ``move_index`` and later shift right.

        Raises:
            IndexOutOfBoundsError: If either position is past the end.
            UnknownAccountError: If either account key is not in this Book.
            UnknownUnitError: If any unit in ``sum`` is not in this Book.
            InvariantViolationError: If debit and credit keys are equal.
        """
        transaction = self._transaction(transaction_index)
        position = check_index("move", move_index, len(transaction), inclusive_end=True)
        # INVARIANT: ACCOUNTS_RESOLVE
        self._account(debit_account_key)
        self._account(credit_account_key)
        self._check_sum(sum)
        # INVARIANT: DISTINCT_SIDES -- Move construction rejects debit == credit
        move = Move(debit_account_key, credit_account_key, sum, metadata)

        transaction._insert(position, move)
        self._postings_revision += 1
        logger.debug(
            "move_inserted",
            extra={
                "transaction_index": transaction_index,
                "move_index": position,
                "debit_account_key": debit_account_key,
                "credit_account_key": credit_account_key,
            },
        )
        return position

    # ------------------------------------------------------------------
    # Lookups and traversals
    # ------------------------------------------------------------------

    @_book_operation
    def get_account(self, key: AccountKey) -> Account:
        return self._account(key)

    @_book_operation
    def get_unit(self, key: UnitKey) -> Unit:
        return self._unit(key)

    @_book_operation
    def get_transaction(self, index: TransactionIndex) -> Transaction:
        return self._transaction(index)

    @_book_operation
    def get_move(
        self, transaction_index: TransactionIndex, move_index: MoveIndex
    ) -> Move:
        transaction, position = self._locate_move(transaction_index, move_index)
        return transaction.get_move(position)

    def accounts(self) -> Iterator[tuple[AccountKey, Account]]:
        """Yield ``(key, account)`` pairs in insertion order."""
        return guarded(
            list(self._accounts.items()),
            lambda: self._accounts_revision,
            "accounts",
            self._guard_iteration,
        )

    def units(self) -> Iterator[tuple[UnitKey, Unit]]:
        """Yield ``(key, unit)`` pairs in insertion order."""
        return guarded(
            list(self._units.items()),
            lambda: self._units_revision,
            "units",
            self._guard_iteration,
        )

    def transactions(self) -> Iterator[tuple[TransactionIndex, Transaction]]:
        """Yield ``(index, transaction)`` pairs in current position order."""
        return guarded(
            list(enumerate(self._transactions)),
            lambda: self._transactions_revision,
            "transactions",
            self._guard_iteration,
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    @_book_operation
    def set_account(self, key: AccountKey, metadata: Any) -> None:
        self._account(key).set_metadata(metadata)

    @_book_operation
    def set_unit(self, key: UnitKey, metadata: Any) -> None:
        self._unit(key).set_metadata(metadata)

    @_book_operation
    def set_transaction_meta(
        self, transaction_index: TransactionIndex, metadata: Any
    ) -> None:
        self._transaction(transaction_index).set_metadata(metadata)

    @_book_operation
    def set_move_meta(
        self,
        transaction_index: TransactionIndex,
        move_index: MoveIndex,
        metadata: Any,
    ) -> None:
        transaction, position = self._locate_move(transaction_index, move_index)
        transaction.get_move(position).set_metadata(metadata)

    @_book_operation
    def set_move_sum(
        self,
        transaction_index: TransactionIndex,
        move_index: MoveIndex,
        sum: Sum,
    ) -> None:
        """
        Replace the Sum of a move.

        Raises:
            IndexOutOfBoundsError: If either position does not address a move.
            UnknownUnitError: If any unit in ``sum`` is not in this Book.
        """
        transaction, position = self._locate_move(transaction_index, move_index)
        self._check_sum(sum)
        transaction._replace(position, transaction.get_move(position).with_sum(sum))
        self._postings_revision += 1
        logger.debug(
            "move_updated",
            extra={
                "transaction_index": transaction_index,
                "move_index": position,
                "field": "sum",
            },
        )

    @_book_operation
    def set_move_side(
        self,
        transaction_index: TransactionIndex,
        move_index: MoveIndex,
        side: Side,
        account_key: AccountKey,
    ) -> None:
        """
        Point one side of a move at another account.

        Raises:
            IndexOutOfBoundsError: If either position does not address a move.
            UnknownAccountError: If ``account_key`` is not in this Book.
            InvariantViolationError: If the move's other side is already
                ``account_key``.
        """
        if not isinstance(side, Side):
            raise TypeError(f"side must be a Side, got {side!r}")
        transaction, position = self._locate_move(transaction_index, move_index)
        self._account(account_key)
        updated = transaction.get_move(position).with_account(side, account_key)
        transaction._replace(position, updated)
        self._postings_revision += 1
        logger.debug(
            "move_updated",
            extra={
                "transaction_index": transaction_index,
                "move_index": position,
                "field": side.value,
                "account_key": account_key,
            },
        )

    @_book_operation
    def remove_move(
        self, transaction_index: TransactionIndex, move_index: MoveIndex
    ) -> Move:
        """
        Remove a move and return it. Later moves shift left by one.

        Raises:
            IndexOutOfBoundsError: If either position does not address a move.
        """
        transaction, position = self._locate_move(transaction_index, move_index)
        removed = transaction._remove(position)
        self._postings_revision += 1
        logger.debug(
            "move_removed",
            extra={
                "transaction_index": transaction_index,
                "move_index": position,
                "move_count": len(transaction),
            },
        )
        return removed

    # ------------------------------------------------------------------
    # Balance engine
    # ------------------------------------------------------------------

    @staticmethod
    def _apply_move(balance: Balance, move: Move, account_key: AccountKey) -> bool:
        if move.debit_account_key == account_key:
            balance += move._sum
            return True
        if move.credit_account_key == account_key:
            balance -= move._sum
            return True
        return False

    @_book_operation
    def account_balance_at_transaction(
        self,
        account_key: AccountKey,
        transaction_index: TransactionIndex,
        amount_type: Callable[..., Any] | None = None,
    ) -> Balance:
        """
        Balance of an account through the transaction at
        ``transaction_index``, inclusive.

        Walks transactions ``0..transaction_index`` in Book order and the
        moves of each in position order. A debit on the account adds the
        move's Sum, a credit subtracts it; every amount is converted with
        ``amount_type`` (default: the Book's ``balance_amount_type``) as it
        is applied.

        Raises:
            UnknownAccountError: If ``account_key`` is not in this Book.
            IndexOutOfBoundsError: If ``transaction_index >= transaction_count``.
        """
        self._account(account_key)
        last = check_index("transaction", transaction_index, len(self._transactions))
        balance = Balance(amount_type or self._balance_amount_type)
        applied = 0
        for transaction in self._transactions[: last + 1]:
            for move in transaction._moves:
                if self._apply_move(balance, move, account_key):
                    applied += 1
        logger.debug(
            "balance_computed",
            extra={
                "account_key": account_key,
                "transaction_index": last,
                "moves_applied": applied,
            },
        )
        return balance

    @_book_operation
    def running_balance(
        self,
        account_key: AccountKey,
        amount_type: Callable[..., Any] | None = None,
    ) -> Iterator[tuple[TransactionIndex, Balance]]:
        """
        Yield ``(index, balance)`` after every transaction in Book order.

        Each yielded Balance equals
        ``account_balance_at_transaction(account_key, index)``; the sequence
        is computed in one pass. Besides structural changes to the
        transaction list, any move inserted, removed or changed in any
        transaction (including ones already yielded) invalidates the
        sequence, since earlier balances would no longer hold.

        Raises:
            UnknownAccountError: Immediately, if ``account_key`` is unknown.
            ConcurrentModificationError: On the next step after the Book's
                transactions or moves changed (unless the guard is off).
        """
        self._account(account_key)
        balance = Balance(amount_type or self._balance_amount_type)
        entries = guarded(
            list(enumerate(self._transactions)),
            lambda: (self._transactions_revision, self._postings_revision),
            "transactions",
            self._guard_iteration,
        )

        def _running() -> Iterator[tuple[TransactionIndex, Balance]]:
            for index, transaction in entries:
                for move in transaction._moves:
                    self._apply_move(balance, move, account_key)
                yield index, balance.copy()

        return _running()

    def __repr__(self) -> str:
        return (
            f"Book(id={self._id}, units={len(self._units)}, "
            f"accounts={len(self._accounts)}, "
            f"transactions={len(self._transactions)})"
        )
