"""
Move -- One debit/credit pair over a Sum.

Responsibility:
    Records the transfer of a Sum from a credit account to a debit account.
    From the debit account's point of view the move contributes ``+sum``,
    from the credit account's ``-sum``.

Architecture position:
    Kernel > Domain -- pure value object, zero I/O. Moves only hold keys;
    resolving those keys is the Book's job.

Invariants enforced:
    DISTINCT_SIDES -- debit and credit account keys differ. Checked on
                      construction and on every derived copy.

Failure modes:
    - InvariantViolationError when debit and credit keys are equal.
    - TypeError when keys are not AccountKeys or sum is not a Sum.
"""

from __future__ import annotations

from typing import Any

from bookkeeping.domain.keys import AccountKey, Side
from bookkeeping.domain.sum import Sum
from bookkeeping.exceptions import InvariantViolationError


class Move:
    """
    A single debit/credit pair.

    Contract:
        Accounts and sum are fixed for the life of a Move; the Book swaps in
        a re-validated copy (``with_sum``/``with_account``) when a caller
        changes them. Metadata is mutable in place.
    """

    __slots__ = ("_debit_account_key", "_credit_account_key", "_sum", "_metadata")

    def __init__(
        self,
        debit_account_key: AccountKey,
        credit_account_key: AccountKey,
        sum: Sum,
        metadata: Any = None,
    ) -> None:
        for key in (debit_account_key, credit_account_key):
            if not isinstance(key, AccountKey):
                raise TypeError(f"account key must be an AccountKey, got {type(key).__name__}")
        if not isinstance(sum, Sum):
            raise TypeError(f"sum must be a Sum, got {type(sum).__name__}")
        # INVARIANT: DISTINCT_SIDES
        if debit_account_key == credit_account_key:
            raise InvariantViolationError(debit_account_key)
        self._debit_account_key = debit_account_key
        self._credit_account_key = credit_account_key
        self._sum = sum.copy()
        self._metadata = metadata

    @property
    def debit_account_key(self) -> AccountKey:
        return self._debit_account_key

    @property
    def credit_account_key(self) -> AccountKey:
        return self._credit_account_key

    def account_key(self, side: Side) -> AccountKey:
        """Account key on the given side."""
        if side is Side.DEBIT:
            return self._debit_account_key
        if side is Side.CREDIT:
            return self._credit_account_key
        raise TypeError(f"side must be a Side, got {side!r}")

    def side_of(self, account_key: AccountKey) -> Side | None:
        """Side ``account_key`` occupies in this move, or None if it is not involved."""
        if account_key == self._debit_account_key:
            return Side.DEBIT
        if account_key == self._credit_account_key:
            return Side.CREDIT
        return None

    @property
    def sum(self) -> Sum:
        """A copy of the moved Sum."""
        return self._sum.copy()

    @property
    def metadata(self) -> Any:
        return self._metadata

    def set_metadata(self, metadata: Any) -> None:
        self._metadata = metadata

    def with_sum(self, sum: Sum) -> Move:
        return Move(self._debit_account_key, self._credit_account_key, sum, self._metadata)

    def with_account(self, side: Side, account_key: AccountKey) -> Move:
        """Copy of this move with ``side`` pointing at ``account_key``."""
        if side is Side.DEBIT:
            return Move(account_key, self._credit_account_key, self._sum, self._metadata)
        if side is Side.CREDIT:
            return Move(self._debit_account_key, account_key, self._sum, self._metadata)
        raise TypeError(f"side must be a Side, got {side!r}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Move):
            return NotImplemented
        return (
            self._debit_account_key == other._debit_account_key
            and self._credit_account_key == other._credit_account_key
            and self._sum == other._sum
            and self._metadata == other._metadata
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Move(debit={self._debit_account_key!r}, "
            f"credit={self._credit_account_key!r}, "
            f"sum={self._sum!r}, metadata={self._metadata!r})"
        )
