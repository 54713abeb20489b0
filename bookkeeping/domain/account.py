"""Account -- a ledger bucket carrying caller metadata."""

from __future__ import annotations

from typing import Any


class Account:
    """
    Represents an account (https://en.wikipedia.org/wiki/Account_(bookkeeping)).

    Accounts are created only by ``Book.insert_account`` and are addressed
    by the AccountKey it returns. Two accounts with equal metadata are
    still distinct accounts.
    """

    __slots__ = ("_metadata",)

    def __init__(self, metadata: Any = None) -> None:
        self._metadata = metadata

    @property
    def metadata(self) -> Any:
        return self._metadata

    def get_metadata(self) -> Any:
        return self._metadata

    def set_metadata(self, metadata: Any) -> None:
        self._metadata = metadata

    def __repr__(self) -> str:
        return f"Account({self._metadata!r})"
