"""Read-only ledger queries derived from a Book."""

from bookkeeping.selectors.ledger_selector import (
    AccountPosting,
    LedgerSelector,
    TrialBalanceRow,
)

__all__ = [
    "AccountPosting",
    "LedgerSelector",
    "TrialBalanceRow",
]
