"""
Book Invariants Contract.

These invariants are structural law for every Book. They are enforced at
the Book's mutation boundary; no configuration value may switch them off.

This module exists solely to declare these invariants explicitly. The
enforcement lives in bookkeeping.domain.move (distinct sides) and
bookkeeping.domain.book (resolution, ordering, atomicity).
"""

from enum import Enum, unique


@unique
class BookInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel.

    Each value names one structural guarantee that every Book provides
    unconditionally.
    """

    DISTINCT_SIDES = "distinct_sides"
    """Every move has different debit and credit accounts. Enforced by
    Move construction, Book.insert_move and Book.set_move_side."""

    ACCOUNTS_RESOLVE = "accounts_resolve"
    """Every AccountKey referenced by a move exists in the owning Book.
    Accounts are never removed, so the check at insertion is final."""

    UNITS_RESOLVE = "units_resolve"
    """Every UnitKey appearing in a move's Sum exists in the owning Book.
    Enforced by Book.insert_move and Book.set_move_sum."""

    ORDER_PRESERVED = "order_preserved"
    """Transactions keep position order across the Book and moves keep
    position order within their transaction."""

    STABLE_KEYS = "stable_keys"
    """Account and unit keys are never reused and metadata mutation never
    invalidates them."""

    DOUBLE_ENTRY_BALANCE = "double_entry_balance"
    """For every prefix of the Book, the balances of all accounts sum to
    zero in every unit. Follows from DISTINCT_SIDES and the balance
    engine's sign convention; verified by LedgerSelector.is_balanced."""


# All invariants as a frozenset for programmatic checks.
ALL_BOOK_INVARIANTS: frozenset[BookInvariant] = frozenset(BookInvariant)

# The kernel package may not import from these packages.
# This is enforced by tests/architecture/test_kernel_boundary.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "bookkeeping_config",
)
