"""
Sum -- The value moved by a single Move.

Responsibility:
    A finite mapping from UnitKey to amount. Absent units denote zero.
    Iteration and rendering follow ascending UnitKey order so output is
    deterministic.

Architecture position:
    Kernel > Domain -- pure value object, zero I/O.
    Imported by Move, Balance and Book.

Failure modes:
    - TypeError when an amount is a float, complex or bool, or not a number.
      Monetary values are never binary floating point.
    - ValueError when a Decimal amount is NaN or infinite.
"""

from __future__ import annotations

from collections.abc import Iterator
from decimal import Decimal
from numbers import Rational
from typing import Any

from bookkeeping.domain.keys import UnitKey


def check_amount(amount: Any) -> Any:
    """
    Reject amounts that cannot be accumulated exactly.

    Accepts Decimal and any ``numbers.Rational`` (int, Fraction) except
    bool. Floats and complex numbers are rejected, and so are Decimal NaN
    and infinities.
    """
    if isinstance(amount, bool) or not isinstance(amount, (Rational, Decimal)):
        raise TypeError(
            f"amount must be an int, Decimal or Fraction, got {type(amount).__name__}"
        )
    if isinstance(amount, Decimal) and not amount.is_finite():
        raise ValueError(f"amount must be finite, got {amount}")
    return amount


class Sum:
    """
    Mapping from UnitKey to amount.

    Contract:
        - At most one amount per unit; later writes replace earlier ones.
        - ``amounts()`` yields ``(unit_key, amount)`` in ascending UnitKey
          order and may be called any number of times.
        - Two Sums are equal iff their unit -> amount maps are equal. A unit
          explicitly set to zero is present; an absent unit is not.

    Non-goals:
        - Does NOT validate that units exist (the Book does, on insertion)
        - Does NOT convert between units
    """

    __slots__ = ("_amounts",)

    def __init__(self) -> None:
        self._amounts: dict[UnitKey, Any] = {}

    @classmethod
    def of(cls, unit_key: UnitKey, amount: Any) -> Sum:
        """Create a Sum holding a single unit."""
        result = cls()
        result.set_amount_for_unit(amount, unit_key)
        return result

    def set_amount_for_unit(self, amount: Any, unit_key: UnitKey) -> None:
        """Set the amount for ``unit_key``, replacing any earlier amount."""
        if not isinstance(unit_key, UnitKey):
            raise TypeError(f"unit_key must be a UnitKey, got {type(unit_key).__name__}")
        self._amounts[unit_key] = check_amount(amount)

    def with_amount(self, unit_key: UnitKey, amount: Any) -> Sum:
        """Return a copy of this Sum with ``unit_key`` set to ``amount``."""
        result = self.copy()
        result.set_amount_for_unit(amount, unit_key)
        return result

    def amounts(self) -> Iterator[tuple[UnitKey, Any]]:
        """Yield ``(unit_key, amount)`` pairs in ascending UnitKey order."""
        for unit_key in sorted(self._amounts):
            yield unit_key, self._amounts[unit_key]

    def unit_keys(self) -> list[UnitKey]:
        return sorted(self._amounts)

    def unit_amount(self, unit_key: UnitKey, default: Any = None) -> Any:
        return self._amounts.get(unit_key, default)

    def copy(self) -> Sum:
        result = Sum()
        result._amounts = dict(self._amounts)
        return result

    def __len__(self) -> int:
        return len(self._amounts)

    def __contains__(self, unit_key: object) -> bool:
        return unit_key in self._amounts

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sum):
            return NotImplemented
        return self._amounts == other._amounts

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        entries = ", ".join(f"{unit!r}: {amount!r}" for unit, amount in self.amounts())
        return f"Sum({{{entries}}})"
