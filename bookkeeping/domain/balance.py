"""
Balance -- Signed, Sum-valued accumulator.

Responsibility:
    Accumulates Sums (and single unit/amount pairs) into a running per-unit
    total. This is the state of an account after applying a prefix of the
    Book, and the return type of the balance engine.

Architecture position:
    Kernel > Domain -- pure value object, zero I/O.

Numeric semantics:
    Every Balance has an ``amount_type`` callable. Its zero is
    ``amount_type()`` and every incoming amount is converted with
    ``amount_type(amount)`` at the moment it is added or subtracted. No
    rounding and no saturation happen beyond what the chosen conversion
    does itself; ``int`` over Decimal amounts truncates toward zero per
    applied amount. Python integers are unbounded, so overflow cannot occur.

Failure modes:
    - TypeError when the right-hand operand is not a Sum, a Balance or a
      ``(UnitKey, amount)`` pair.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from bookkeeping.domain.keys import UnitKey
from bookkeeping.domain.sum import Sum, check_amount


class Balance:
    """
    Mapping from UnitKey to a signed amount of ``amount_type``.

    Contract:
        - Starts empty; a unit appears on its first write, starting from
          ``amount_type()``. Entries that return to zero are kept.
        - ``+=``/``-=`` accept a Sum, another Balance or a ``(unit, amount)``
          pair; ``+``/``-`` return a new Balance and leave operands as-is.
        - ``-balance`` gives the opposite sign convention.
        - ``amounts()`` yields pairs in ascending UnitKey order.
        - Equality compares the unit -> amount maps only.
    """

    __slots__ = ("_amounts", "_amount_type")

    def __init__(self, amount_type: Callable[..., Any] = int) -> None:
        self._amounts: dict[UnitKey, Any] = {}
        self._amount_type = amount_type

    @property
    def amount_type(self) -> Callable[..., Any]:
        return self._amount_type

    def _entries(self, operand: Any) -> Iterator[tuple[UnitKey, Any]]:
        if isinstance(operand, (Sum, Balance)):
            return operand.amounts()
        if isinstance(operand, tuple) and len(operand) == 2:
            unit_key, amount = operand
            if not isinstance(unit_key, UnitKey):
                raise TypeError(
                    f"unit must be a UnitKey, got {type(unit_key).__name__}"
                )
            return iter([(unit_key, check_amount(amount))])
        raise TypeError(
            f"cannot apply {type(operand).__name__} to a Balance; "
            "expected Sum, Balance or (UnitKey, amount)"
        )

    def _apply(self, operand: Any, sign: int) -> None:
        zero = self._amount_type()
        for unit_key, amount in self._entries(operand):
            converted = self._amount_type(amount)
            current = self._amounts.get(unit_key, zero)
            if sign > 0:
                self._amounts[unit_key] = current + converted
            else:
                self._amounts[unit_key] = current - converted

    def __iadd__(self, operand: Any) -> Balance:
        self._apply(operand, 1)
        return self

    def __isub__(self, operand: Any) -> Balance:
        self._apply(operand, -1)
        return self

    def __add__(self, operand: Any) -> Balance:
        result = self.copy()
        result._apply(operand, 1)
        return result

    def __sub__(self, operand: Any) -> Balance:
        result = self.copy()
        result._apply(operand, -1)
        return result

    def __neg__(self) -> Balance:
        result = Balance(self._amount_type)
        result._amounts = {unit: -amount for unit, amount in self._amounts.items()}
        return result

    def amounts(self) -> Iterator[tuple[UnitKey, Any]]:
        """Yield ``(unit_key, amount)`` pairs in ascending UnitKey order."""
        for unit_key in sorted(self._amounts):
            yield unit_key, self._amounts[unit_key]

    def unit_amount(self, unit_key: UnitKey, default: Any = None) -> Any:
        return self._amounts.get(unit_key, default)

    def is_zero(self) -> bool:
        """True when every present amount equals zero (vacuously for empty)."""
        return all(amount == 0 for amount in self._amounts.values())

    def copy(self) -> Balance:
        result = Balance(self._amount_type)
        result._amounts = dict(self._amounts)
        return result

    def __len__(self) -> int:
        return len(self._amounts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Balance):
            return NotImplemented
        return self._amounts == other._amounts

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        entries = ", ".join(f"{unit!r}: {amount!r}" for unit, amount in self.amounts())
        return f"Balance({{{entries}}})"
