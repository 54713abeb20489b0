"""Unit -- a unit of measurement, most commonly the minor unit of a currency."""

from __future__ import annotations

from typing import Any


class Unit:
    """
    Represents a unit of measurement.

    Units are created only by ``Book.insert_unit``. Identity is by UnitKey:
    two units with identical metadata (say, two "THB" units) are distinct
    and their amounts never mix.
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
        return f"Unit({self._metadata!r})"
