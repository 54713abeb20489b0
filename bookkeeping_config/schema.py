"""
BookkeepingConfig schema.

Defines the human-authored configuration artifact. YAML documents are
parsed into these types by the loader, checked by the validator and turned
into kernel objects by the bridges.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Names accepted for BookSettings.balance_amount_type.
AMOUNT_TYPE_NAMES: tuple[str, ...] = ("int", "decimal", "fraction")

LOG_LEVEL_NAMES: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LoggingSettings:
    """How the bookkeeping logger hierarchy is configured."""

    level: str = "INFO"
    structured: bool = True  # one JSON object per line


@dataclass(frozen=True)
class BookSettings:
    """Construction parameters for a Book."""

    balance_amount_type: str = "int"
    guard_iteration: bool = True
    metadata: Any = None


@dataclass(frozen=True)
class UnitDefinition:
    """A unit to seed into a new Book."""

    name: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AccountDefinition:
    """An account to seed into a new Book."""

    name: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BookkeepingConfig:
    """
    Complete configuration document.

    ``units`` and ``accounts`` form an optional chart; file order is
    insertion order when a Book is seeded from it.
    """

    logging: LoggingSettings = field(default_factory=LoggingSettings)
    book: BookSettings = field(default_factory=BookSettings)
    units: tuple[UnitDefinition, ...] = ()
    accounts: tuple[AccountDefinition, ...] = ()
    checksum: str = ""
