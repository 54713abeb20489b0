"""
Configuration Validator (``bookkeeping_config.validator``).

Validates a ``BookkeepingConfig`` before it is turned into kernel objects.

Invariants enforced
-------------------
* The balance amount type names a supported numeric type.
* The log level is a standard ``logging`` level name.
* Unit and account names are non-empty and unique within their chart.

Failure modes
-------------
* Validation errors -> configuration MUST NOT be used.
* Validation warnings -> configuration may be used but should be reviewed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bookkeeping_config.schema import (
    AMOUNT_TYPE_NAMES,
    LOG_LEVEL_NAMES,
    BookkeepingConfig,
)


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` is True only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _check_names(kind: str, names: list[str], result: ConfigValidationResult) -> None:
    seen: set[str] = set()
    for name in names:
        if not name or not str(name).strip():
            result.errors.append(f"{kind} name must not be empty")
            continue
        if name in seen:
            result.errors.append(f"Duplicate {kind} name: {name}")
        seen.add(name)


def validate_configuration(
    config: BookkeepingConfig, *, expect_chart: bool = True
) -> ConfigValidationResult:
    """Validate a configuration; never raises.

    With ``expect_chart=False`` an empty chart is not reported (the
    packaged default defines none).
    """
    result = ConfigValidationResult()

    if config.book.balance_amount_type not in AMOUNT_TYPE_NAMES:
        result.errors.append(
            f"Unknown balance_amount_type '{config.book.balance_amount_type}'; "
            f"expected one of {', '.join(AMOUNT_TYPE_NAMES)}"
        )

    if config.logging.level not in LOG_LEVEL_NAMES:
        result.errors.append(f"Unknown log level '{config.logging.level}'")

    _check_names("unit", [u.name for u in config.units], result)
    _check_names("account", [a.name for a in config.accounts], result)

    if not config.units and not config.accounts:
        if expect_chart:
            result.warnings.append("Configuration defines no units or accounts")
    elif config.accounts and len(config.accounts) < 2:
        result.warnings.append("A single account cannot take part in any move")

    return result
