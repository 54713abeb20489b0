"""
bookkeeping_config -- single public entrypoint for bookkeeping configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``. YAML loading and validation are internal
    steps of that call.

Architecture position:
    Configuration layer above ``bookkeeping``. The kernel MUST NEVER import
    from ``bookkeeping_config``; ``bridges`` translates configuration into
    kernel objects.

Failure modes:
    - ``FileNotFoundError`` -- the requested configuration file is missing.
    - ``ValueError`` -- the configuration failed validation.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from bookkeeping_config.bridges import SeededBook, build_book, configure_logging_from
from bookkeeping_config.loader import load_config
from bookkeeping_config.schema import BookkeepingConfig
from bookkeeping_config.validator import validate_configuration

_logger = logging.getLogger("bookkeeping.config")

CONFIG_ENV_VAR = "BOOKKEEPING_CONFIG"

_DEFAULT_CONFIG_FILE = Path(__file__).parent / "default.yaml"

__all__ = [
    "BookkeepingConfig",
    "SeededBook",
    "build_book",
    "configure_logging_from",
    "get_active_config",
]


def get_active_config(path: Path | str | None = None) -> BookkeepingConfig:
    """The ONLY public configuration entrypoint.

    Resolution order: ``path``, then the ``BOOKKEEPING_CONFIG`` environment
    variable, then the packaged ``default.yaml``. The packaged default has
    an empty chart and is not warned about.

    Raises:
        FileNotFoundError: If the resolved file does not exist.
        ValueError: If validation fails.
    """
    source = Path(path or os.environ.get(CONFIG_ENV_VAR) or _DEFAULT_CONFIG_FILE)
    config = load_config(source)

    validation = validate_configuration(
        config, expect_chart=source != _DEFAULT_CONFIG_FILE
    )
    if not validation.is_valid:
        raise ValueError(
            "Configuration validation failed:\n"
            + "\n".join(f"  - {e}" for e in validation.errors)
        )
    for warning in validation.warnings:
        _logger.warning("config_warning", extra={"warning": warning})

    _logger.info(
        "BOOKKEEPING_CONFIG_TRACE",
        extra={
            "trace_type": "BOOKKEEPING_CONFIG_TRACE",
            "source": str(source),
            "checksum": config.checksum,
            "balance_amount_type": config.book.balance_amount_type,
            "unit_count": len(config.units),
            "account_count": len(config.accounts),
        },
    )
    return config
