"""
Configuration Loader (``bookkeeping_config.loader``).

Responsibility
--------------
Loads YAML configuration documents and parses them into the frozen
dataclasses of ``bookkeeping_config.schema``. Runtime callers go through
``bookkeeping_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys (chart entry without ``name``)  -> ``KeyError``.
* Wrong section shape (a list where a mapping is expected)  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from bookkeeping_config.schema import (
    AccountDefinition,
    BookkeepingConfig,
    BookSettings,
    LoggingSettings,
    UnitDefinition,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration document must be a mapping: {path}")
    return data


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Configuration section '{name}' must be a mapping")
    return section


def parse_logging(data: dict[str, Any]) -> LoggingSettings:
    """Parse LoggingSettings from the ``logging`` section."""
    return LoggingSettings(
        level=str(data.get("level", "INFO")).upper(),
        structured=bool(data.get("structured", True)),
    )


def parse_book_settings(data: dict[str, Any]) -> BookSettings:
    """Parse BookSettings from the ``book`` section."""
    return BookSettings(
        balance_amount_type=str(data.get("balance_amount_type", "int")).lower(),
        guard_iteration=bool(data.get("guard_iteration", True)),
        metadata=data.get("metadata"),
    )


def parse_unit(data: dict[str, Any] | str) -> UnitDefinition:
    """Parse a UnitDefinition from a mapping or a bare name."""
    if isinstance(data, str):
        return UnitDefinition(name=data)
    return UnitDefinition(name=data["name"], metadata=dict(data.get("metadata") or {}))


def parse_account(data: dict[str, Any] | str) -> AccountDefinition:
    """Parse an AccountDefinition from a mapping or a bare name."""
    if isinstance(data, str):
        return AccountDefinition(name=data)
    return AccountDefinition(name=data["name"], metadata=dict(data.get("metadata") or {}))


def parse_config(data: dict[str, Any]) -> BookkeepingConfig:
    """
    Parse a complete BookkeepingConfig from a loaded document.

    Postconditions:
        - Returns a frozen BookkeepingConfig whose ``checksum`` identifies
          ``data``.
    """
    return BookkeepingConfig(
        logging=parse_logging(_section(data, "logging")),
        book=parse_book_settings(_section(data, "book")),
        units=tuple(parse_unit(u) for u in data.get("units") or ()),
        accounts=tuple(parse_account(a) for a in data.get("accounts") or ()),
        checksum=compute_checksum(data),
    )


def load_config(path: Path) -> BookkeepingConfig:
    """Load and parse a configuration file."""
    return parse_config(load_yaml_file(Path(path)))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Postconditions:
        - Identical ``data`` always produces identical checksums
          (deterministic, key order independent).
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
