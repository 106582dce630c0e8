"""
Configuration Loader (``payroll_config.loader``).

Responsibility
--------------
Loads the YAML configuration files and parses them into typed, frozen
dataclasses: ``PayrollConfig`` for the payroll rules and
``VisitTypeRateTable`` for the visit-type commissions.  The runtime entry
point is ``payroll_config.get_active_config()``.

Invariants enforced
-------------------
* Every parsed object is a frozen, validated dataclass.
* Required keys have no silent defaults: a missing ``payroll`` or
  ``visit_types`` section raises ``ConfigurationError``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing or invalid sections  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from payroll_config.schema import VisitTypeRate, VisitTypeRateTable
from payroll_kernel.domain.validation import to_decimal
from payroll_kernel.exceptions import ConfigurationError
from payroll_kernel.logging_config import get_logger
from payroll_modules.hr.config import PayrollConfig

logger = get_logger("config.loader")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_date(value: Any) -> date:
    """Parse a date from YAML (string or date object)."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ConfigurationError(f"Cannot parse date from {value!r}")


def _section(data: dict[str, Any], key: str, path: Path) -> Any:
    if key not in data:
        raise ConfigurationError(f"missing {key!r} section", source=str(path))
    return data[key]


def parse_payroll_config(data: dict[str, Any]) -> PayrollConfig:
    """Parse the ``payroll`` section."""
    return PayrollConfig.from_dict(data)


def parse_visit_type_table(data: dict[str, Any]) -> VisitTypeRateTable:
    """
    Parse the ``visit_types`` section.

    Expected shape::

        version: "2024.1"
        effective_from: 2024-01-01
        rates:
          - name: "View car at shop – Completed"
            amount: "500"
    """
    try:
        return VisitTypeRateTable(
            version=str(data["version"]),
            effective_from=parse_date(data["effective_from"]),
            rates=tuple(
                VisitTypeRate(name=r["name"], amount=to_decimal(r["amount"], r["name"]))
                for r in data["rates"]
            ),
        )
    except KeyError as e:
        raise ConfigurationError(f"missing key {e.args[0]!r}", source="visit_types") from e


def load_payroll_config(path: Path) -> PayrollConfig:
    """Load ``PayrollConfig`` from the ``payroll`` section of a YAML file."""
    data = load_yaml_file(path)
    config = parse_payroll_config(_section(data, "payroll", path))
    logger.info("payroll_config_loaded", extra={"path": str(path)})
    return config


def load_visit_type_table(path: Path) -> VisitTypeRateTable:
    """Load the visit-type rate table from the ``visit_types`` section of a YAML file."""
    data = load_yaml_file(path)
    table = parse_visit_type_table(_section(data, "visit_types", path))
    logger.info(
        "visit_type_table_loaded",
        extra={"path": str(path), "version": table.version, "rate_count": len(table.rates)},
    )
    return table


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
