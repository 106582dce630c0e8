"""
payroll_config -- single public entrypoint for payroll configuration.

Responsibility:
    Provides the runtime way to obtain configuration through
    ``get_active_config()``: the payroll rules (``data/payroll.yaml``) and
    the versioned visit-type rate table (``data/visit_types.yaml``).

Architecture position:
    Configuration -- sits above ``payroll_kernel`` and beside
    ``payroll_modules``.  The kernel and the engines never import from
    ``payroll_config``; services receive the parsed artifacts by injection.

Failure modes:
    - ``FileNotFoundError`` -- a configuration file is missing.
    - ``ConfigurationError`` -- a section is missing or invalid.

Audit relevance:
    Every ``get_active_config()`` call emits a ``PAYROLL_CONFIG_TRACE`` log
    entry with the checksum of both files and the visit-type table version,
    tying every computed payroll back to the rules that produced it.
"""

from __future__ import annotations

from pathlib import Path

from payroll_config.loader import (
    compute_checksum,
    load_payroll_config,
    load_visit_type_table,
    load_yaml_file,
)
from payroll_config.schema import ActivePayrollConfig, VisitTypeRate, VisitTypeRateTable
from payroll_kernel.logging_config import get_logger

logger = get_logger("config")

DEFAULT_CONFIG_DIR = Path(__file__).parent / "data"
PAYROLL_FILE = "payroll.yaml"
VISIT_TYPES_FILE = "visit_types.yaml"


def get_active_config(config_dir: Path | None = None) -> ActivePayrollConfig:
    """
    Load and validate the active payroll configuration.

    Args:
        config_dir: Directory holding ``payroll.yaml`` and
            ``visit_types.yaml``.  Defaults to the bundled ``data/``.
    """
    config_dir = config_dir or DEFAULT_CONFIG_DIR
    payroll_path = config_dir / PAYROLL_FILE
    visit_types_path = config_dir / VISIT_TYPES_FILE

    payroll = load_payroll_config(payroll_path)
    visit_types = load_visit_type_table(visit_types_path)
    checksum = compute_checksum({
        PAYROLL_FILE: load_yaml_file(payroll_path),
        VISIT_TYPES_FILE: load_yaml_file(visit_types_path),
    })

    logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "trace_type": "PAYROLL_CONFIG_TRACE",
            "config_dir": str(config_dir),
            "checksum": checksum,
            "visit_type_table_version": visit_types.version,
            "visit_type_count": len(visit_types.rates),
        },
    )
    return ActivePayrollConfig(payroll=payroll, visit_types=visit_types, checksum=checksum)


__all__ = [
    "ActivePayrollConfig",
    "VisitTypeRate",
    "VisitTypeRateTable",
    "compute_checksum",
    "get_active_config",
    "load_payroll_config",
    "load_visit_type_table",
    "load_yaml_file",
]
