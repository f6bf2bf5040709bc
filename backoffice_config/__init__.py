"""
backoffice_config -- single public entrypoint for payroll configuration.

Responsibility:
    Provides the way to obtain payroll configuration at runtime through
    ``get_active_config()``.  Other components receive a ``PayrollConfig``
    instead of reading files or environment variables themselves.

Architecture position:
    Configuration -- YAML-driven settings.  Sits above ``backoffice_kernel``;
    the kernel and engines MUST NEVER import from ``backoffice_config``.

Invariants enforced:
    - The packaged ``defaults/payroll.yaml`` is used unless a path is given
      or ``BACKOFFICE_PAYROLL_CONFIG`` names another file.
    - Same YAML content always yields the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- the selected file does not exist.
    - ``ConfigurationError`` -- unknown keys or invalid values.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``PAYROLL_CONFIG_TRACE`` log entry with the source path and checksum,
    tying each computation to the exact settings that governed it.
"""

from __future__ import annotations

import os
from pathlib import Path

from backoffice_config.loader import compute_checksum, load_yaml_file, parse_payroll_config
from backoffice_kernel.logging_config import get_logger
from backoffice_modules.payroll.config import PayrollConfig

_logger = get_logger("config")

CONFIG_ENV_VAR = "BACKOFFICE_PAYROLL_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "payroll.yaml"


def get_active_config(path: Path | str | None = None) -> PayrollConfig:
    """The public configuration entrypoint.

    Args:
        path: Explicit YAML file.  Falls back to ``$BACKOFFICE_PAYROLL_CONFIG``
            and then to the packaged defaults.

    Raises:
        FileNotFoundError: If the selected file does not exist.
        ConfigurationError: If the file fails validation.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    path = Path(path)

    data = load_yaml_file(path)
    config = parse_payroll_config(data, source=str(path))

    _logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "trace_type": "PAYROLL_CONFIG_TRACE",
            "source": str(path),
            "checksum": compute_checksum(data),
            "pf_rate": str(config.pf_rate),
            "currency_code": config.currency_code,
        },
    )
    return config


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "compute_checksum",
    "get_active_config",
    "load_yaml_file",
    "parse_payroll_config",
]
