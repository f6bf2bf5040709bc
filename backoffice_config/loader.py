"""
Configuration Loader (``backoffice_config.loader``).

Responsibility
--------------
Loads payroll YAML files and parses them into a validated
``PayrollConfig``.  Callers should go through
``backoffice_config.get_active_config()`` rather than this module.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Sits above
``backoffice_kernel``; the kernel and engines never import it.

Invariants enforced
-------------------
* Unknown keys are rejected; there are no silent typos in a config file.
* Numbers are parsed through ``str`` so YAML floats never leak into
  ``Decimal`` arithmetic.
* ``compute_checksum`` is deterministic for equal parsed content.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown key or invalid value  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from backoffice_kernel.domain.values import AttendanceStatus
from backoffice_kernel.exceptions import ConfigurationError
from backoffice_modules.payroll.config import PayrollConfig

_SCALAR_KEYS = frozenset({
    "pf_rate",
    "rounding_quantum",
    "default_department_name",
    "currency_code",
    "warn_on_excess_attendance",
})
_DECIMAL_KEYS = frozenset({"pf_rate", "rounding_quantum"})
_STRING_KEYS = frozenset({"default_department_name", "currency_code"})
_BOOLEAN_KEYS = frozenset({"warn_on_excess_attendance"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _parse_decimal(source: str, key: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ConfigurationError(source, f"'{key}' must be a number, got {value!r}")
    try:
        parsed = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(source, f"'{key}' must be a number, got {value!r}")
    if not parsed.is_finite():
        raise ConfigurationError(source, f"'{key}' must be a finite number, got {value!r}")
    return parsed


def _parse_scalar(source: str, key: str, value: Any) -> Any:
    if key in _DECIMAL_KEYS:
        return _parse_decimal(source, key, value)
    # YAML reads yes/no/true/false as bools; quoted "false" stays a string
    if key in _BOOLEAN_KEYS and not isinstance(value, bool):
        raise ConfigurationError(source, f"'{key}' must be true or false, got {value!r}")
    if key in _STRING_KEYS and not isinstance(value, str):
        raise ConfigurationError(source, f"'{key}' must be a string, got {value!r}")
    return value


def parse_payroll_config(data: dict[str, Any], source: str = "<dict>") -> PayrollConfig:
    """
    Build a ``PayrollConfig`` from the parsed YAML document.

    Accepts either the full document (with a top-level ``payroll`` key) or
    the ``payroll`` mapping itself.  Absent keys keep their defaults.
    """
    section = data.get("payroll", data) if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise ConfigurationError(source, "payroll section must be a mapping")

    unknown = set(section) - _SCALAR_KEYS - {"attendance_weights"}
    if unknown:
        raise ConfigurationError(source, f"unknown keys: {', '.join(sorted(unknown))}")

    kwargs: dict[str, Any] = {}
    for key in _SCALAR_KEYS & set(section):
        kwargs[key] = _parse_scalar(source, key, section[key])

    weights = section.get("attendance_weights") or {}
    if not isinstance(weights, dict):
        raise ConfigurationError(source, "attendance_weights must be a mapping")
    extra: dict[str, Decimal] = {}
    for status, weight in weights.items():
        parsed = _parse_decimal(source, f"attendance_weights.{status}", weight)
        canonical = AttendanceStatus.normalize(str(status))
        if canonical == AttendanceStatus.PRESENT.value:
            kwargs["present_weight"] = parsed
        elif canonical == AttendanceStatus.HALF_DAY.value:
            kwargs["half_day_weight"] = parsed
        else:
            extra[canonical] = parsed
    if extra:
        kwargs["extra_presence_weights"] = extra

    try:
        return PayrollConfig.from_dict(kwargs)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ConfigurationError(source, str(exc)) from exc


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 over the canonical JSON form of a parsed YAML document."""
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
