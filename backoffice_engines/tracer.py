"""
backoffice_engines.tracer -- ``@traced_engine`` and PAYROLL_ENGINE_TRACE records.

Responsibility:
    Wrap the public method of each payroll engine so every call leaves a
    DEBUG trace: engine name and version, a fingerprint of the inputs that
    determine the result, and the wall-clock duration.

Architecture position:
    Engines -- support code for the pure calculation layer.  The only
    side effect is the log record.

Invariants enforced:
    - Arguments are bound against the wrapped signature, so the same
      call fingerprints identically whether passed positionally or by
      keyword.
    - Fingerprints go through ``backoffice_kernel.utils.hashing``:
      Decimal scale is ignored (``100`` and ``100.00`` agree) and frozen
      dataclasses (``SalaryStructure``, ``PayrollPeriod``, ...) hash by
      field values.
    - Only the named ``fingerprint_fields`` are hashed; a field the
      caller left at its default is hashed with that default, an unknown
      name as ``null``.

Usage:
    @traced_engine("deductions", "1.0", fingerprint_fields=("earned_basic",))
    def compute(self, structure, earned_basic):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from backoffice_kernel.logging_config import get_logger
from backoffice_kernel.utils.hashing import canonicalize_json, hash_payload

_logger = get_logger("engines.tracer")

TRACE_TYPE = "PAYROLL_ENGINE_TRACE"
FINGERPRINT_LENGTH = 16


def _fingerprint_value(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _fingerprint_value(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Mapping):
        return {str(k): _fingerprint_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_fingerprint_value(v) for v in value]
    try:
        canonicalize_json(value)
    except TypeError:
        return str(value)
    return value


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: Mapping[str, Any],
) -> str:
    """First 16 hex chars of the SHA-256 over the selected arguments."""
    payload = {
        name: _fingerprint_value(arguments.get(name))
        for name in fingerprint_fields
    }
    return hash_payload(payload)[:FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator emitting PAYROLL_ENGINE_TRACE at DEBUG for each call.

    Args:
        engine_name: Engine identifier (e.g. ``"proration"``).
        engine_version: Bumped whenever the engine's arithmetic changes.
        fingerprint_fields: Parameter names whose values feed the
            input fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.monotonic()
            result = func(*args, **kwargs)
            duration_ms = round((time.monotonic() - started) * 1000, 2)

            if _logger.isEnabledFor(logging.DEBUG):
                fingerprint = ""
                if fingerprint_fields:
                    bound = signature.bind(*args, **kwargs)
                    bound.apply_defaults()
                    fingerprint = compute_input_fingerprint(
                        fingerprint_fields, bound.arguments
                    )
                _logger.debug(
                    TRACE_TYPE,
                    extra={
                        "trace_type": TRACE_TYPE,
                        "engine_name": engine_name,
                        "engine_version": engine_version,
                        "input_fingerprint": fingerprint,
                        "duration_ms": duration_ms,
                        "function": func.__qualname__,
                    },
                )
            return result

        return wrapper

    return decorator
