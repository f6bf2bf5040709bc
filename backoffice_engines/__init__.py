"""
Module: backoffice_engines
Responsibility:
    Package entrypoint that re-exports all public symbols from the pure
    payroll calculation engines.  This is the canonical import surface
    for the modules layer.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import backoffice_kernel/domain (and sibling engine modules).
    MUST NOT import backoffice_modules.

Invariants enforced:
    - Purity: engines never read the clock or the record store; the
      payroll period is always an explicit parameter.
    - Decimal-only arithmetic: floats are forbidden.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every engine invocation is traced via the ``@traced_engine`` decorator
    (see ``backoffice_engines.tracer``).

Usage:
    from backoffice_engines.attendance import AttendanceAggregator
    from backoffice_engines.salary_structure import SalaryStructureResolver
    from backoffice_engines.proration import AttendanceFactor, EarningsProrator
    from backoffice_engines.deductions import DeductionEngine
"""

from backoffice_engines.attendance import (
    DEFAULT_PRESENCE_WEIGHTS,
    AttendanceAggregator,
    AttendanceSummary,
)
from backoffice_engines.deductions import (
    DEFAULT_PF_RATE,
    DeductionBreakdown,
    DeductionEngine,
)
from backoffice_engines.proration import (
    AttendanceFactor,
    EarningsProrator,
    ProratedEarnings,
)
from backoffice_engines.salary_structure import (
    ResolvedSalaryStructure,
    SalaryStructureResolver,
    StructureSource,
)
from backoffice_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "DEFAULT_PF_RATE",
    "DEFAULT_PRESENCE_WEIGHTS",
    "AttendanceAggregator",
    "AttendanceFactor",
    "AttendanceSummary",
    "DeductionBreakdown",
    "DeductionEngine",
    "EarningsProrator",
    "ProratedEarnings",
    "ResolvedSalaryStructure",
    "SalaryStructureResolver",
    "StructureSource",
    "compute_input_fingerprint",
    "traced_engine",
]
