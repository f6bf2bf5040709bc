"""
Module: backoffice_engines.salary_structure
Responsibility:
    Resolve the effective salary structure for an employee.  An explicit
    structure is used unchanged; otherwise a fallback structure is
    synthesized from the legacy flat base salary.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - The result is always a fully populated ``SalaryStructure`` tagged
      with its source; no optional field is patched at read time.
    - Fallback: ``basic = base_salary or 0``, every other component zero,
      PF disabled.

Failure modes:
    - None.  Absent data degrades to an all-zero structure so that a
      malformed roster entry still yields a (zero-value) payroll record.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from backoffice_engines.tracer import traced_engine
from backoffice_kernel.domain.values import ZERO, SalaryStructure, to_decimal
from backoffice_kernel.logging_config import get_logger

logger = get_logger("engines.salary_structure")


class StructureSource(Enum):
    """Where a resolved structure came from."""
    EXPLICIT = "explicit"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ResolvedSalaryStructure:
    """
    A salary structure tagged with its provenance.

    Guarantees:
        - ``structure`` is never None.
    """

    structure: SalaryStructure
    source: StructureSource

    @property
    def is_fallback(self) -> bool:
        return self.source is StructureSource.FALLBACK


class SalaryStructureResolver:
    """Picks the explicit structure or builds the base-salary fallback."""

    @staticmethod
    def fallback_for(base_salary: Decimal | int | float | None) -> SalaryStructure:
        """Fallback structure carrying only the flat base salary as basic."""
        basic = to_decimal(base_salary) if base_salary else ZERO
        return SalaryStructure(basic=basic)

    @traced_engine("salary_structure", "1.0", fingerprint_fields=("salary_structure", "base_salary"))
    def resolve(
        self,
        salary_structure: SalaryStructure | None,
        base_salary: Decimal | int | float | None = None,
    ) -> ResolvedSalaryStructure:
        """
        Resolve the structure used for a computation.

        Postconditions:
            - An explicit structure is returned as the same object.
        """
        if salary_structure is not None:
            return ResolvedSalaryStructure(
                structure=salary_structure,
                source=StructureSource.EXPLICIT,
            )

        return ResolvedSalaryStructure(
            structure=self.fallback_for(base_salary),
            source=StructureSource.FALLBACK,
        )
