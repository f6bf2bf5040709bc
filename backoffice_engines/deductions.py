"""
Module: backoffice_engines.deductions
Responsibility:
    Compute statutory and contractual deductions for one employee-month:
    Provident Fund, professional tax and TDS.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - ``pf = round(earned_basic * pf_rate)`` when the structure enables PF,
      else 0.  PF is charged on the *prorated* basic, never on the
      full-month structural basic.
    - Professional tax and TDS are flat, period-level figures taken
      verbatim from the structure (earnings are attendance-scaled,
      deductions are not).
    - ``total_deductions = pf + professional_tax + tds`` exactly.

Failure modes:
    - None; inputs are validated/defaulted upstream.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from backoffice_engines.tracer import traced_engine
from backoffice_kernel.domain.values import (
    ZERO,
    WHOLE_UNIT,
    SalaryStructure,
    round_half_up,
    to_decimal,
)
from backoffice_kernel.logging_config import get_logger

logger = get_logger("engines.deductions")

DEFAULT_PF_RATE = Decimal("0.12")


@dataclass(frozen=True)
class DeductionBreakdown:
    """
    Deductions for one employee-month.

    Guarantees:
        - ``total_deductions`` is derived, never supplied.
    """

    pf: Decimal
    professional_tax: Decimal
    tds: Decimal
    total_deductions: Decimal = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "total_deductions", self.pf + self.professional_tax + self.tds
        )


class DeductionEngine:
    """Applies the PF rate to prorated basic and passes flat deductions through."""

    def __init__(
        self,
        pf_rate: Decimal = DEFAULT_PF_RATE,
        rounding_quantum: Decimal = WHOLE_UNIT,
    ):
        pf_rate = to_decimal(pf_rate)
        if pf_rate < 0 or pf_rate > 1:
            raise ValueError("pf_rate must be between 0 and 1")
        self._pf_rate = pf_rate
        self._quantum = rounding_quantum

    @property
    def pf_rate(self) -> Decimal:
        return self._pf_rate

    def provident_fund(self, structure: SalaryStructure, earned_basic: Decimal) -> Decimal:
        if not structure.pf_deduction:
            return ZERO
        return round_half_up(earned_basic * self._pf_rate, self._quantum)

    @traced_engine("deductions", "1.0", fingerprint_fields=("structure", "earned_basic"))
    def compute(
        self,
        structure: SalaryStructure,
        earned_basic: Decimal,
    ) -> DeductionBreakdown:
        """
        Deductions for a structure and its prorated basic.

        Postconditions:
            - ``pf == 0`` whenever ``structure.pf_deduction`` is false.
        """
        return DeductionBreakdown(
            pf=self.provident_fund(structure, earned_basic),
            professional_tax=structure.professional_tax,
            tds=structure.tds,
        )
