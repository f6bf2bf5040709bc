"""
Module: backoffice_engines.proration
Responsibility:
    Scale full-month earnings components (basic, HRA, special allowance)
    by the attendance factor ``days_present / days_in_month``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Each component is rounded independently to the nearest whole
      currency unit, ties rounded up.  The summed components may differ
      by up to one unit per component from a directly scaled gross; that
      drift is kept as-is.
    - The factor is not clamped: over-reported attendance (factor > 1)
      inflates earnings exactly as computed.
    - ``AttendanceFactor.scale`` multiplies before dividing so that exact
      half-unit results are not lost to a repeating-decimal factor.

Failure modes:
    - None for real periods; ``days_in_month`` is always 28..31.

Usage:
    from backoffice_engines.proration import AttendanceFactor, EarningsProrator

    factor = AttendanceFactor(days_present=Decimal("15"), days_in_month=30)
    earned = EarningsProrator().prorate(structure=structure, attendance_factor=factor)
    earned.earned_basic   # Decimal("10000") for basic=20000
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from backoffice_engines.tracer import traced_engine
from backoffice_kernel.domain.values import (
    WHOLE_UNIT,
    SalaryStructure,
    round_half_up,
    to_decimal,
)
from backoffice_kernel.logging_config import get_logger

logger = get_logger("engines.proration")


@dataclass(frozen=True)
class AttendanceFactor:
    """
    Ratio of days present to calendar days in the period.

    Contract:
        Keeps numerator and denominator so scaling stays exact.
    Guarantees:
        - ``0 <= value <= 1`` whenever ``days_present <= days_in_month``.
    Non-goals:
        - No clamping of over-reported attendance.
    """

    days_present: Decimal
    days_in_month: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "days_present", to_decimal(self.days_present))
        if self.days_in_month <= 0:
            raise ValueError("days_in_month must be positive")

    @property
    def value(self) -> Decimal:
        return self.days_present / Decimal(self.days_in_month)

    @property
    def exceeds_month(self) -> bool:
        return self.days_present > self.days_in_month

    def scale(self, amount: Decimal) -> Decimal:
        """Unrounded ``amount * days_present / days_in_month``."""
        return amount * self.days_present / Decimal(self.days_in_month)


@dataclass(frozen=True)
class ProratedEarnings:
    """Attendance-scaled earnings components."""

    earned_basic: Decimal
    earned_hra: Decimal
    earned_special: Decimal

    @property
    def gross(self) -> Decimal:
        return self.earned_basic + self.earned_hra + self.earned_special


class EarningsProrator:
    """
    Prorates salary structure earnings by attendance.

    Contract:
        Accepts either an ``AttendanceFactor`` or a plain ``Decimal`` factor.
    Guarantees:
        - Full attendance reproduces integral structure components exactly.
        - Zero attendance yields zero for every component.
    """

    def __init__(
        self,
        rounding_quantum: Decimal = WHOLE_UNIT,
        warn_on_excess: bool = True,
    ):
        self._quantum = rounding_quantum
        self._warn_on_excess = warn_on_excess

    def _scale(self, amount: Decimal, factor: AttendanceFactor | Decimal) -> Decimal:
        if isinstance(factor, AttendanceFactor):
            scaled = factor.scale(amount)
        else:
            scaled = amount * to_decimal(factor)
        return round_half_up(scaled, self._quantum)

    @traced_engine("proration", "1.0", fingerprint_fields=("structure", "attendance_factor"))
    def prorate(
        self,
        structure: SalaryStructure,
        attendance_factor: AttendanceFactor | Decimal,
    ) -> ProratedEarnings:
        """
        Scale and round basic, HRA and special allowance independently.

        Postconditions:
            - Each returned component is a multiple of the rounding quantum.
        """
        if (
            self._warn_on_excess
            and isinstance(attendance_factor, AttendanceFactor)
            and attendance_factor.exceeds_month
        ):
            logger.warning(
                "attendance_factor_exceeds_one",
                extra={
                    "days_present": str(attendance_factor.days_present),
                    "days_in_month": attendance_factor.days_in_month,
                },
            )

        return ProratedEarnings(
            earned_basic=self._scale(structure.basic, attendance_factor),
            earned_hra=self._scale(structure.hra, attendance_factor),
            earned_special=self._scale(structure.special_allowance, attendance_factor),
        )
