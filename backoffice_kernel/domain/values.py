"""
Values -- Immutable, self-validating payroll value objects.

Responsibility:
    Provides the foundational input types for payroll computation:
    PayrollPeriod, SalaryStructure and AttendanceRecord, plus the
    Decimal coercion and half-up rounding helpers every engine shares.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by engines and modules.  No outward dependencies except
    ``backoffice_kernel.exceptions``.

Invariants enforced:
    - All currency amounts are ``Decimal`` (floats are converted through
      ``str`` so ``0.1`` stays ``0.1``).
    - Salary structure components are non-negative full-month figures.
    - A PayrollPeriod always names a real calendar month.

Failure modes:
    - InvalidPayrollPeriodError on a month outside 1..12 or malformed text.
    - ValueError on a negative or non-numeric salary component.

Audit relevance:
    These are the inputs of every payroll record.  Keeping them frozen
    guarantees the computation never mutates the roster it was given.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

from backoffice_kernel.exceptions import InvalidPayrollPeriodError

ZERO = Decimal("0")
WHOLE_UNIT = Decimal("1")


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a numeric value to ``Decimal``.

    ``None`` becomes zero.  Floats go through ``str`` to avoid binary
    artefacts.

    Raises:
        ValueError: If the value is not a finite number.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Invalid amount: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


def round_half_up(amount: Decimal, quantum: Decimal = WHOLE_UNIT) -> Decimal:
    """
    Round to the nearest multiple of ``quantum``, ties away from zero.

    Quanta like ``1`` or ``0.01`` quantize directly; any other positive
    quantum (``10``, ``0.5``) rounds the count of quanta and scales back.
    """
    normalized = quantum.normalize().as_tuple()
    if normalized.digits == (1,) and normalized.exponent <= 0:
        return amount.quantize(quantum, rounding=ROUND_HALF_UP)
    return (amount / quantum).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP) * quantum


@dataclass(frozen=True, slots=True)
class PayrollPeriod:
    """
    A calendar month selected for a payroll computation.

    Contract:
        Explicit parameter threaded through the computation; nothing reads
        "the current month" implicitly.
    Guarantees:
        - ``1 <= month <= 12``.
        - ``days_in_month`` is the real number of days (28..31).
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InvalidPayrollPeriodError(
                f"{self.year}-{self.month}", "month must be between 1 and 12"
            )
        if not 1 <= self.year <= 9999:
            raise InvalidPayrollPeriodError(
                f"{self.year}-{self.month}", "year must be between 1 and 9999"
            )

    @classmethod
    def from_date(cls, value: date) -> PayrollPeriod:
        """Period containing the given date."""
        return cls(year=value.year, month=value.month)

    @classmethod
    def parse(cls, text: str) -> PayrollPeriod:
        """Parse ``"YYYY-MM"`` (a trailing ``-DD`` is ignored)."""
        parts = text.strip().split("-")
        if len(parts) < 2:
            raise InvalidPayrollPeriodError(text, "expected YYYY-MM")
        try:
            year, month = int(parts[0]), int(parts[1])
        except ValueError as e:
            raise InvalidPayrollPeriodError(text, "expected YYYY-MM") from e
        return cls(year=year, month=month)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def start_date(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end_date(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    @property
    def key(self) -> str:
        """Sortable ``YYYY-MM`` identifier."""
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        """Display label, e.g. ``"June 2025"``."""
        return f"{calendar.month_name[self.month]} {self.year}"

    def contains(self, value: date) -> bool:
        return value.year == self.year and value.month == self.month

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True, slots=True)
class SalaryStructure:
    """
    Full-month compensation components for one employee.

    Contract:
        Immutable input to a computation; never mutated by any engine.
    Guarantees:
        - Every currency field is a non-negative ``Decimal``.
    Non-goals:
        - Carries no attendance information; proration happens downstream.
    """

    basic: Decimal = ZERO
    hra: Decimal = ZERO
    special_allowance: Decimal = ZERO
    pf_deduction: bool = False
    professional_tax: Decimal = ZERO
    tds: Decimal = ZERO

    def __post_init__(self) -> None:
        for name in ("basic", "hra", "special_allowance", "professional_tax", "tds"):
            amount = to_decimal(getattr(self, name))
            if amount < 0:
                raise ValueError(f"{name} cannot be negative")
            object.__setattr__(self, name, amount)
        object.__setattr__(self, "pf_deduction", bool(self.pf_deduction))

    @classmethod
    def zero(cls) -> SalaryStructure:
        return cls()


class AttendanceStatus(Enum):
    """Canonical attendance statuses as stored by the attendance log."""

    PRESENT = "Present"
    HALF_DAY = "Half-Day"
    ABSENT = "Absent"
    LEAVE = "Leave"

    @classmethod
    def normalize(cls, value: str | AttendanceStatus) -> str:
        """
        Map spelling variants onto the canonical value.

        ``"HalfDay"``, ``"half_day"`` and ``"half-day"`` all become
        ``"Half-Day"``.  Unrecognised statuses are returned stripped but
        otherwise unchanged; they simply contribute no presence.
        """
        if isinstance(value, AttendanceStatus):
            return value.value
        folded = value.strip().replace("-", "").replace("_", "").replace(" ", "").lower()
        for status in cls:
            if status.value.replace("-", "").lower() == folded:
                return status.value
        return value.strip()


@dataclass(frozen=True, slots=True)
class AttendanceRecord:
    """
    One attendance log entry.

    Contract:
        ``status`` holds the canonical spelling (see
        ``AttendanceStatus.normalize``); unknown statuses are kept verbatim.
    """

    employee_id: int
    date: date
    status: str
    id: int | None = None

    def __post_init__(self) -> None:
        if not str(self.status).strip():
            raise ValueError("attendance status cannot be blank")
        object.__setattr__(self, "status", AttendanceStatus.normalize(self.status))
