"""
Payroll Domain Models (``backoffice_modules.payroll.models``).

Responsibility
--------------
Frozen dataclass value objects representing the nouns of payroll:
employees, departments, per-employee payroll records, the organisation
summary, reporting rows and pay runs.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Produced by
``PayrollRecordBuilder`` / ``PayrollAggregator`` and returned to callers.
No dependency on the database or the record store.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``PayrollRecord``: gross equals the sum of earned components, total
  deductions equal pf + professional tax + tds, and net salary is
  ``max(0, gross - deductions)``.

Failure modes
-------------
* ``Employee`` with a negative base salary raises ``ValueError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from backoffice_engines.salary_structure import StructureSource
from backoffice_kernel.domain.values import ZERO, PayrollPeriod, SalaryStructure, to_decimal
from backoffice_kernel.logging_config import get_logger

logger = get_logger("modules.payroll.models")


class EmploymentStatus(Enum):
    """
    Employment classification used for aggregation.

    Only two states are derivable from the roster: ``is_active`` maps to
    ACTIVE and everything else to TERMINATED.
    """
    ACTIVE = "Active"
    TERMINATED = "Terminated"

    @classmethod
    def from_active_flag(cls, is_active: bool) -> EmploymentStatus:
        return cls.ACTIVE if is_active else cls.TERMINATED


class PayRunState(Enum):
    """Pay-run lifecycle states."""
    DRAFT = "draft"
    PREVIEWED = "previewed"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class Department:
    """A department the roster references by code (e.g. ``"FIN"``)."""
    id: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class Employee:
    """An employee as read from the roster."""
    id: int
    name: str
    is_active: bool = True
    email: str = ""
    department_id: str | None = None
    designation: str | None = None
    salary_structure: SalaryStructure | None = None
    base_salary: Decimal | None = None

    def __post_init__(self):
        if self.base_salary is not None:
            base_salary = to_decimal(self.base_salary)
            if base_salary < 0:
                logger.warning(
                    "employee_negative_base_salary",
                    extra={
                        "employee_id": self.id,
                        "base_salary": str(base_salary),
                    },
                )
                raise ValueError("base_salary cannot be negative")
            object.__setattr__(self, "base_salary", base_salary)


@dataclass(frozen=True)
class PayrollRecord:
    """
    Attendance-weighted pay breakdown for one employee in one period.

    Derived fresh on every computation and never persisted.
    """
    employee_id: int
    period: PayrollPeriod
    days_present: Decimal
    attendance_factor: Decimal
    earned_basic: Decimal
    earned_hra: Decimal
    earned_special: Decimal
    gross_earnings: Decimal
    pf: Decimal
    professional_tax: Decimal
    tds: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    employment_status: EmploymentStatus
    structure_source: StructureSource = StructureSource.EXPLICIT

    @property
    def is_active(self) -> bool:
        return self.employment_status is EmploymentStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "period": self.period.key,
            "days_present": self.days_present,
            "attendance_factor": self.attendance_factor,
            "earned_basic": self.earned_basic,
            "earned_hra": self.earned_hra,
            "earned_special": self.earned_special,
            "gross_earnings": self.gross_earnings,
            "pf": self.pf,
            "professional_tax": self.professional_tax,
            "tds": self.tds,
            "total_deductions": self.total_deductions,
            "net_salary": self.net_salary,
            "employment_status": self.employment_status.value,
            "structure_source": self.structure_source.value,
        }


@dataclass(frozen=True)
class PayrollSummary:
    """Organisation totals over the Active records of one period."""
    period: PayrollPeriod | None = None
    total_gross: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_net_payable: Decimal = ZERO
    active_employee_count: int = 0

    def to_dict(self) -> dict:
        return {
            "period": self.period.key if self.period else None,
            "total_gross": self.total_gross,
            "total_deductions": self.total_deductions,
            "total_net_payable": self.total_net_payable,
            "active_employee_count": self.active_employee_count,
        }


@dataclass(frozen=True)
class PayrollRow:
    """A payroll record joined with the roster fields reporting views show."""
    record: PayrollRecord
    employee_name: str
    email: str
    designation: str | None
    department_name: str

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data.update(
            employee_name=self.employee_name,
            email=self.email,
            designation=self.designation,
            department_name=self.department_name,
        )
        return data


@dataclass(frozen=True)
class DepartmentTotals:
    """Active-only totals for one department."""
    department_name: str
    employee_count: int = 0
    total_gross: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_net_payable: Decimal = ZERO


@dataclass(frozen=True)
class PayRun:
    """
    A simulated pay run moving through ``draft -> previewed -> confirmed``.

    ``summary_fingerprint`` pins the previewed totals; confirmation
    recomputes and must reproduce it.  Pay runs are not persisted.
    """
    id: UUID
    period: PayrollPeriod
    state: PayRunState = PayRunState.DRAFT
    summary: PayrollSummary | None = None
    summary_fingerprint: str | None = None
    previewed_at: datetime | None = None
    confirmed_at: datetime | None = None
    confirmed_by: str | None = None
    history: tuple[str, ...] = field(default_factory=tuple)
