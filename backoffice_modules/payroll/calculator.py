"""
Payroll Calculator (``backoffice_modules.payroll.calculator``).

Responsibility
--------------
Compose the pure engines into one ``PayrollRecord`` per employee and fold
those records into the organisation ``PayrollSummary``:

    roster + attendance + period
      -> AttendanceAggregator      (days present)
      -> SalaryStructureResolver   (effective structure)
      -> EarningsProrator          (earned basic / HRA / special)
      -> DeductionEngine           (PF / PT / TDS)
      -> PayrollRecordBuilder      (record + employment status)
      -> PayrollAggregator         (Active-only totals)

Architecture position
---------------------
**Modules layer** -- pure composition.  No session, no clock, no record
store.  ``PayrollService`` feeds it a snapshot read by the selector.

Invariants enforced
-------------------
* Every employee's record depends only on that employee's attendance
  slice and structure; no record depends on another's output.
* ``net_salary = max(0, gross_earnings - total_deductions)``.
* Terminated employees get a record but never contribute to a summary.
* Identical inputs produce identical records and summaries.

Failure modes
-------------
* None for well-typed input: a missing structure degrades to the
  base-salary fallback, missing attendance to zero days present.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from backoffice_engines.attendance import AttendanceAggregator
from backoffice_engines.deductions import DeductionEngine
from backoffice_engines.proration import AttendanceFactor, EarningsProrator
from backoffice_engines.salary_structure import SalaryStructureResolver, StructureSource
from backoffice_kernel.domain.values import ZERO, AttendanceRecord, PayrollPeriod
from backoffice_kernel.logging_config import get_logger
from backoffice_modules.payroll.config import PayrollConfig
from backoffice_modules.payroll.models import (
    Employee,
    EmploymentStatus,
    PayrollRecord,
    PayrollSummary,
)

logger = get_logger("modules.payroll.calculator")


class PayrollRecordBuilder:
    """
    Builds per-employee payroll records.

    Contract:
        Engines are built from ``PayrollConfig`` unless injected.
    Guarantees:
        - ``build`` has no side effects besides debug/trace logging.
    """

    def __init__(
        self,
        config: PayrollConfig | None = None,
        *,
        attendance_aggregator: AttendanceAggregator | None = None,
        structure_resolver: SalaryStructureResolver | None = None,
        prorator: EarningsProrator | None = None,
        deduction_engine: DeductionEngine | None = None,
    ):
        self._config = config or PayrollConfig.with_defaults()
        self._attendance = attendance_aggregator or AttendanceAggregator(
            self._config.presence_weights
        )
        self._resolver = structure_resolver or SalaryStructureResolver()
        self._prorator = prorator or EarningsProrator(
            rounding_quantum=self._config.rounding_quantum,
            warn_on_excess=self._config.warn_on_excess_attendance,
        )
        self._deductions = deduction_engine or DeductionEngine(
            pf_rate=self._config.pf_rate,
            rounding_quantum=self._config.rounding_quantum,
        )

    @property
    def config(self) -> PayrollConfig:
        return self._config

    @property
    def attendance_aggregator(self) -> AttendanceAggregator:
        return self._attendance

    def build(
        self,
        employee: Employee,
        attendance: Iterable[AttendanceRecord],
        period: PayrollPeriod,
    ) -> PayrollRecord:
        """
        Compute one employee's record for the period.

        ``attendance`` may be the full log or the employee's own slice.
        """
        days_present = self._attendance.days_present(
            attendance=attendance,
            employee_id=employee.id,
            period=period,
        )
        resolved = self._resolver.resolve(
            salary_structure=employee.salary_structure,
            base_salary=employee.base_salary,
        )
        structure = resolved.structure

        factor = AttendanceFactor(
            days_present=days_present,
            days_in_month=period.days_in_month,
        )
        earnings = self._prorator.prorate(
            structure=structure,
            attendance_factor=factor,
        )
        deductions = self._deductions.compute(
            structure=structure,
            earned_basic=earnings.earned_basic,
        )

        gross = earnings.gross
        net = max(ZERO, gross - deductions.total_deductions)

        return PayrollRecord(
            employee_id=employee.id,
            period=period,
            days_present=days_present,
            attendance_factor=factor.value,
            earned_basic=earnings.earned_basic,
            earned_hra=earnings.earned_hra,
            earned_special=earnings.earned_special,
            gross_earnings=gross,
            pf=deductions.pf,
            professional_tax=deductions.professional_tax,
            tds=deductions.tds,
            total_deductions=deductions.total_deductions,
            net_salary=net,
            employment_status=EmploymentStatus.from_active_flag(employee.is_active),
            structure_source=resolved.source,
        )

    def build_all(
        self,
        employees: Iterable[Employee],
        attendance: Iterable[AttendanceRecord],
        period: PayrollPeriod,
    ) -> list[PayrollRecord]:
        """One record per employee, in roster order."""
        slices = self._attendance.index_by_employee(attendance, period)
        records = [
            self.build(
                employee=employee,
                attendance=slices.get(employee.id, ()),
                period=period,
            )
            for employee in employees
        ]

        fallback_count = sum(1 for r in records if r.structure_source is StructureSource.FALLBACK)
        logger.info(
            "payroll_computed",
            extra={
                "period": period.key,
                "employee_count": len(records),
                "fallback_structure_count": fallback_count,
            },
        )
        return records


class PayrollAggregator:
    """Folds payroll records into Active-only organisation totals."""

    def summarize(
        self,
        records: Sequence[PayrollRecord],
        period: PayrollPeriod | None = None,
    ) -> PayrollSummary:
        """
        Sum gross, deductions and net and count records, Active only.

        Postconditions:
            - ``total_net_payable`` equals the sum of ``net_salary`` over
              exactly the Active records.
            - ``period`` defaults to the first record's period.
        """
        if period is None and records:
            period = records[0].period

        total_gross = ZERO
        total_deductions = ZERO
        total_net = ZERO
        active = 0
        for record in records:
            if record.employment_status is not EmploymentStatus.ACTIVE:
                continue
            total_gross += record.gross_earnings
            total_deductions += record.total_deductions
            total_net += record.net_salary
            active += 1

        summary = PayrollSummary(
            period=period,
            total_gross=total_gross,
            total_deductions=total_deductions,
            total_net_payable=total_net,
            active_employee_count=active,
        )

        logger.info(
            "payroll_summarized",
            extra={
                "period": period.key if period else None,
                "record_count": len(records),
                "active_employee_count": active,
                "total_net_payable": str(total_net),
            },
        )
        return summary


def compute_payroll(
    employees: Iterable[Employee],
    attendance: Iterable[AttendanceRecord],
    period: PayrollPeriod,
    config: PayrollConfig | None = None,
) -> list[PayrollRecord]:
    """Compute every employee's payroll record for ``period``."""
    return PayrollRecordBuilder(config).build_all(employees, attendance, period)


def summarize(
    records: Sequence[PayrollRecord],
    period: PayrollPeriod | None = None,
) -> PayrollSummary:
    """Active-only totals over ``records``."""
    return PayrollAggregator().summarize(records, period)
