"""
Payroll Snapshot Selector (``backoffice_modules.payroll.selectors``).

Responsibility
--------------
Read the roster, salary structures, departments and attendance log for a
payroll computation in one pass, returning frozen DTOs.

Architecture position
---------------------
**Modules layer** -- read side of the record store.  Accepts the caller's
session and never mutates it.

Invariants enforced
-------------------
* All four collections are read inside the caller's transaction, so the
  computation sees one consistent snapshot.
* Results are ordered by primary key (and date for attendance) so that
  identical stores yield identical snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select

from backoffice_kernel.domain.values import AttendanceRecord, PayrollPeriod
from backoffice_kernel.logging_config import get_logger
from backoffice_kernel.selectors.base import BaseSelector
from backoffice_modules.payroll.models import Department, Employee
from backoffice_modules.payroll.orm import AttendanceModel, DepartmentModel, EmployeeModel

logger = get_logger("modules.payroll.selectors")


@dataclass(frozen=True)
class PayrollSnapshot:
    """Everything a payroll computation reads, frozen at one point in time."""
    employees: tuple[Employee, ...]
    attendance: tuple[AttendanceRecord, ...]
    departments: tuple[Department, ...]
    period: PayrollPeriod | None = None

    @property
    def department_index(self) -> dict[str, Department]:
        return {d.id: d for d in self.departments}


class PayrollSnapshotSelector(BaseSelector[EmployeeModel]):
    """Loads ``PayrollSnapshot`` instances from the record store."""

    def employees(self) -> tuple[Employee, ...]:
        rows = self.session.scalars(select(EmployeeModel).order_by(EmployeeModel.id))
        return tuple(row.to_dto() for row in rows)

    def departments(self) -> tuple[Department, ...]:
        rows = self.session.scalars(select(DepartmentModel).order_by(DepartmentModel.id))
        return tuple(row.to_dto() for row in rows)

    def attendance(self, period: PayrollPeriod | None = None) -> tuple[AttendanceRecord, ...]:
        """Attendance rows, restricted to ``period`` when one is given."""
        stmt = select(AttendanceModel)
        if period is not None:
            stmt = stmt.where(
                AttendanceModel.date >= period.start_date,
                AttendanceModel.date <= period.end_date,
            )
        stmt = stmt.order_by(AttendanceModel.date, AttendanceModel.employee_id, AttendanceModel.id)
        return tuple(row.to_dto() for row in self.session.scalars(stmt))

    def load(self, period: PayrollPeriod | None = None) -> PayrollSnapshot:
        """
        Read every collection the computation needs.

        With ``period`` the attendance log is narrowed to that month; the
        engines filter again, so the narrowing only saves I/O.
        """
        snapshot = PayrollSnapshot(
            employees=self.employees(),
            attendance=self.attendance(period),
            departments=self.departments(),
            period=period,
        )
        logger.debug(
            "payroll_snapshot_loaded",
            extra={
                "period": period.key if period else None,
                "employee_count": len(snapshot.employees),
                "attendance_count": len(snapshot.attendance),
                "department_count": len(snapshot.departments),
            },
        )
        return snapshot
