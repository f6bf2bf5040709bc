"""
Payroll Record Store (``backoffice_modules.payroll.store``).

Responsibility
--------------
Session-bound read/write access to the roster, departments and attendance
log that payroll consumes.

Architecture position
---------------------
**Modules layer** -- persistence adapter.  The caller owns the session and
its transaction boundary: the store adds and flushes but never commits.
Engines never see the store.

Invariants enforced
-------------------
* ``put_attendance`` upserts on (employee, date): re-marking a day replaces
  its status.
* ``put_employee`` replaces the salary structure wholesale; passing an
  employee without one removes any stored structure.

Failure modes
-------------
* ``get_employee`` on an unknown id raises ``EmployeeNotFoundError``.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from backoffice_kernel.domain.values import AttendanceRecord, PayrollPeriod
from backoffice_kernel.exceptions import EmployeeNotFoundError
from backoffice_kernel.logging_config import get_logger
from backoffice_modules.payroll.config import DEFAULT_DEPARTMENT_NAME
from backoffice_modules.payroll.models import Department, Employee
from backoffice_modules.payroll.orm import (
    AttendanceModel,
    DepartmentModel,
    EmployeeModel,
    SalaryStructureModel,
)
from backoffice_modules.payroll.selectors import PayrollSnapshotSelector

logger = get_logger("modules.payroll.store")


class PayrollStore:
    """
    Record store for payroll inputs.

    Contract:
        All methods operate inside the caller's session.
    Guarantees:
        - Reads return frozen DTOs, never ORM instances.
    """

    def __init__(self, session: Session):
        self._session = session
        self._selector = PayrollSnapshotSelector(session)

    # ------------------------------------------------------------------
    # Employees
    # ------------------------------------------------------------------

    def list_employees(self) -> list[Employee]:
        return list(self._selector.employees())

    def get_employee(self, employee_id: int) -> Employee:
        model = self._session.get(EmployeeModel, employee_id)
        if model is None:
            raise EmployeeNotFoundError(employee_id)
        return model.to_dto()

    def put_employee(self, employee: Employee) -> Employee:
        """Insert or replace an employee and its salary structure."""
        model = self._session.get(EmployeeModel, employee.id)
        if model is None:
            model = EmployeeModel.from_dto(employee)
            self._session.add(model)
            action = "created"
        else:
            model.name = employee.name
            model.email = employee.email
            model.department_id = employee.department_id
            model.designation = employee.designation
            model.base_salary = employee.base_salary
            model.is_active = employee.is_active
            if employee.salary_structure is None:
                model.salary_structure = None
            elif model.salary_structure is None:
                model.salary_structure = SalaryStructureModel.from_dto(employee.salary_structure)
            else:
                model.salary_structure.apply(employee.salary_structure)
            action = "updated"

        self._session.flush()
        logger.info(
            "employee_saved",
            extra={
                "employee_id": model.id,
                "action": action,
                "has_salary_structure": employee.salary_structure is not None,
            },
        )
        return model.to_dto()

    # ------------------------------------------------------------------
    # Attendance
    # ------------------------------------------------------------------

    def list_attendance(self, period: PayrollPeriod | None = None) -> list[AttendanceRecord]:
        return list(self._selector.attendance(period))

    def put_attendance(self, record: AttendanceRecord) -> AttendanceRecord:
        """Mark one day for one employee, replacing any earlier mark."""
        model = self._session.scalars(
            select(AttendanceModel).where(
                AttendanceModel.employee_id == record.employee_id,
                AttendanceModel.date == record.date,
            )
        ).one_or_none()
        if model is None:
            model = AttendanceModel.from_dto(record)
            self._session.add(model)
        else:
            model.status = record.status

        self._session.flush()
        logger.debug(
            "attendance_marked",
            extra={
                "employee_id": record.employee_id,
                "date": record.date,
                "status": record.status,
            },
        )
        return model.to_dto()

    def put_attendance_many(self, records: Iterable[AttendanceRecord]) -> int:
        count = 0
        for record in records:
            self.put_attendance(record)
            count += 1
        return count

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------

    def list_departments(self) -> list[Department]:
        return list(self._selector.departments())

    def put_department(self, department: Department) -> Department:
        model = self._session.get(DepartmentModel, department.id)
        if model is None:
            model = DepartmentModel.from_dto(department)
            self._session.add(model)
        else:
            model.name = department.name
            model.description = department.description
        self._session.flush()
        return model.to_dto()

    def resolve_department_name(
        self,
        department_id: str | None,
        default: str = DEFAULT_DEPARTMENT_NAME,
    ) -> str:
        """Department name for ``department_id``, or ``default``."""
        if department_id is None:
            return default
        model = self._session.get(DepartmentModel, department_id)
        if model is None or not model.name:
            return default
        return model.name
