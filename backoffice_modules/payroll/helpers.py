"""
Payroll Helpers (``backoffice_modules.payroll.helpers``).

Responsibility
--------------
Pure functions behind the payroll reporting views: employee search,
department-name resolution, joining records with roster fields, and
per-department totals.

Architecture position
---------------------
**Modules layer** -- pure helper functions.  No I/O, no session, no
clock, no database access.  Called by ``PayrollService`` or from tests.

Invariants enforced
-------------------
* A missing or unknown department resolves to the default name
  (``"General"``), never to an error.
* Department totals count Active records only, like ``PayrollSummary``.

Failure modes
-------------
* None.  An empty search term matches every employee.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable, Mapping, Sequence

from backoffice_kernel.domain.values import ZERO
from backoffice_modules.payroll.config import DEFAULT_DEPARTMENT_NAME
from backoffice_modules.payroll.models import (
    Department,
    DepartmentTotals,
    Employee,
    PayrollRecord,
    PayrollRow,
)


def search_employees(employees: Iterable[Employee], term: str | None) -> list[Employee]:
    """
    Case-insensitive substring match on name or email.

    Postconditions:
        - Roster order is preserved.
        - A blank term returns every employee.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return list(employees)
    return [
        e for e in employees
        if needle in e.name.lower() or needle in (e.email or "").lower()
    ]


def resolve_department_name(
    departments: Mapping[str, Department] | Iterable[Department],
    department_id: str | None,
    default: str = DEFAULT_DEPARTMENT_NAME,
) -> str:
    """Name of the referenced department, or ``default`` when unresolvable."""
    if department_id is None:
        return default
    if not isinstance(departments, Mapping):
        departments = {d.id: d for d in departments}
    department = departments.get(department_id)
    if department is None or not department.name:
        return default
    return department.name


def build_rows(
    records: Sequence[PayrollRecord],
    employees: Iterable[Employee],
    departments: Iterable[Department],
    default_department_name: str = DEFAULT_DEPARTMENT_NAME,
) -> list[PayrollRow]:
    """Join each record with its employee's roster fields, in record order."""
    by_id = {e.id: e for e in employees}
    department_index = {d.id: d for d in departments}

    rows = []
    for record in records:
        employee = by_id.get(record.employee_id)
        if employee is None:
            continue
        rows.append(
            PayrollRow(
                record=record,
                employee_name=employee.name,
                email=employee.email,
                designation=employee.designation,
                department_name=resolve_department_name(
                    department_index,
                    employee.department_id,
                    default_department_name,
                ),
            )
        )
    return rows


def department_totals(rows: Iterable[PayrollRow]) -> list[DepartmentTotals]:
    """
    Active-only totals grouped by department name.

    Departments appear in order of first Active row.
    """
    grouped: OrderedDict[str, list[PayrollRecord]] = OrderedDict()
    for row in rows:
        if not row.record.is_active:
            continue
        grouped.setdefault(row.department_name, []).append(row.record)

    totals = []
    for name, records in grouped.items():
        totals.append(
            DepartmentTotals(
                department_name=name,
                employee_count=len(records),
                total_gross=sum((r.gross_earnings for r in records), ZERO),
                total_deductions=sum((r.total_deductions for r in records), ZERO),
                total_net_payable=sum((r.net_salary for r in records), ZERO),
            )
        )
    return totals
