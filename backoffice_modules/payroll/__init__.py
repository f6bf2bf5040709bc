"""
Payroll Module (``backoffice_modules.payroll``).

Responsibility
--------------
Monthly payroll from roster, salary structures and attendance:
per-employee records, organisation totals, reporting rows and simulated
pay runs.

Architecture position
---------------------
**Modules layer** -- models, config schema, workflow, ORM, selectors and a
service facade.  Arithmetic is delegated to ``backoffice_engines``.

Invariants enforced
-------------------
* ``net_salary = max(0, gross_earnings - total_deductions)``.
* Summaries count Active employees only.
* Computation is pure; only the store touches the database.
"""

from backoffice_modules.payroll.calculator import (
    PayrollAggregator,
    PayrollRecordBuilder,
    compute_payroll,
    summarize,
)
from backoffice_modules.payroll.config import PayrollConfig
from backoffice_modules.payroll.models import (
    Department,
    DepartmentTotals,
    Employee,
    EmploymentStatus,
    PayRun,
    PayRunState,
    PayrollRecord,
    PayrollRow,
    PayrollSummary,
)
from backoffice_modules.payroll.workflows import PAY_RUN_WORKFLOW

__all__ = [
    "Department",
    "DepartmentTotals",
    "Employee",
    "EmploymentStatus",
    "PayRun",
    "PayRunState",
    "PayrollRecord",
    "PayrollRow",
    "PayrollSummary",
    "PayrollAggregator",
    "PayrollRecordBuilder",
    "compute_payroll",
    "summarize",
    "PayrollConfig",
    "PAY_RUN_WORKFLOW",
]
