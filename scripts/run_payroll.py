#!/usr/bin/env python3
"""
Compute one month's payroll from the record store and print it as JSON.

Reads the roster, salary structures, departments and attendance log for
the month, runs the payroll calculator, and prints the rows, the
department breakdown and the Active-only summary.

Usage:
    python3 scripts/run_payroll.py --month YYYY-MM [options]

Examples:
    # Seed a small demo roster into a fresh SQLite file, then compute June
    python3 scripts/run_payroll.py --db-url sqlite:///payroll.db --month 2025-06 --seed-demo

    # Filter the rows by name or email
    python3 scripts/run_payroll.py --month 2025-06 --search priya

    # Preview and confirm a pay run
    python3 scripts/run_payroll.py --month 2025-06 --confirm-as hr.lead
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

DB_URL = "sqlite:///payroll.db"

DEMO_DEPARTMENTS = (
    ("FIN", "Finance & Accounts", "Manages financial records, audits, and taxation."),
    ("HR", "Human Resources", "Employee lifecycle, payroll, and compliance."),
    ("IT", "Information Technology", "System administration and technical support."),
    ("OPS", "Operations", "Day-to-day business operations and logistics."),
)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute monthly payroll from roster, salary structures and attendance.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--month",
        required=True,
        help="Payroll month as YYYY-MM.",
    )
    parser.add_argument(
        "--db-url",
        default=DB_URL,
        help=f"Database URL (default: {DB_URL!r}).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Payroll YAML config (default: $BACKOFFICE_PAYROLL_CONFIG or packaged defaults).",
    )
    parser.add_argument(
        "--seed-demo",
        action="store_true",
        help="Create tables and load a demo roster and attendance for the month first.",
    )
    parser.add_argument(
        "--search",
        default=None,
        help="Only show employees whose name or email contains this text.",
    )
    parser.add_argument(
        "--confirm-as",
        default=None,
        help="Preview and confirm a pay run, recording this name as confirmer.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Structured log level written to stderr (default: WARNING).",
    )
    return parser.parse_args(argv)


def seed_demo(store, period) -> None:
    """Load departments, four employees and a month of attendance."""
    from backoffice_kernel.domain.values import AttendanceRecord, SalaryStructure
    from backoffice_modules.payroll.models import Department, Employee

    for code, name, description in DEMO_DEPARTMENTS:
        store.put_department(Department(id=code, name=name, description=description))

    employees = (
        Employee(
            id=1, name="Priya Sharma", email="priya.sharma@example.com",
            department_id="FIN", designation="Senior Accountant",
            salary_structure=SalaryStructure(
                basic=Decimal("20000"), hra=Decimal("10000"),
                special_allowance=Decimal("5000"), pf_deduction=True,
                professional_tax=Decimal("200"), tds=Decimal("1500"),
            ),
        ),
        Employee(
            id=2, name="Arjun Mehta", email="arjun.mehta@example.com",
            department_id="IT", designation="Systems Engineer",
            salary_structure=SalaryStructure(
                basic=Decimal("30000"), hra=Decimal("12000"),
                special_allowance=Decimal("8000"), pf_deduction=True,
                professional_tax=Decimal("200"), tds=Decimal("3000"),
            ),
        ),
        Employee(
            id=3, name="Kavya Iyer", email="kavya.iyer@example.com",
            department_id=None, designation="Office Assistant",
            base_salary=Decimal("15000"),
        ),
        Employee(
            id=4, name="Rohan Das", email="rohan.das@example.com",
            department_id="OPS", designation="Logistics Lead", is_active=False,
            salary_structure=SalaryStructure(basic=Decimal("25000"), hra=Decimal("10000")),
        ),
    )
    for employee in employees:
        store.put_employee(employee)

    day = period.start_date
    while day <= period.end_date:
        if day.weekday() < 6:
            store.put_attendance(AttendanceRecord(employee_id=1, date=day, status="Present"))
            store.put_attendance(
                AttendanceRecord(
                    employee_id=2,
                    date=day,
                    status="Half-Day" if day.day % 7 == 0 else "Present",
                )
            )
            store.put_attendance(
                AttendanceRecord(
                    employee_id=3,
                    date=day,
                    status="Leave" if day.day <= 3 else "Present",
                )
            )
        day += timedelta(days=1)


def _json_default(obj):
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    from backoffice_config import get_active_config
    from backoffice_kernel.db.engine import create_tables, init_engine_from_url, session_scope
    from backoffice_kernel.domain.values import PayrollPeriod
    from backoffice_kernel.exceptions import BackofficeKernelError
    from backoffice_kernel.logging_config import configure_logging
    from backoffice_modules.payroll.service import PayrollService
    from backoffice_modules.payroll.store import PayrollStore

    configure_logging(level=args.log_level)

    try:
        period = PayrollPeriod.parse(args.month)
        config = get_active_config(args.config)
    except (BackofficeKernelError, FileNotFoundError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    init_engine_from_url(args.db_url)
    create_tables()

    try:
        with session_scope() as session:
            if args.seed_demo:
                seed_demo(PayrollStore(session), period)

            service = PayrollService(session, config=config)
            rows = service.payroll_rows(period, search=args.search)
            output = {
                "period": period.key,
                "label": period.label,
                "currency": config.currency_code,
                "rows": [row.to_dict() for row in rows],
                "departments": [
                    {
                        "department_name": t.department_name,
                        "employee_count": t.employee_count,
                        "total_gross": t.total_gross,
                        "total_deductions": t.total_deductions,
                        "total_net_payable": t.total_net_payable,
                    }
                    for t in service.department_breakdown(period)
                ],
                "summary": service.payroll_summary(period).to_dict(),
            }

            if args.confirm_as:
                run = service.preview_pay_run(service.start_pay_run(period))
                run = service.confirm_pay_run(run, confirmed_by=args.confirm_as)
                output["pay_run"] = {
                    "id": str(run.id),
                    "state": run.state.value,
                    "summary_fingerprint": run.summary_fingerprint,
                    "confirmed_by": run.confirmed_by,
                    "confirmed_at": run.confirmed_at.isoformat(),
                }
    except BackofficeKernelError as exc:
        print(f"ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, default=_json_default))
    return 0


if __name__ == "__main__":
    sys.exit(main())
