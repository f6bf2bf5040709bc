"""
Pytest fixtures for the back-office payroll test suite.

Provides:
- SQLite in-memory database sessions (one shared connection per test)
- Roster / attendance builders
- Structured log capture

Environment Variables:
- DATABASE_URL: optional database URL.  Defaults to in-memory SQLite.
"""

import json
import logging
import os
from datetime import timedelta
from decimal import Decimal
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from backoffice_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from backoffice_kernel.domain.clock import DeterministicClock
from backoffice_kernel.domain.values import (
    AttendanceRecord,
    PayrollPeriod,
    SalaryStructure,
)
from backoffice_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from backoffice_modules.payroll.models import Department, Employee

DEFAULT_DATABASE_URL = "sqlite://"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture backoffice_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute_payroll(...)
            logs = captured_logs()
            assert any(r["message"] == "payroll_computed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("backoffice_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """A session on a fresh database with every payroll table created."""
    init_engine_from_url(os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL))
    create_tables()
    sess = get_session()
    try:
        yield sess
    finally:
        sess.rollback()
        sess.close()
        drop_tables()
        reset_engine()


@pytest.fixture
def deterministic_clock():
    return DeterministicClock()


# =============================================================================
# Domain builders
# =============================================================================


@pytest.fixture
def june_2025() -> PayrollPeriod:
    """A 30-day month."""
    return PayrollPeriod(2025, 6)


@pytest.fixture
def standard_structure() -> SalaryStructure:
    """basic 20000, hra 10000, special 5000, PF on, PT 200, TDS 1500."""
    return SalaryStructure(
        basic=Decimal("20000"),
        hra=Decimal("10000"),
        special_allowance=Decimal("5000"),
        pf_deduction=True,
        professional_tax=Decimal("200"),
        tds=Decimal("1500"),
    )


def make_attendance(
    employee_id: int,
    period: PayrollPeriod,
    present: int = 0,
    half_days: int = 0,
    start_day: int = 1,
) -> list[AttendanceRecord]:
    """``present`` Present days followed by ``half_days`` Half-Day days."""
    records = []
    day = period.start_date + timedelta(days=start_day - 1)
    for status, count in (("Present", present), ("Half-Day", half_days)):
        for _ in range(count):
            records.append(AttendanceRecord(employee_id=employee_id, date=day, status=status))
            day += timedelta(days=1)
    return records


@pytest.fixture
def attendance_for():
    return make_attendance


@pytest.fixture
def departments() -> list[Department]:
    return [
        Department(id="FIN", name="Finance & Accounts"),
        Department(id="IT", name="Information Technology"),
    ]


@pytest.fixture
def roster(standard_structure) -> list[Employee]:
    """Two Active employees with structures, one fallback, one Terminated."""
    return [
        Employee(
            id=1, name="Priya Sharma", email="priya@example.com",
            department_id="FIN", designation="Accountant",
            salary_structure=standard_structure,
        ),
        Employee(
            id=2, name="Arjun Mehta", email="arjun@example.com",
            department_id="IT", designation="Engineer",
            salary_structure=standard_structure,
        ),
        Employee(
            id=3, name="Kavya Iyer", email="kavya@example.com",
            department_id=None, base_salary=Decimal("15000"),
        ),
        Employee(
            id=4, name="Rohan Das", email="rohan@example.com",
            department_id="FIN", is_active=False,
            salary_structure=standard_structure,
        ),
    ]
