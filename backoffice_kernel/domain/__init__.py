"""
Pure domain layer.

This module contains immutable value objects and state-machine types
with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O
"""

from backoffice_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from backoffice_kernel.domain.values import (
    AttendanceRecord,
    AttendanceStatus,
    PayrollPeriod,
    SalaryStructure,
    round_half_up,
    to_decimal,
)
from backoffice_kernel.domain.workflow import Guard, Transition, Workflow

__all__ = [
    "AttendanceRecord",
    "AttendanceStatus",
    "Clock",
    "DeterministicClock",
    "Guard",
    "PayrollPeriod",
    "SalaryStructure",
    "SystemClock",
    "Transition",
    "Workflow",
    "round_half_up",
    "to_decimal",
]
