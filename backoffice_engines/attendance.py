"""
Module: backoffice_engines.attendance
Responsibility:
    Reduce an employee's attendance log for one payroll period to a
    single "days present" figure, and produce per-status counts for
    attendance reporting.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import backoffice_kernel/domain.

Invariants enforced:
    - Only records of the requested employee dated inside the period's
      year-month are consulted.
    - Present contributes 1 day, Half-Day 0.5 day, every other status 0.
    - No deduplication: two records for the same employee and date are
      both counted.  A malformed log is reported as-is, not repaired.

Failure modes:
    - None.  An empty slice yields ``Decimal("0")`` days present, which is
      a valid outcome (fully absent or newly joined employee).

Usage:
    from backoffice_engines.attendance import AttendanceAggregator
    from backoffice_kernel.domain.values import PayrollPeriod

    aggregator = AttendanceAggregator()
    days = aggregator.days_present(
        attendance=log,
        employee_id=7,
        period=PayrollPeriod(2025, 6),
    )
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal

from backoffice_engines.tracer import traced_engine
from backoffice_kernel.domain.values import (
    ZERO,
    AttendanceRecord,
    AttendanceStatus,
    PayrollPeriod,
    to_decimal,
)
from backoffice_kernel.logging_config import get_logger

logger = get_logger("engines.attendance")

DEFAULT_PRESENCE_WEIGHTS: Mapping[str, Decimal] = {
    AttendanceStatus.PRESENT.value: Decimal("1"),
    AttendanceStatus.HALF_DAY.value: Decimal("0.5"),
}


@dataclass(frozen=True)
class AttendanceSummary:
    """
    Attendance counts for one employee in one period.

    Contract:
        Counts are numbers of log records, not days; ``days_present`` is
        the weighted figure used for proration.
    Non-goals:
        - No leave balances or entitlement tracking.
    """

    employee_id: int
    period: PayrollPeriod
    present_count: int
    half_day_count: int
    absent_count: int
    leave_count: int
    other_count: int
    days_present: Decimal

    @property
    def record_count(self) -> int:
        return (
            self.present_count
            + self.half_day_count
            + self.absent_count
            + self.leave_count
            + self.other_count
        )


class AttendanceAggregator:
    """
    Reduces attendance records to days present.

    Contract:
        Stateless apart from the presence weights it was built with.
    Guarantees:
        - ``days_present`` equals the sum of the weights of the matching
          records, in any order.
    """

    def __init__(self, presence_weights: Mapping[str, Decimal] | None = None):
        weights = presence_weights if presence_weights is not None else DEFAULT_PRESENCE_WEIGHTS
        self._weights: dict[str, Decimal] = {
            AttendanceStatus.normalize(status): to_decimal(weight)
            for status, weight in weights.items()
        }

    @property
    def presence_weights(self) -> Mapping[str, Decimal]:
        return dict(self._weights)

    def weight_of(self, status: str) -> Decimal:
        """Days contributed by a single record with this status."""
        return self._weights.get(AttendanceStatus.normalize(status), ZERO)

    def records_for(
        self,
        attendance: Iterable[AttendanceRecord],
        employee_id: int,
        period: PayrollPeriod,
    ) -> tuple[AttendanceRecord, ...]:
        """The employee's records dated within the period, in log order."""
        return tuple(
            r for r in attendance
            if r.employee_id == employee_id and period.contains(r.date)
        )

    def index_by_employee(
        self,
        attendance: Iterable[AttendanceRecord],
        period: PayrollPeriod,
    ) -> dict[int, tuple[AttendanceRecord, ...]]:
        """
        Partition the period's records by employee in one pass.

        Used when computing a whole roster so that each employee's slice
        is not re-filtered from the full log.
        """
        slices: dict[int, list[AttendanceRecord]] = defaultdict(list)
        for record in attendance:
            if period.contains(record.date):
                slices[record.employee_id].append(record)
        return {employee_id: tuple(records) for employee_id, records in slices.items()}

    def sum_presence(self, records: Iterable[AttendanceRecord]) -> Decimal:
        """Weighted day count of an already-filtered slice."""
        total = ZERO
        for record in records:
            total += self.weight_of(record.status)
        return total

    @traced_engine("attendance", "1.0", fingerprint_fields=("employee_id", "period"))
    def days_present(
        self,
        attendance: Iterable[AttendanceRecord],
        employee_id: int,
        period: PayrollPeriod,
    ) -> Decimal:
        """
        Days present for one employee in one period.

        Postconditions:
            - Returns ``Decimal("0")`` when no record matches.
        """
        return self.sum_presence(self.records_for(attendance, employee_id, period))

    def summarize(
        self,
        attendance: Iterable[AttendanceRecord],
        employee_id: int,
        period: PayrollPeriod,
    ) -> AttendanceSummary:
        """Per-status record counts plus weighted days present."""
        records = self.records_for(attendance, employee_id, period)
        counts: dict[str, int] = defaultdict(int)
        for record in records:
            counts[record.status] += 1

        known = {status.value for status in AttendanceStatus}
        other = sum(n for status, n in counts.items() if status not in known)

        summary = AttendanceSummary(
            employee_id=employee_id,
            period=period,
            present_count=counts[AttendanceStatus.PRESENT.value],
            half_day_count=counts[AttendanceStatus.HALF_DAY.value],
            absent_count=counts[AttendanceStatus.ABSENT.value],
            leave_count=counts[AttendanceStatus.LEAVE.value],
            other_count=other,
            days_present=self.sum_presence(records),
        )

        if other:
            logger.debug(
                "attendance_unrecognised_status",
                extra={
                    "employee_id": employee_id,
                    "period": period.key,
                    "record_count": other,
                },
            )
        return summary
