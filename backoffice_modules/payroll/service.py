"""
Payroll Module Service (``backoffice_modules.payroll.service``).

Responsibility
--------------
Entry point for payroll operations: load a consistent snapshot from the
record store, run the pure calculator over it, shape reporting rows and
department totals, and drive simulated pay runs through
``draft -> previewed -> confirmed``.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``PayrollService`` composes the snapshot
selector, ``PayrollRecordBuilder``/``PayrollAggregator`` and the pure
helpers.  All arithmetic lives in ``backoffice_engines``.

Invariants enforced
-------------------
* Every computation reads one snapshot through the caller's session; the
  service never commits.
* Pay-run transitions follow ``PAY_RUN_WORKFLOW``; an illegal action
  raises ``PayRunTransitionError``.
* Confirmation recomputes from a fresh snapshot and refuses with
  ``PayRunDriftError`` when the summary fingerprint changed since preview.
* Pay runs are returned as new frozen values; nothing is persisted.

Failure modes
-------------
* ``PayRunTransitionError`` -- action not allowed from the current state.
* ``PayRunGuardError``      -- confirmation without a named confirmer.
* ``PayRunDriftError``      -- inputs changed between preview and confirm.
* ``EmployeeNotFoundError`` -- attendance summary for an unknown employee.

Usage::

    with session_scope() as session:
        service = PayrollService(session, clock=clock)
        run = service.start_pay_run(PayrollPeriod(2025, 6))
        run = service.preview_pay_run(run)
        run = service.confirm_pay_run(run, confirmed_by="hr.lead")
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from uuid import uuid4

from sqlalchemy.orm import Session

from backoffice_engines.attendance import AttendanceSummary
from backoffice_kernel.domain.clock import Clock, SystemClock
from backoffice_kernel.domain.values import PayrollPeriod
from backoffice_kernel.exceptions import (
    PayRunDriftError,
    PayRunGuardError,
    PayRunTransitionError,
)
from backoffice_kernel.logging_config import LogContext, get_logger
from backoffice_kernel.utils.hashing import hash_payload
from backoffice_modules.payroll.calculator import PayrollAggregator, PayrollRecordBuilder
from backoffice_modules.payroll.config import PayrollConfig
from backoffice_modules.payroll.helpers import (
    build_rows,
    department_totals,
    search_employees,
)
from backoffice_modules.payroll.models import (
    DepartmentTotals,
    PayRun,
    PayRunState,
    PayrollRecord,
    PayrollRow,
    PayrollSummary,
)
from backoffice_modules.payroll.selectors import PayrollSnapshot, PayrollSnapshotSelector
from backoffice_modules.payroll.store import PayrollStore
from backoffice_modules.payroll.workflows import (
    CONFIRM_GUARDS,
    CONFIRMER_IDENTIFIED,
    PAY_RUN_WORKFLOW,
    SUMMARY_UNCHANGED,
)

logger = get_logger("modules.payroll.service")


def summary_fingerprint(summary: PayrollSummary) -> str:
    """SHA-256 over the canonical JSON of the summary totals."""
    return hash_payload(summary.to_dict())


@dataclass
class _Confirmation:
    """State shared by the confirm guards; the summary is filled in on recompute."""
    pay_run: PayRun
    confirmed_by: str
    summary: PayrollSummary | None = None


class PayrollService:
    """
    Orchestrates payroll computation and simulated pay runs.

    Contract
    --------
    * The caller owns ``session`` and its transaction.
    * Clock is injectable for deterministic testing.

    Non-goals
    ---------
    * Does NOT persist pay runs or payroll records.
    * Does NOT render payslips or export files.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: PayrollConfig | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or PayrollConfig.with_defaults()
        self._selector = PayrollSnapshotSelector(session)
        self._builder = PayrollRecordBuilder(self._config)
        self._aggregator = PayrollAggregator()
        self._confirm_checks = {
            CONFIRMER_IDENTIFIED.name: self._check_confirmer_identified,
            SUMMARY_UNCHANGED.name: self._check_summary_unchanged,
        }

    @property
    def config(self) -> PayrollConfig:
        return self._config

    @property
    def store(self) -> PayrollStore:
        return PayrollStore(self._session)

    # =========================================================================
    # Computation
    # =========================================================================

    def snapshot(self, period: PayrollPeriod) -> PayrollSnapshot:
        return self._selector.load(period)

    def compute_payroll(
        self,
        period: PayrollPeriod,
        snapshot: PayrollSnapshot | None = None,
    ) -> list[PayrollRecord]:
        """One record per employee on the roster, Terminated included."""
        snapshot = snapshot or self.snapshot(period)
        with LogContext.bind(period=period.key):
            return self._builder.build_all(snapshot.employees, snapshot.attendance, period)

    def payroll_summary(
        self,
        period: PayrollPeriod,
        records: list[PayrollRecord] | None = None,
    ) -> PayrollSummary:
        if records is None:
            records = self.compute_payroll(period)
        with LogContext.bind(period=period.key):
            return self._aggregator.summarize(records, period)

    def payroll_rows(
        self,
        period: PayrollPeriod,
        search: str | None = None,
    ) -> list[PayrollRow]:
        """
        Records joined with roster fields for reporting.

        ``search`` narrows the roster by case-insensitive name or email
        match before computing.
        """
        snapshot = self.snapshot(period)
        employees = search_employees(snapshot.employees, search)
        with LogContext.bind(period=period.key):
            records = self._builder.build_all(employees, snapshot.attendance, period)
        return build_rows(
            records,
            employees,
            snapshot.departments,
            self._config.default_department_name,
        )

    def department_breakdown(self, period: PayrollPeriod) -> list[DepartmentTotals]:
        return department_totals(self.payroll_rows(period))

    def attendance_summary(self, employee_id: int, period: PayrollPeriod) -> AttendanceSummary:
        """Per-status counts for one employee; unknown ids raise."""
        self.store.get_employee(employee_id)
        attendance = self._selector.attendance(period)
        return self._builder.attendance_aggregator.summarize(attendance, employee_id, period)

    # =========================================================================
    # Pay runs
    # =========================================================================

    def start_pay_run(self, period: PayrollPeriod) -> PayRun:
        pay_run = PayRun(id=uuid4(), period=period, history=(PAY_RUN_WORKFLOW.initial_state,))
        logger.info(
            "pay_run_started",
            extra={"pay_run_id": str(pay_run.id), "period": period.key},
        )
        return pay_run

    def _transition(self, pay_run: PayRun, action: str) -> PayRunState:
        transition = PAY_RUN_WORKFLOW.find_transition(pay_run.state.value, action)
        if transition is None:
            logger.warning(
                "pay_run_transition_rejected",
                extra={
                    "pay_run_id": str(pay_run.id),
                    "state": pay_run.state.value,
                    "action": action,
                },
            )
            raise PayRunTransitionError(str(pay_run.id), pay_run.state.value, action)
        return PayRunState(transition.to_state)

    def preview_pay_run(self, pay_run: PayRun) -> PayRun:
        """Compute the summary and pin its fingerprint."""
        new_state = self._transition(pay_run, "preview")
        with LogContext.bind(pay_run_id=str(pay_run.id)):
            summary = self.payroll_summary(pay_run.period)
            fingerprint = summary_fingerprint(summary)
            logger.info(
                "pay_run_previewed",
                extra={
                    "period": pay_run.period.key,
                    "active_employee_count": summary.active_employee_count,
                    "total_net_payable": str(summary.total_net_payable),
                    "summary_fingerprint": fingerprint,
                },
            )
        return replace(
            pay_run,
            state=new_state,
            summary=summary,
            summary_fingerprint=fingerprint,
            previewed_at=self._clock.now(),
            history=pay_run.history + (new_state.value,),
        )

    def recalculate(self, pay_run: PayRun) -> PayRun:
        """Send a previewed run back to draft, discarding its summary."""
        new_state = self._transition(pay_run, "recalculate")
        logger.info(
            "pay_run_returned_to_draft",
            extra={"pay_run_id": str(pay_run.id), "period": pay_run.period.key},
        )
        return replace(
            pay_run,
            state=new_state,
            summary=None,
            summary_fingerprint=None,
            previewed_at=None,
            history=pay_run.history + (new_state.value,),
        )

    def confirm_pay_run(self, pay_run: PayRun, confirmed_by: str) -> PayRun:
        """
        Confirm a previewed run after recomputing it.

        Each guard in ``CONFIRM_GUARDS`` is checked in order, so a blank
        confirmer is refused before any recomputation.

        Raises:
            PayRunGuardError: ``confirmed_by`` is blank.
            PayRunDriftError: the recomputed fingerprint differs.
        """
        new_state = self._transition(pay_run, "confirm")
        confirmation = _Confirmation(pay_run=pay_run, confirmed_by=confirmed_by)

        with LogContext.bind(pay_run_id=str(pay_run.id), actor_id=confirmed_by or None):
            for guard in CONFIRM_GUARDS:
                self._confirm_checks[guard.name](confirmation)
            summary = confirmation.summary

            logger.info(
                "pay_run_confirmed",
                extra={
                    "period": pay_run.period.key,
                    "total_net_payable": str(summary.total_net_payable),
                },
            )
        return replace(
            pay_run,
            state=new_state,
            summary=summary,
            confirmed_at=self._clock.now(),
            confirmed_by=confirmed_by,
            history=pay_run.history + (new_state.value,),
        )

    def _check_confirmer_identified(self, confirmation: _Confirmation) -> None:
        if not (confirmation.confirmed_by or "").strip():
            raise PayRunGuardError(
                str(confirmation.pay_run.id),
                CONFIRMER_IDENTIFIED.name,
                "confirmed_by is blank",
            )

    def _check_summary_unchanged(self, confirmation: _Confirmation) -> None:
        """Recompute from a fresh snapshot and compare with the preview."""
        pay_run = confirmation.pay_run
        summary = self.payroll_summary(pay_run.period)
        fingerprint = summary_fingerprint(summary)
        if fingerprint != pay_run.summary_fingerprint:
            logger.warning(
                "pay_run_summary_drift",
                extra={
                    "guard": SUMMARY_UNCHANGED.name,
                    "expected": pay_run.summary_fingerprint,
                    "actual": fingerprint,
                },
            )
            raise PayRunDriftError(
                str(pay_run.id), pay_run.summary_fingerprint or "", fingerprint
            )
        confirmation.summary = summary
