"""
Tests for PayrollService.

Covers:
- Computation from the record store
- Reporting rows, search and department breakdown
- Attendance summaries
- Pay-run preview / recalculate / confirm, including drift detection
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from backoffice_kernel.domain.values import AttendanceRecord
from backoffice_kernel.exceptions import (
    EmployeeNotFoundError,
    PayRunDriftError,
    PayRunGuardError,
    PayRunTransitionError,
)
from backoffice_modules.payroll.models import PayRunState
from backoffice_modules.payroll.service import PayrollService, summary_fingerprint
from backoffice_modules.payroll.store import PayrollStore
from backoffice_modules.payroll.workflows import CONFIRMER_IDENTIFIED, SUMMARY_UNCHANGED


@pytest.fixture
def seeded_store(session, roster, departments, june_2025, attendance_for):
    store = PayrollStore(session)
    for department in departments:
        store.put_department(department)
    for employee in roster:
        store.put_employee(employee)
    for employee_id in (1, 2, 3, 4):
        store.put_attendance_many(attendance_for(employee_id, june_2025, present=15))
    return store


@pytest.fixture
def service(session, seeded_store, deterministic_clock):
    return PayrollService(session, clock=deterministic_clock)


class TestComputation:

    def test_compute_payroll(self, service, june_2025):
        records = service.compute_payroll(june_2025)
        assert [r.employee_id for r in records] == [1, 2, 3, 4]
        assert records[0].net_salary == Decimal("14600")

    def test_summary_active_only(self, service, june_2025):
        summary = service.payroll_summary(june_2025)
        assert summary.active_employee_count == 3
        assert summary.total_net_payable == Decimal("36700")

    def test_other_month_is_zero_attendance(self, service):
        from backoffice_kernel.domain.values import PayrollPeriod

        records = service.compute_payroll(PayrollPeriod(2025, 7))
        assert all(r.days_present == Decimal("0") for r in records)

    def test_rows_with_search(self, service, june_2025):
        rows = service.payroll_rows(june_2025, search="ARJUN")
        assert [r.employee_name for r in rows] == ["Arjun Mehta"]
        assert rows[0].department_name == "Information Technology"

    def test_department_breakdown(self, service, june_2025):
        names = [t.department_name for t in service.department_breakdown(june_2025)]
        assert names == ["Finance & Accounts", "Information Technology", "General"]

    def test_attendance_summary(self, service, june_2025):
        summary = service.attendance_summary(1, june_2025)
        assert summary.present_count == 15
        assert summary.days_present == Decimal("15")

    def test_attendance_summary_unknown_employee(self, service, june_2025):
        with pytest.raises(EmployeeNotFoundError):
            service.attendance_summary(99, june_2025)


class TestPayRun:

    def test_full_lifecycle(self, service, june_2025, deterministic_clock):
        run = service.start_pay_run(june_2025)
        assert run.state is PayRunState.DRAFT

        run = service.preview_pay_run(run)
        assert run.state is PayRunState.PREVIEWED
        assert run.summary.total_net_payable == Decimal("36700")
        assert run.summary_fingerprint == summary_fingerprint(run.summary)
        assert run.previewed_at == deterministic_clock.now()

        run = service.confirm_pay_run(run, confirmed_by="hr.lead")
        assert run.state is PayRunState.CONFIRMED
        assert run.confirmed_by == "hr.lead"
        assert run.history == ("draft", "previewed", "confirmed")

    def test_confirm_from_draft_rejected(self, service, june_2025):
        run = service.start_pay_run(june_2025)
        with pytest.raises(PayRunTransitionError) as exc_info:
            service.confirm_pay_run(run, confirmed_by="hr.lead")
        assert exc_info.value.current_state == "draft"
        assert exc_info.value.action == "confirm"

    def test_confirmed_run_is_terminal(self, service, june_2025):
        run = service.confirm_pay_run(
            service.preview_pay_run(service.start_pay_run(june_2025)), confirmed_by="hr.lead"
        )
        with pytest.raises(PayRunTransitionError):
            service.recalculate(run)

    def test_blank_confirmer_rejected(self, service, june_2025):
        run = service.preview_pay_run(service.start_pay_run(june_2025))
        with pytest.raises(PayRunGuardError) as exc_info:
            service.confirm_pay_run(run, confirmed_by="  ")
        assert exc_info.value.guard_name == "confirmer_identified"

    def test_drift_between_preview_and_confirm(self, service, seeded_store, june_2025):
        run = service.preview_pay_run(service.start_pay_run(june_2025))
        seeded_store.put_attendance(
            AttendanceRecord(employee_id=1, date=date(2025, 6, 20), status="Present")
        )
        with pytest.raises(PayRunDriftError) as exc_info:
            service.confirm_pay_run(run, confirmed_by="hr.lead")
        assert exc_info.value.expected == run.summary_fingerprint

    def test_terminated_changes_do_not_drift(self, service, seeded_store, june_2025):
        run = service.preview_pay_run(service.start_pay_run(june_2025))
        day = june_2025.start_date + timedelta(days=20)
        seeded_store.put_attendance(AttendanceRecord(employee_id=4, date=day, status="Present"))
        confirmed = service.confirm_pay_run(run, confirmed_by="hr.lead")
        assert confirmed.state is PayRunState.CONFIRMED

    def test_blank_confirmer_refused_before_recompute(
        self, service, seeded_store, june_2025, captured_logs
    ):
        run = service.preview_pay_run(service.start_pay_run(june_2025))
        seeded_store.put_attendance(
            AttendanceRecord(employee_id=1, date=date(2025, 6, 20), status="Present")
        )
        with pytest.raises(PayRunGuardError) as exc_info:
            service.confirm_pay_run(run, confirmed_by="")
        assert exc_info.value.guard_name == CONFIRMER_IDENTIFIED.name
        assert not [r for r in captured_logs() if r["message"] == "pay_run_summary_drift"]

    def test_confirm_checks_follow_declared_guards(
        self, service, seeded_store, june_2025, monkeypatch
    ):
        monkeypatch.setattr(
            "backoffice_modules.payroll.service.CONFIRM_GUARDS", (SUMMARY_UNCHANGED,)
        )
        run = service.preview_pay_run(service.start_pay_run(june_2025))
        confirmed = service.confirm_pay_run(run, confirmed_by="")
        assert confirmed.state is PayRunState.CONFIRMED
        assert confirmed.summary_fingerprint == run.summary_fingerprint

    def test_recalculate_then_preview_again(self, service, seeded_store, june_2025):
        run = service.preview_pay_run(service.start_pay_run(june_2025))
        seeded_store.put_attendance(
            AttendanceRecord(employee_id=1, date=date(2025, 6, 20), status="Present")
        )
        run = service.recalculate(run)
        assert run.state is PayRunState.DRAFT
        assert run.summary is None

        run = service.preview_pay_run(run)
        run = service.confirm_pay_run(run, confirmed_by="hr.lead")
        assert run.history == ("draft", "previewed", "draft", "previewed", "confirmed")

    def test_confirmation_logged(self, service, june_2025, captured_logs):
        run = service.preview_pay_run(service.start_pay_run(june_2025))
        service.confirm_pay_run(run, confirmed_by="hr.lead")
        confirmed = [r for r in captured_logs() if r["message"] == "pay_run_confirmed"]
        assert len(confirmed) == 1
        assert confirmed[0]["pay_run_id"] == str(run.id)
        assert confirmed[0]["actor_id"] == "hr.lead"
