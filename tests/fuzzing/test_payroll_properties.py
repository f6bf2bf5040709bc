"""
Property-based tests for payroll invariants.

Boundaries fuzzed here:
- Salary components: 0..10M whole units, PF on/off
- Attendance: any mix of statuses across the month, duplicates allowed
- Rosters: mixes of Active and Terminated employees
"""

from datetime import date
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from backoffice_kernel.domain.values import AttendanceRecord, PayrollPeriod, SalaryStructure
from backoffice_modules.payroll.calculator import PayrollRecordBuilder, compute_payroll, summarize
from backoffice_modules.payroll.models import Employee

PERIODS = [PayrollPeriod(2025, 2), PayrollPeriod(2024, 2), PayrollPeriod(2025, 6), PayrollPeriod(2025, 7)]
STATUSES = ["Present", "Half-Day", "Absent", "Leave", "Holiday"]

amounts = st.integers(min_value=0, max_value=10_000_000).map(Decimal)


@st.composite
def structures(draw):
    return SalaryStructure(
        basic=draw(amounts),
        hra=draw(amounts),
        special_allowance=draw(amounts),
        pf_deduction=draw(st.booleans()),
        professional_tax=draw(st.integers(min_value=0, max_value=2500).map(Decimal)),
        tds=draw(st.integers(min_value=0, max_value=500_000).map(Decimal)),
    )


@st.composite
def month_attendance(draw, employee_id: int, period: PayrollPeriod, max_size: int = 40):
    days = draw(
        st.lists(
            st.tuples(
                st.integers(min_value=1, max_value=period.days_in_month),
                st.sampled_from(STATUSES),
            ),
            max_size=max_size,
        )
    )
    return [
        AttendanceRecord(
            employee_id=employee_id,
            date=date(period.year, period.month, day),
            status=status,
        )
        for day, status in days
    ]


@st.composite
def single_cases(draw):
    period = draw(st.sampled_from(PERIODS))
    structure = draw(structures())
    attendance = draw(month_attendance(1, period))
    return period, Employee(id=1, name="E", salary_structure=structure), attendance


@st.composite
def rosters(draw):
    period = draw(st.sampled_from(PERIODS))
    size = draw(st.integers(min_value=0, max_value=6))
    employees = []
    attendance = []
    for employee_id in range(1, size + 1):
        employees.append(
            Employee(
                id=employee_id,
                name=f"E{employee_id}",
                is_active=draw(st.booleans()),
                salary_structure=draw(st.one_of(st.none(), structures())),
                base_salary=draw(st.one_of(st.none(), amounts)),
            )
        )
        attendance += draw(month_attendance(employee_id, period, max_size=10))
    return period, employees, attendance


class TestRecordInvariants:

    @given(single_cases())
    @settings(max_examples=200)
    def test_arithmetic_identities(self, case):
        period, employee, attendance = case
        record = PayrollRecordBuilder().build(employee, attendance, period)

        assert record.gross_earnings == record.earned_basic + record.earned_hra + record.earned_special
        assert record.total_deductions == record.pf + record.professional_tax + record.tds
        assert record.net_salary == max(Decimal("0"), record.gross_earnings - record.total_deductions)
        assert record.net_salary >= 0
        if not employee.salary_structure.pf_deduction:
            assert record.pf == 0

    @given(single_cases())
    def test_factor_bounded_unless_over_reported(self, case):
        period, employee, attendance = case
        record = PayrollRecordBuilder().build(employee, attendance, period)
        if record.days_present <= period.days_in_month:
            assert 0 <= record.attendance_factor <= 1

    @given(structures(), st.sampled_from(PERIODS))
    def test_full_attendance_reproduces_structure(self, structure, period):
        attendance = [
            AttendanceRecord(employee_id=1, date=date(period.year, period.month, d), status="Present")
            for d in range(1, period.days_in_month + 1)
        ]
        record = PayrollRecordBuilder().build(
            Employee(id=1, name="E", salary_structure=structure), attendance, period
        )
        assert record.earned_basic == structure.basic
        assert record.earned_hra == structure.hra
        assert record.earned_special == structure.special_allowance

    @given(structures(), st.sampled_from(PERIODS))
    def test_zero_attendance(self, structure, period):
        record = PayrollRecordBuilder().build(
            Employee(id=1, name="E", salary_structure=structure), [], period
        )
        assert record.gross_earnings == 0
        assert record.pf == 0
        assert record.net_salary == max(Decimal("0"), -structure.professional_tax - structure.tds)

    @given(single_cases())
    def test_attendance_order_irrelevant(self, case):
        period, employee, attendance = case
        builder = PayrollRecordBuilder()
        assert builder.build(employee, attendance, period) == builder.build(
            employee, list(reversed(attendance)), period
        )


class TestSummaryInvariants:

    @given(rosters())
    @settings(max_examples=100)
    def test_summary_is_sum_over_active(self, case):
        period, employees, attendance = case
        records = compute_payroll(employees, attendance, period)
        summary = summarize(records, period)

        active = [r for r in records if r.is_active]
        assert summary.active_employee_count == len(active)
        assert summary.total_net_payable == sum((r.net_salary for r in active), Decimal("0"))
        assert summary.total_gross == sum((r.gross_earnings for r in active), Decimal("0"))

    @given(rosters())
    def test_terminated_employees_do_not_affect_summary(self, case):
        period, employees, attendance = case
        active_only = [e for e in employees if e.is_active]
        assert summarize(compute_payroll(employees, attendance, period), period) == summarize(
            compute_payroll(active_only, attendance, period), period
        )

    @given(rosters())
    def test_idempotent(self, case):
        period, employees, attendance = case
        assert compute_payroll(employees, attendance, period) == compute_payroll(
            employees, attendance, period
        )
