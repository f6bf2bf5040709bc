"""Tests for payroll reporting helpers (backoffice_modules/payroll/helpers.py)."""

from decimal import Decimal

import pytest

from backoffice_modules.payroll.calculator import compute_payroll
from backoffice_modules.payroll.helpers import (
    build_rows,
    department_totals,
    resolve_department_name,
    search_employees,
)
from backoffice_modules.payroll.models import Department


class TestSearchEmployees:

    @pytest.mark.parametrize("term,expected", [
        ("priya", [1]),
        ("MEHTA", [2]),
        ("example.com", [1, 2, 3, 4]),
        ("kavya@", [3]),
        ("zzz", []),
    ])
    def test_case_insensitive_name_or_email(self, roster, term, expected):
        assert [e.id for e in search_employees(roster, term)] == expected

    @pytest.mark.parametrize("term", [None, "", "   "])
    def test_blank_term_matches_all(self, roster, term):
        assert len(search_employees(roster, term)) == len(roster)


class TestResolveDepartmentName:

    def test_known(self, departments):
        assert resolve_department_name(departments, "FIN") == "Finance & Accounts"

    def test_accepts_mapping(self, departments):
        index = {d.id: d for d in departments}
        assert resolve_department_name(index, "IT") == "Information Technology"

    @pytest.mark.parametrize("department_id", [None, "OPS"])
    def test_fallback_to_general(self, departments, department_id):
        assert resolve_department_name(departments, department_id) == "General"

    def test_blank_name_falls_back(self):
        assert resolve_department_name([Department(id="X", name="")], "X") == "General"

    def test_custom_default(self, departments):
        assert resolve_department_name(departments, None, "Unassigned") == "Unassigned"


class TestRowsAndDepartmentTotals:

    def test_rows_carry_roster_fields(self, roster, departments, june_2025):
        rows = build_rows(compute_payroll(roster, [], june_2025), roster, departments)
        first = rows[0]
        assert first.employee_name == "Priya Sharma"
        assert first.email == "priya@example.com"
        assert first.designation == "Accountant"
        assert first.department_name == "Finance & Accounts"
        assert rows[2].department_name == "General"

    def test_row_to_dict_merges_record(self, roster, departments, june_2025):
        row = build_rows(compute_payroll(roster[:1], [], june_2025), roster, departments)[0]
        data = row.to_dict()
        assert data["employee_id"] == 1
        assert data["department_name"] == "Finance & Accounts"
        assert data["employment_status"] == "Active"

    def test_department_totals_active_only(self, roster, departments, june_2025, attendance_for):
        log = []
        for employee_id in (1, 2, 3, 4):
            log += attendance_for(employee_id, june_2025, present=15)
        rows = build_rows(compute_payroll(roster, log, june_2025), roster, departments)
        totals = {t.department_name: t for t in department_totals(rows)}

        assert set(totals) == {"Finance & Accounts", "Information Technology", "General"}
        assert totals["Finance & Accounts"].employee_count == 1
        assert totals["Finance & Accounts"].total_net_payable == Decimal("14600")
        assert totals["General"].total_gross == Decimal("7500")
