"""
Tests for the Earnings Prorator.

Covers:
- Exact proration for whole, half and zero attendance
- Independent per-component half-up rounding
- Unclamped over-reported attendance
"""

from decimal import Decimal

import pytest

from backoffice_engines.proration import AttendanceFactor, EarningsProrator
from backoffice_kernel.domain.values import SalaryStructure


@pytest.fixture
def structure():
    return SalaryStructure(
        basic=Decimal("20000"),
        hra=Decimal("10000"),
        special_allowance=Decimal("5000"),
    )


class TestAttendanceFactor:

    def test_value(self):
        assert AttendanceFactor(Decimal("15"), 30).value == Decimal("0.5")

    def test_exceeds_month(self):
        assert AttendanceFactor(Decimal("31"), 30).exceeds_month
        assert not AttendanceFactor(Decimal("30"), 30).exceeds_month

    def test_scale_multiplies_before_dividing(self):
        # 15 * 1/30 is exactly 0.5, which a rounded 1/30 factor would miss
        assert AttendanceFactor(Decimal("1"), 30).scale(Decimal("15")) == Decimal("0.5")

    def test_zero_days_in_month_rejected(self):
        with pytest.raises(ValueError):
            AttendanceFactor(Decimal("1"), 0)


class TestProrate:

    def setup_method(self):
        self.prorator = EarningsProrator()

    def test_half_month(self, structure):
        earned = self.prorator.prorate(
            structure=structure, attendance_factor=AttendanceFactor(Decimal("15"), 30)
        )
        assert earned.earned_basic == Decimal("10000")
        assert earned.earned_hra == Decimal("5000")
        assert earned.earned_special == Decimal("2500")
        assert earned.gross == Decimal("17500")

    def test_full_month_reproduces_structure(self, structure):
        earned = self.prorator.prorate(
            structure=structure, attendance_factor=AttendanceFactor(Decimal("31"), 31)
        )
        assert earned.earned_basic == structure.basic
        assert earned.earned_hra == structure.hra
        assert earned.earned_special == structure.special_allowance

    def test_zero_attendance(self, structure):
        earned = self.prorator.prorate(
            structure=structure, attendance_factor=AttendanceFactor(Decimal("0"), 30)
        )
        assert earned.gross == Decimal("0")

    def test_components_round_independently(self):
        structure = SalaryStructure(
            basic=Decimal("1000"), hra=Decimal("1000"), special_allowance=Decimal("1000")
        )
        # 1000 * 10/31 = 322.58 -> 323 per component; 3000 * 10/31 = 967.74 -> 968
        earned = self.prorator.prorate(
            structure=structure, attendance_factor=AttendanceFactor(Decimal("10"), 31)
        )
        assert earned.earned_basic == Decimal("323")
        assert earned.gross == Decimal("969")

    def test_half_unit_rounds_up(self):
        structure = SalaryStructure(basic=Decimal("15"))
        earned = self.prorator.prorate(
            structure=structure, attendance_factor=AttendanceFactor(Decimal("1"), 30)
        )
        assert earned.earned_basic == Decimal("1")

    def test_plain_decimal_factor(self, structure):
        earned = self.prorator.prorate(structure=structure, attendance_factor=Decimal("0.5"))
        assert earned.earned_basic == Decimal("10000")

    def test_factor_above_one_not_clamped(self, structure, captured_logs):
        earned = self.prorator.prorate(
            structure=structure, attendance_factor=AttendanceFactor(Decimal("33"), 30)
        )
        assert earned.earned_basic == Decimal("22000")
        warnings = [r for r in captured_logs() if r["message"] == "attendance_factor_exceeds_one"]
        assert len(warnings) == 1
        assert warnings[0]["level"] == "WARNING"

    def test_excess_warning_can_be_disabled(self, structure, captured_logs):
        EarningsProrator(warn_on_excess=False).prorate(
            structure=structure, attendance_factor=AttendanceFactor(Decimal("33"), 30)
        )
        assert not any(r["message"] == "attendance_factor_exceeds_one" for r in captured_logs())
