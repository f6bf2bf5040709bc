"""
Payroll ORM Persistence Models (``backoffice_modules.payroll.orm``).

Responsibility:
    SQLAlchemy ORM models that persist the roster, salary structures,
    departments and attendance log read by the payroll computation.  Each
    ORM class mirrors a frozen DTO and provides ``to_dto()`` /
    ``from_dto()`` conversion.

Architecture position:
    **Modules layer** -- persistence companions to the pure DTO models.
    Inherits from ``TrackedBase`` (kernel DB base) which provides
    created_at and updated_at.  Never imported by engines.

Invariants enforced:
    - All monetary fields use Decimal (maps to Numeric(18,2)) -- NEVER float.
    - At most one salary structure per employee (uq_payroll_structure_employee).
    - At most one attendance row per employee and date
      (uq_payroll_attendance_employee_date).
    - Department references are stored as the department code; no FK, so
      a dangling reference resolves to the default department name.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backoffice_kernel.db.base import TrackedBase

# ---------------------------------------------------------------------------
# DepartmentModel
# ---------------------------------------------------------------------------

class DepartmentModel(TrackedBase):
    """ORM model for ``Department``, keyed by its short code."""

    __tablename__ = "payroll_departments"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def to_dto(self):
        from backoffice_modules.payroll.models import Department
        return Department(id=self.id, name=self.name, description=self.description)

    @classmethod
    def from_dto(cls, dto) -> "DepartmentModel":
        return cls(id=dto.id, name=dto.name, description=dto.description)

    def __repr__(self) -> str:
        return f"<DepartmentModel {self.id}: {self.name}>"


# ---------------------------------------------------------------------------
# EmployeeModel
# ---------------------------------------------------------------------------

class EmployeeModel(TrackedBase):
    """
    ORM model for ``Employee``.

    Contract:
        ``salary_structure`` is optional; without one the payroll engines
        fall back to ``base_salary``.
    """

    __tablename__ = "payroll_employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    department_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    designation: Mapped[str | None] = mapped_column(String(200), nullable=True)
    base_salary: Mapped[Decimal | None] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    salary_structure: Mapped["SalaryStructureModel | None"] = relationship(
        back_populates="employee",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_payroll_employee_email", "email"),
        Index("idx_payroll_employee_active", "is_active"),
        Index("idx_payroll_employee_department", "department_id"),
    )

    def to_dto(self):
        from backoffice_modules.payroll.models import Employee
        return Employee(
            id=self.id,
            name=self.name,
            is_active=self.is_active,
            email=self.email,
            department_id=self.department_id,
            designation=self.designation,
            salary_structure=(
                self.salary_structure.to_dto() if self.salary_structure else None
            ),
            base_salary=self.base_salary,
        )

    @classmethod
    def from_dto(cls, dto) -> "EmployeeModel":
        model = cls(
            id=dto.id,
            name=dto.name,
            email=dto.email,
            department_id=dto.department_id,
            designation=dto.designation,
            base_salary=dto.base_salary,
            is_active=dto.is_active,
        )
        if dto.salary_structure is not None:
            model.salary_structure = SalaryStructureModel.from_dto(dto.salary_structure)
        return model

    def __repr__(self) -> str:
        return f"<EmployeeModel {self.id}: {self.name} (active={self.is_active})>"


# ---------------------------------------------------------------------------
# SalaryStructureModel
# ---------------------------------------------------------------------------

class SalaryStructureModel(TrackedBase):
    """ORM model for ``SalaryStructure``, one-to-one with its employee."""

    __tablename__ = "payroll_salary_structures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        ForeignKey("payroll_employees.id", ondelete="CASCADE"),
        nullable=False,
    )
    basic: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    hra: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    special_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    pf_deduction: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    professional_tax: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    tds: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    employee: Mapped[EmployeeModel] = relationship(back_populates="salary_structure")

    __table_args__ = (
        UniqueConstraint("employee_id", name="uq_payroll_structure_employee"),
    )

    def to_dto(self):
        from backoffice_kernel.domain.values import SalaryStructure
        return SalaryStructure(
            basic=self.basic,
            hra=self.hra,
            special_allowance=self.special_allowance,
            pf_deduction=self.pf_deduction,
            professional_tax=self.professional_tax,
            tds=self.tds,
        )

    @classmethod
    def from_dto(cls, dto) -> "SalaryStructureModel":
        return cls(
            basic=dto.basic,
            hra=dto.hra,
            special_allowance=dto.special_allowance,
            pf_deduction=dto.pf_deduction,
            professional_tax=dto.professional_tax,
            tds=dto.tds,
        )

    def apply(self, dto) -> None:
        """Overwrite the amounts in place from a ``SalaryStructure``."""
        self.basic = dto.basic
        self.hra = dto.hra
        self.special_allowance = dto.special_allowance
        self.pf_deduction = dto.pf_deduction
        self.professional_tax = dto.professional_tax
        self.tds = dto.tds


# ---------------------------------------------------------------------------
# AttendanceModel
# ---------------------------------------------------------------------------

class AttendanceModel(TrackedBase):
    """
    ORM model for ``AttendanceRecord``.

    Guarantees:
        - ``status`` stores the canonical spelling (``"Half-Day"``, ...).
    """

    __tablename__ = "payroll_attendance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(Integer, nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_payroll_attendance_employee_date"),
        Index("idx_payroll_attendance_date", "date"),
    )

    def to_dto(self):
        from backoffice_kernel.domain.values import AttendanceRecord
        return AttendanceRecord(
            id=self.id,
            employee_id=self.employee_id,
            date=self.date,
            status=self.status,
        )

    @classmethod
    def from_dto(cls, dto) -> "AttendanceModel":
        return cls(
            id=dto.id,
            employee_id=dto.employee_id,
            date=dto.date,
            status=dto.status,
        )

    def __repr__(self) -> str:
        return f"<AttendanceModel {self.employee_id} {self.date}: {self.status}>"
