"""
Payroll Configuration Schema.

Defines the structure and sensible defaults for payroll settings.
Actual values are loaded from YAML at runtime (see ``backoffice_config``).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Self

from backoffice_engines.attendance import DEFAULT_PRESENCE_WEIGHTS
from backoffice_engines.deductions import DEFAULT_PF_RATE
from backoffice_kernel.domain.values import AttendanceStatus, to_decimal
from backoffice_kernel.logging_config import get_logger

logger = get_logger("modules.payroll.config")

DEFAULT_DEPARTMENT_NAME = "General"


@dataclass
class PayrollConfig:
    """
    Configuration schema for the payroll module.

    Field defaults reproduce the reference payroll rules:

        config = PayrollConfig(
            default_department_name="Unassigned",
            **load_from_yaml("payroll.yaml"),
        )
    """

    # Statutory rates
    pf_rate: Decimal = DEFAULT_PF_RATE

    # Attendance weights
    present_weight: Decimal = DEFAULT_PRESENCE_WEIGHTS[AttendanceStatus.PRESENT.value]
    half_day_weight: Decimal = DEFAULT_PRESENCE_WEIGHTS[AttendanceStatus.HALF_DAY.value]

    # Rounding of earned components and PF, in currency units
    rounding_quantum: Decimal = Decimal("1")

    # Reporting
    default_department_name: str = DEFAULT_DEPARTMENT_NAME
    currency_code: str = "INR"

    # Diagnostics
    warn_on_excess_attendance: bool = True

    extra_presence_weights: dict[str, Decimal] = field(default_factory=dict)

    def __post_init__(self):
        self.pf_rate = to_decimal(self.pf_rate)
        self.present_weight = to_decimal(self.present_weight)
        self.half_day_weight = to_decimal(self.half_day_weight)
        self.rounding_quantum = to_decimal(self.rounding_quantum)
        self.extra_presence_weights = {
            AttendanceStatus.normalize(status): to_decimal(weight)
            for status, weight in self.extra_presence_weights.items()
        }

        if self.pf_rate < 0:
            raise ValueError("pf_rate cannot be negative")
        if self.pf_rate > 1:
            raise ValueError("pf_rate cannot exceed 1 (100%)")

        if self.present_weight < 0 or self.half_day_weight < 0:
            raise ValueError("attendance weights cannot be negative")
        if self.present_weight > 1 or self.half_day_weight > 1:
            raise ValueError("attendance weights cannot exceed one day")
        for status, weight in self.extra_presence_weights.items():
            if weight < 0 or weight > 1:
                raise ValueError(
                    f"weight for status '{status}' must be between 0 and 1"
                )

        if self.rounding_quantum <= 0:
            raise ValueError("rounding_quantum must be positive")

        if not self.default_department_name.strip():
            raise ValueError("default_department_name cannot be blank")

        if len(self.currency_code) != 3 or not self.currency_code.isalpha():
            raise ValueError(
                f"currency_code must be a three-letter code, got '{self.currency_code}'"
            )
        self.currency_code = self.currency_code.upper()

        if not isinstance(self.warn_on_excess_attendance, bool):
            raise TypeError("warn_on_excess_attendance must be a bool")

        logger.info(
            "payroll_config_initialized",
            extra={
                "pf_rate": str(self.pf_rate),
                "present_weight": str(self.present_weight),
                "half_day_weight": str(self.half_day_weight),
                "rounding_quantum": str(self.rounding_quantum),
                "default_department_name": self.default_department_name,
                "currency_code": self.currency_code,
                "extra_status_count": len(self.extra_presence_weights),
            },
        )

    @property
    def presence_weights(self) -> dict[str, Decimal]:
        """Status -> days contributed, for the attendance aggregator."""
        weights = {
            AttendanceStatus.PRESENT.value: self.present_weight,
            AttendanceStatus.HALF_DAY.value: self.half_day_weight,
        }
        weights.update(self.extra_presence_weights)
        return weights

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the reference defaults."""
        logger.info("payroll_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from dictionary (e.g., loaded from a YAML file)."""
        logger.info(
            "payroll_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
