"""
Typed Exception Hierarchy for the Back-office Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers must be able to react to a failure without parsing its message.
Every error therefore has:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, API-safe)
  3. Structured DATA attributes (not just a message string)

Note that the payroll computation path (attendance aggregation, salary
resolution, proration, deductions, record building, aggregation) raises
none of these for well-typed input: irregular data degrades to a defined
numeric default.  The exceptions below belong to the edges around it --
period parsing, the record store, configuration and the pay-run workflow.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    BackofficeKernelError (base)
    |
    +-- PeriodError
    |   +-- InvalidPayrollPeriodError
    |
    +-- RecordError
    |   +-- EmployeeNotFoundError
    |
    +-- ConfigurationError
    |
    +-- PayRunError
        +-- PayRunTransitionError
        +-- PayRunGuardError
        +-- PayRunDriftError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Period          | INVALID_PAYROLL_PERIOD      | Month outside 1..12, bad "YYYY-MM"
----------------|-----------------------------|-----------------------------------------
Record          | EMPLOYEE_NOT_FOUND          | Store lookup by id missed
----------------|-----------------------------|-----------------------------------------
Config          | PAYROLL_CONFIG_INVALID      | YAML/config value failed validation
----------------|-----------------------------|-----------------------------------------
Pay run         | PAY_RUN_INVALID_TRANSITION  | Action not allowed from current state
                | PAY_RUN_GUARD_FAILED        | Transition guard not satisfied
                | PAY_RUN_SUMMARY_DRIFT       | Inputs changed between preview/confirm

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        run = service.confirm_pay_run(run)
    except PayRunDriftError as e:
        # Re-preview and show the operator the new totals
        return {"error": e.code, "expected": e.expected, "actual": e.actual}
"""


class BackofficeKernelError(Exception):
    """
    Base exception for all back-office kernel errors.

    All subclasses must have a `code` class attribute for
    machine-readable error identification.
    """

    code: str = "BACKOFFICE_KERNEL_ERROR"


# Period-related exceptions


class PeriodError(BackofficeKernelError):
    """Base exception for payroll period errors."""

    code: str = "PERIOD_ERROR"


class InvalidPayrollPeriodError(PeriodError):
    """A payroll period could not be constructed from the given value."""

    code: str = "INVALID_PAYROLL_PERIOD"

    def __init__(self, value: str, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid payroll period {value!r}: {reason}")


# Record store exceptions


class RecordError(BackofficeKernelError):
    """Base exception for record store lookups."""

    code: str = "RECORD_ERROR"


class EmployeeNotFoundError(RecordError):
    """Employee with given ID was not found."""

    code: str = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee not found: {employee_id}")


# Configuration exceptions


class ConfigurationError(BackofficeKernelError):
    """A configuration source contained an invalid value."""

    code: str = "PAYROLL_CONFIG_INVALID"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid payroll configuration in {source}: {reason}")


# Pay-run workflow exceptions


class PayRunError(BackofficeKernelError):
    """Base exception for pay-run workflow errors."""

    code: str = "PAY_RUN_ERROR"


class PayRunTransitionError(PayRunError):
    """The requested action is not a valid transition from the current state."""

    code: str = "PAY_RUN_INVALID_TRANSITION"

    def __init__(self, pay_run_id: str, current_state: str, action: str):
        self.pay_run_id = pay_run_id
        self.current_state = current_state
        self.action = action
        super().__init__(
            f"Pay run {pay_run_id}: action '{action}' is not allowed "
            f"from state '{current_state}'"
        )


class PayRunGuardError(PayRunError):
    """A transition guard rejected the requested action."""

    code: str = "PAY_RUN_GUARD_FAILED"

    def __init__(self, pay_run_id: str, guard_name: str, reason: str):
        self.pay_run_id = pay_run_id
        self.guard_name = guard_name
        self.reason = reason
        super().__init__(
            f"Pay run {pay_run_id}: guard '{guard_name}' failed: {reason}"
        )


class PayRunDriftError(PayRunError):
    """The recomputed summary no longer matches the previewed one."""

    code: str = "PAY_RUN_SUMMARY_DRIFT"

    def __init__(self, pay_run_id: str, expected: str, actual: str):
        self.pay_run_id = pay_run_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Pay run {pay_run_id}: summary fingerprint changed "
            f"(previewed {expected}, recomputed {actual})"
        )
