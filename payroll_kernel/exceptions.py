"""
Typed Exception Hierarchy for the Payroll Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Payroll errors must be handled precisely. A caller that has to parse
``str(exc)`` to tell "check-out before check-in" from "employee has no salary"
will break the first time a message is reworded.

Every exception here:
  1. Has its own class (catch by type, not message)
  2. Has a class-level CODE attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (not just a message string)

Example:
    try:
        record = compute_payroll(employee, attendance, start, end)
    except MissingSalaryError as e:
        api_response(code=e.code, employee=e.employee_id)
    except ValidationError as e:
        api_response(code=e.code, detail=str(e))

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PayrollKernelError (base)
    |
    +-- ValidationError
    |   +-- NegativeDurationError
    |   +-- InvalidBreakError
    |   +-- InvalidTimeFormatError
    |   +-- InvalidDateFormatError
    |   +-- AttendanceOutsidePeriodError
    |   +-- AttendanceEmployeeMismatchError
    |   +-- DuplicateAttendanceError
    |   +-- InvalidPeriodRangeError
    |   +-- NegativeAmountError
    |   +-- InvalidInstallmentsError
    |   +-- MissingRecipientsError
    |   +-- UnknownVisitTypeError
    |   +-- InvalidRecordIdPrefixError
    |
    +-- MissingDataError
    |   +-- MissingSalaryError
    |   +-- EmployeeNotFoundError
    |   +-- PayrollRecordNotFoundError
    |
    +-- PayrollStateError
    |   +-- InvalidPayrollTransitionError
    |   +-- PayrollRecordImmutableError
    |
    +-- AuthorizationError
    |
    +-- ConfigurationError

    ComputationWarning (UserWarning, non-fatal)
    +-- ZeroAttendanceWarning

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                          | When Raised
-------------|-------------------------------|------------------------------------
Validation   | NEGATIVE_DURATION             | Check-out before check-in
             | INVALID_BREAK                 | Break end before break start
             | INVALID_TIME_FORMAT           | Time string is not HH:MM[:SS]
             | INVALID_DATE_FORMAT           | Date string is not YYYY-MM-DD
             | ATTENDANCE_OUTSIDE_PERIOD     | Record date outside pay period
             | ATTENDANCE_EMPLOYEE_MISMATCH  | Record belongs to another employee
             | DUPLICATE_ATTENDANCE          | Two records for one employee/date
             | INVALID_PERIOD_RANGE          | Period start after period end
             | NEGATIVE_AMOUNT               | Salary or adjustment below zero
             | INVALID_INSTALLMENTS          | Bad installment count / type
             | MISSING_RECIPIENTS            | Adjustment with no employees
             | UNKNOWN_VISIT_TYPE            | Visit type not in rate table
             | INVALID_RECORD_ID_PREFIX      | Unsupported record id prefix
-------------|-------------------------------|------------------------------------
Missing data | MISSING_SALARY                | Employee has no salary on file
             | EMPLOYEE_NOT_FOUND            | Employee id not in directory
             | PAYROLL_RECORD_NOT_FOUND      | No payroll record for the key
-------------|-------------------------------|------------------------------------
State        | INVALID_PAYROLL_TRANSITION    | Transition not allowed from state
             | PAYROLL_RECORD_IMMUTABLE      | Regenerating a processed/paid row
-------------|-------------------------------|------------------------------------
Auth         | UNAUTHORIZED                  | Principal lacks the required role
Config       | CONFIGURATION_ERROR           | Invalid payroll configuration
-------------|-------------------------------|------------------------------------
Warning      | ZERO_ATTENDANCE               | Period with no attendance records

===============================================================================
"""

from datetime import date


class PayrollKernelError(Exception):
    """
    Base exception for all payroll kernel errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Validation errors


class ValidationError(PayrollKernelError):
    """Malformed input to a computation. Never silently corrected."""

    code: str = "VALIDATION_ERROR"


class NegativeDurationError(ValidationError):
    """Check-out time is before check-in time."""

    code: str = "NEGATIVE_DURATION"

    def __init__(self, employee_id: str, work_date: date, check_in: str, check_out: str):
        self.employee_id = employee_id
        self.work_date = work_date
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(
            f"Check-out {check_out} is before check-in {check_in} "
            f"for employee {employee_id} on {work_date}"
        )


class InvalidBreakError(ValidationError):
    """Break end is before break start."""

    code: str = "INVALID_BREAK"

    def __init__(self, employee_id: str, work_date: date, break_start: str, break_end: str):
        self.employee_id = employee_id
        self.work_date = work_date
        self.break_start = break_start
        self.break_end = break_end
        super().__init__(
            f"Break end {break_end} is before break start {break_start} "
            f"for employee {employee_id} on {work_date}"
        )


class InvalidTimeFormatError(ValidationError):
    """Time string is not in HH:MM or HH:MM:SS format."""

    code: str = "INVALID_TIME_FORMAT"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Time must be in HH:MM format, got {value!r}")


class InvalidDateFormatError(ValidationError):
    """Date string is not in YYYY-MM-DD format."""

    code: str = "INVALID_DATE_FORMAT"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Date must be in YYYY-MM-DD format, got {value!r}")


class AttendanceOutsidePeriodError(ValidationError):
    """Attendance record date falls outside the declared pay period."""

    code: str = "ATTENDANCE_OUTSIDE_PERIOD"

    def __init__(self, employee_id: str, work_date: date, period_start: date, period_end: date):
        self.employee_id = employee_id
        self.work_date = work_date
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(
            f"Attendance for {employee_id} on {work_date} is outside "
            f"pay period {period_start}..{period_end}"
        )


class AttendanceEmployeeMismatchError(ValidationError):
    """Attendance record belongs to a different employee."""

    code: str = "ATTENDANCE_EMPLOYEE_MISMATCH"

    def __init__(self, expected_employee_id: str, actual_employee_id: str, work_date: date):
        self.expected_employee_id = expected_employee_id
        self.actual_employee_id = actual_employee_id
        self.work_date = work_date
        super().__init__(
            f"Attendance on {work_date} belongs to {actual_employee_id}, "
            f"not {expected_employee_id}"
        )


class DuplicateAttendanceError(ValidationError):
    """More than one attendance record for the same employee and date."""

    code: str = "DUPLICATE_ATTENDANCE"

    def __init__(self, employee_id: str, work_date: date):
        self.employee_id = employee_id
        self.work_date = work_date
        super().__init__(
            f"Attendance record already exists for {employee_id} on {work_date}"
        )


class InvalidPeriodRangeError(ValidationError):
    """Pay period start is after its end."""

    code: str = "INVALID_PERIOD_RANGE"

    def __init__(self, period_start: date, period_end: date):
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(f"Period start {period_start} is after period end {period_end}")


class NegativeAmountError(ValidationError):
    """A monetary amount that must be non-negative is negative."""

    code: str = "NEGATIVE_AMOUNT"

    def __init__(self, field_name: str, amount: str):
        self.field_name = field_name
        self.amount = amount
        super().__init__(f"{field_name} cannot be negative, got {amount}")


class InvalidInstallmentsError(ValidationError):
    """Installment count is not a positive integer or not on an Advance."""

    code: str = "INVALID_INSTALLMENTS"

    def __init__(self, adjustment_id: str, installments: int, reason: str):
        self.adjustment_id = adjustment_id
        self.installments = installments
        self.reason = reason
        super().__init__(
            f"Invalid installments {installments} on adjustment {adjustment_id}: {reason}"
        )


class MissingRecipientsError(ValidationError):
    """Adjustment lists no recipient employees."""

    code: str = "MISSING_RECIPIENTS"

    def __init__(self, adjustment_id: str):
        self.adjustment_id = adjustment_id
        super().__init__(f"Adjustment {adjustment_id} has no recipient employees")


class UnknownVisitTypeError(ValidationError):
    """Visit type is not in the active visit-type rate table."""

    code: str = "UNKNOWN_VISIT_TYPE"

    def __init__(self, visit_type: str, table_version: str):
        self.visit_type = visit_type
        self.table_version = table_version
        super().__init__(
            f"Unknown visit type {visit_type!r} (rate table {table_version})"
        )


class InvalidRecordIdPrefixError(ValidationError):
    """Record id prefix is not one of the supported module prefixes."""

    code: str = "INVALID_RECORD_ID_PREFIX"

    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(f"Unsupported record id prefix: {prefix!r}")


# Missing reference data


class MissingDataError(PayrollKernelError):
    """Required reference data is absent. Fatal for the affected computation."""

    code: str = "MISSING_DATA"


class MissingSalaryError(MissingDataError):
    """Employee has no basic salary on file."""

    code: str = "MISSING_SALARY"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} has no basic salary on file")


class EmployeeNotFoundError(MissingDataError):
    """Employee id is not known to the employee directory."""

    code: str = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"Employee not found: {employee_id}")


class PayrollRecordNotFoundError(MissingDataError):
    """No payroll record exists for the employee and period."""

    code: str = "PAYROLL_RECORD_NOT_FOUND"

    def __init__(self, employee_id: str, period_start: date, period_end: date):
        self.employee_id = employee_id
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(
            f"No payroll record for {employee_id} in {period_start}..{period_end}"
        )


# Payroll record lifecycle


class PayrollStateError(PayrollKernelError):
    """Base exception for payroll record lifecycle errors."""

    code: str = "PAYROLL_STATE_ERROR"


class InvalidPayrollTransitionError(PayrollStateError):
    """Requested action is not a valid transition from the current state."""

    code: str = "INVALID_PAYROLL_TRANSITION"

    def __init__(self, current_state: str, action: str):
        self.current_state = current_state
        self.action = action
        super().__init__(
            f"Action {action!r} is not allowed from payroll state {current_state!r}"
        )


class PayrollRecordImmutableError(PayrollStateError):
    """Payroll record is processed or paid and cannot be regenerated."""

    code: str = "PAYROLL_RECORD_IMMUTABLE"

    def __init__(self, employee_id: str, payment_status: str):
        self.employee_id = employee_id
        self.payment_status = payment_status
        super().__init__(
            f"Payroll record for {employee_id} is {payment_status} and cannot be "
            f"regenerated without an explicit reversal"
        )


# Authorization and configuration


class AuthorizationError(PayrollKernelError):
    """Principal lacks the role required for the action."""

    code: str = "UNAUTHORIZED"

    def __init__(self, actor_id: str, role: str, action: str):
        self.actor_id = actor_id
        self.role = role
        self.action = action
        super().__init__(f"Principal {actor_id} with role {role} may not {action}")


class ConfigurationError(PayrollKernelError):
    """Payroll configuration is invalid or incomplete."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(message if source is None else f"{source}: {message}")


# Non-fatal computation warnings


class ComputationWarning(UserWarning):
    """Non-fatal condition; the computation still produces a valid result."""

    code: str = "COMPUTATION_WARNING"


class ZeroAttendanceWarning(ComputationWarning):
    """Pay period has no attendance records (an all-absent period)."""

    code: str = "ZERO_ATTENDANCE"
