# salon_backend/modules/payroll/exceptions.py

"""
Custom exceptions for payroll module.
"""

from typing import Optional, List, Any

from .schemas.error_schemas import ErrorDetail, PayrollErrorCodes


class PayrollException(Exception):
    """Base exception for payroll module"""
    def __init__(
        self,
        message: str,
        code: str = PayrollErrorCodes.INTERNAL_ERROR,
        details: Optional[List[ErrorDetail]] = None,
        status_code: int = 400
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or []
        self.status_code = status_code


class PayrollValidationError(PayrollException):
    """Validation error for payroll operations"""
    def __init__(self, message: str, field: Optional[str] = None, details: Optional[List[ErrorDetail]] = None):
        if field and not details:
            details = [ErrorDetail(field=field, message=message)]
        super().__init__(
            message=message,
            code=PayrollErrorCodes.VALIDATION_ERROR,
            details=details,
            status_code=422
        )


class InvalidPeriodError(PayrollException):
    """Month outside 1-12, a malformed year, or a missing period"""
    def __init__(self, message: str, field: Optional[str] = None):
        details = [ErrorDetail(field=field, message=message)] if field else []
        super().__init__(
            message=message,
            code=PayrollErrorCodes.INVALID_PERIOD,
            details=details,
            status_code=422
        )


class InvalidStaffError(PayrollException):
    """Unknown or inactive staff member"""
    def __init__(self, staff_id: Any, reason: str = "not found"):
        super().__init__(
            message=f"Staff member {staff_id} {reason}",
            code=PayrollErrorCodes.INVALID_STAFF,
            details=[ErrorDetail(field="staff_id", message=str(staff_id))],
            status_code=404
        )
        self.staff_id = staff_id


class DataUnavailableError(PayrollException):
    """The data store is unreachable, a query failed or timed out. Callers may retry."""
    def __init__(self, message: str, operation: Optional[str] = None):
        if operation:
            message = f"Data store {operation}: {message}"
        super().__init__(
            message=message,
            code=PayrollErrorCodes.DATA_UNAVAILABLE,
            status_code=503
        )
        self.operation = operation


class PayrollNotFoundError(PayrollException):
    """Resource not found error"""
    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} with identifier {identifier} not found",
            code=PayrollErrorCodes.RECORD_NOT_FOUND,
            status_code=404
        )


# Lifecycle errors guard financial state and are always surfaced to the caller

class PayrollLifecycleError(PayrollException):
    """Base class for rejected payroll record transitions"""
    def __init__(self, message: str, code: str, payroll_id: Any = None, status: Any = None):
        details = []
        if status is not None:
            details.append(ErrorDetail(field="status", message=getattr(status, "value", str(status))))
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=409
        )
        self.payroll_id = payroll_id
        self.status = status


class AlreadyApprovedError(PayrollLifecycleError):
    def __init__(self, payroll_id: Any, status: Any = None):
        super().__init__(
            message=f"Payroll record {payroll_id} is already approved",
            code=PayrollErrorCodes.ALREADY_APPROVED,
            payroll_id=payroll_id,
            status=status
        )


class NotApprovedError(PayrollLifecycleError):
    def __init__(self, payroll_id: Any, status: Any = None):
        super().__init__(
            message=f"Payroll record {payroll_id} must be approved before it is paid",
            code=PayrollErrorCodes.NOT_APPROVED,
            payroll_id=payroll_id,
            status=status
        )


class AlreadyPaidError(PayrollLifecycleError):
    def __init__(self, payroll_id: Any):
        super().__init__(
            message=f"Payroll record {payroll_id} is already paid",
            code=PayrollErrorCodes.ALREADY_PAID,
            payroll_id=payroll_id,
            status="paid"
        )


class ImmutableRecordError(PayrollLifecycleError):
    """Recalculation or bonus change attempted on an approved or paid period"""
    def __init__(self, staff_id: Any, period_month: int, period_year: int, status: Any = None):
        super().__init__(
            message=(
                f"Payroll for staff {staff_id} in {period_year}-{period_month:02d} "
                "has been signed off and cannot be changed"
            ),
            code=PayrollErrorCodes.IMMUTABLE_RECORD,
            status=status
        )
        self.staff_id = staff_id
        self.period_month = period_month
        self.period_year = period_year


class ConcurrencyError(PayrollException):
    """Concurrency/locking error"""
    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} {identifier} was changed by another operation, retry the request",
            code=PayrollErrorCodes.RESOURCE_LOCKED,
            status_code=409
        )
