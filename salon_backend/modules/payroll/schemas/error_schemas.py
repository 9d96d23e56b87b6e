# salon_backend/modules/payroll/schemas/error_schemas.py

"""
Error response schemas for structured error handling.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime


class ErrorDetail(BaseModel):
    """Detailed error information"""

    field: Optional[str] = None
    message: str
    code: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standardized error response"""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "AlreadyApprovedError",
                "message": "Payroll record 42 is already approved",
                "code": "PAYROLL_ALREADY_APPROVED",
                "details": [
                    {
                        "field": "status",
                        "message": "approved",
                        "code": None,
                    }
                ],
                "timestamp": "2025-01-30T12:00:00Z",
            }
        }
    )

    error: str = Field(..., description="Error type or category")
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    details: Optional[List[ErrorDetail]] = Field(
        None, description="Additional error details"
    )
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class PayrollErrorCodes:
    """Centralized error codes for payroll module"""

    # Validation errors
    VALIDATION_ERROR = "PAYROLL_VALIDATION_ERROR"
    INVALID_PERIOD = "PAYROLL_INVALID_PERIOD"
    INVALID_STAFF = "PAYROLL_INVALID_STAFF"

    # Lifecycle errors
    ALREADY_APPROVED = "PAYROLL_ALREADY_APPROVED"
    NOT_APPROVED = "PAYROLL_NOT_APPROVED"
    ALREADY_PAID = "PAYROLL_ALREADY_PAID"
    IMMUTABLE_RECORD = "PAYROLL_IMMUTABLE_RECORD"

    # Data store errors
    DATA_UNAVAILABLE = "PAYROLL_DATA_UNAVAILABLE"
    RECORD_NOT_FOUND = "PAYROLL_RECORD_NOT_FOUND"

    # Concurrency errors
    RESOURCE_LOCKED = "PAYROLL_RESOURCE_LOCKED"

    # Generic errors
    INTERNAL_ERROR = "PAYROLL_INTERNAL_ERROR"
