# salon_backend/modules/payroll/routes/payroll_routes.py

"""
Payroll API endpoints.

Main router that aggregates the payroll sub-routes:
- Payroll calculation, summaries and lifecycle
- Staff bonuses
- Performance tiers and payroll settings
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..schemas.payroll_schemas import (
    ApprovePayrollRequest,
    CalculatePayrollRequest,
    LifecycleResponse,
    MarkPaidRequest,
    PayrollRecordRead,
    PeriodRequest,
    PeriodSummary,
    build_period,
)
from ..services.payroll_service import PayrollService
from .bonus_routes import router as bonus_router
from .configuration_routes import router as configuration_router
from .dependencies import get_payroll_service

router = APIRouter(prefix="/api/payroll", tags=["Payroll"])

# Include sub-routers
router.include_router(bonus_router, prefix="/bonuses", tags=["Staff Bonuses"])
router.include_router(configuration_router, prefix="/config", tags=["Payroll Configuration"])


@router.post("/calculate", response_model=PayrollRecordRead)
async def calculate_staff_payroll(
    request: CalculatePayrollRequest,
    payroll_service: PayrollService = Depends(get_payroll_service),
):
    """
    Calculate and save payroll for one staff member.

    Recalculating an open period replaces the previous figures.

    ## Request Body
    - **staff_id**: Staff member to calculate
    - **month**: Period month, 1-12
    - **year**: Period year

    ## Error Responses
    - **404**: Unknown or inactive staff member
    - **409**: The period is already approved or paid
    - **422**: Invalid period
    - **503**: Data store unavailable
    """
    period = build_period(request.month, request.year)
    return await payroll_service.calculate_staff_payroll(request.staff_id, period)


@router.post("/calculate-all", response_model=PeriodSummary)
async def calculate_all_staff_payroll(
    request: PeriodRequest,
    payroll_service: PayrollService = Depends(get_payroll_service),
):
    """
    Calculate and save payroll for every active staff member.

    Per-staff failures are reported in the summary's ``failures`` list and
    do not stop the batch.

    ## Error Responses
    - **422**: Invalid period
    - **503**: Staff or settings could not be loaded
    """
    period = build_period(request.month, request.year)
    return await payroll_service.calculate_all_staff_payroll(period)


@router.get("/summary", response_model=PeriodSummary)
def get_payroll_summary(
    month: Optional[int] = Query(None, description="Period month, 1-12"),
    year: Optional[int] = Query(None, description="Period year"),
    payroll_service: PayrollService = Depends(get_payroll_service),
):
    """
    Summarize saved payroll records for a period without recalculating.

    ## Error Responses
    - **422**: Invalid period
    - **503**: Data store unavailable
    """
    period = build_period(month, year)
    return payroll_service.get_payroll_summary(period)


@router.post("/approve", response_model=LifecycleResponse)
def approve_payroll(
    request: ApprovePayrollRequest,
    payroll_service: PayrollService = Depends(get_payroll_service),
):
    """
    Approve a calculated payroll record.

    ## Error Responses
    - **404**: Payroll record not found
    - **409**: Record already approved or paid
    """
    payroll_service.approve_payroll(request.payroll_id, request.approver_id)
    return LifecycleResponse(
        message=f"Payroll record {request.payroll_id} approved by {request.approver_id}"
    )


@router.post("/mark-paid", response_model=LifecycleResponse)
def mark_payroll_paid(
    request: MarkPaidRequest,
    payroll_service: PayrollService = Depends(get_payroll_service),
):
    """
    Mark an approved payroll record as paid.

    ## Error Responses
    - **404**: Payroll record not found
    - **409**: Record not approved yet, or already paid
    """
    payroll_service.mark_as_paid(request.payroll_id)
    return LifecycleResponse(message=f"Payroll record {request.payroll_id} marked as paid")


@router.get("/health")
async def health_check():
    """Health check endpoint for payroll module."""
    return {
        "status": "healthy",
        "module": "payroll",
        "timestamp": datetime.utcnow().isoformat(),
    }
