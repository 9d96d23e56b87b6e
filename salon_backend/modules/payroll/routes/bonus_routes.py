# salon_backend/modules/payroll/routes/bonus_routes.py

"""
Staff bonus endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from ..schemas.payroll_schemas import (
    BonusBreakdown,
    StaffBonusCreate,
    StaffBonusRead,
    StaffBonusUpdate,
    TeamBonusCreate,
    build_period,
)
from ..services.payroll_service import PayrollService
from ..services.staff_bonus_service import StaffBonusService
from ..services.team_bonus_service import TeamBonusService
from .dependencies import get_bonus_service, get_payroll_service, get_team_bonus_service

router = APIRouter()


@router.get("", response_model=List[StaffBonusRead])
def list_bonuses(
    staff_id: Optional[int] = Query(None, description="Filter by staff member"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Filter by period month"),
    year: Optional[int] = Query(None, description="Filter by period year"),
    bonus_service: StaffBonusService = Depends(get_bonus_service),
):
    """List bonuses, optionally filtered by staff member and period."""
    return bonus_service.list_bonuses(staff_id=staff_id, period_month=month, period_year=year)


@router.get("/breakdown", response_model=BonusBreakdown)
async def get_bonus_breakdown(
    staff_id: int = Query(..., description="Staff member"),
    month: Optional[int] = Query(None, description="Period month, 1-12"),
    year: Optional[int] = Query(None, description="Period year"),
    payroll_service: PayrollService = Depends(get_payroll_service),
):
    """
    Per-type bonus totals (individual, team, custom) for a staff member and period.

    ## Error Responses
    - **422**: Invalid period
    - **503**: Data store unavailable
    """
    period = build_period(month, year)
    return await payroll_service.bonus_aggregator.breakdown_for_period(staff_id, period)


@router.post("", response_model=StaffBonusRead, status_code=201)
def award_bonus(
    bonus: StaffBonusCreate,
    created_by: Optional[str] = Query(None, max_length=100),
    bonus_service: StaffBonusService = Depends(get_bonus_service),
):
    """
    Award a bonus for a staff member and period.

    ## Request Body
    See StaffBonusCreate schema.

    ## Error Responses
    - **404**: Unknown or inactive staff member
    - **409**: The period's payroll is already approved or paid
    - **422**: Invalid bonus data
    """
    return bonus_service.award_bonus(bonus, created_by=created_by)


@router.post("/team", response_model=List[StaffBonusRead], status_code=201)
def split_team_bonus(
    award: TeamBonusCreate,
    created_by: Optional[str] = Query(None, max_length=100),
    team_bonus_service: TeamBonusService = Depends(get_team_bonus_service),
):
    """
    Share one team award equally as per-staff ``team`` bonuses.

    Without ``staff_ids`` the award is split across every active staff member.

    ## Error Responses
    - **404**: Unknown or inactive staff member
    - **409**: A recipient's payroll for the period is already approved or paid
    - **422**: Invalid award, or no staff to share it with
    """
    return team_bonus_service.split_team_bonus(award, created_by=created_by)


@router.patch("/{bonus_id}", response_model=StaffBonusRead)
def update_bonus(
    bonus_id: int,
    update: StaffBonusUpdate,
    bonus_service: StaffBonusService = Depends(get_bonus_service),
):
    """
    Edit a bonus's type, amount, description, date or notes.

    ## Error Responses
    - **404**: Bonus not found
    - **409**: The period's payroll is already approved or paid
    - **422**: Invalid bonus data
    """
    return bonus_service.update_bonus(bonus_id, update)


@router.delete("/{bonus_id}", status_code=204)
def remove_bonus(
    bonus_id: int,
    bonus_service: StaffBonusService = Depends(get_bonus_service),
):
    """
    Delete a bonus.

    ## Error Responses
    - **404**: Bonus not found
    - **409**: The period's payroll is already approved or paid
    """
    bonus_service.remove_bonus(bonus_id)
    return Response(status_code=204)
