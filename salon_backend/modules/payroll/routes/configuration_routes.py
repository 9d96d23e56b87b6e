# salon_backend/modules/payroll/routes/configuration_routes.py

"""
Payroll configuration endpoints: performance tiers and payroll settings.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Response

from ..schemas.payroll_schemas import (
    PayrollSettingRead,
    PayrollSettingUpdate,
    PerformanceTierCreate,
    PerformanceTierRead,
    PerformanceTierUpdate,
)
from ..services.payroll_settings_service import PayrollSettingsService
from ..services.performance_tier_service import PerformanceTierService
from .dependencies import get_settings_service, get_tier_service

router = APIRouter()


# Performance tiers


@router.get("/tiers", response_model=List[PerformanceTierRead])
def list_performance_tiers(
    active_only: bool = Query(False, description="Only return active tiers"),
    tier_service: PerformanceTierService = Depends(get_tier_service),
):
    return tier_service.list_tiers(active_only=active_only)


@router.post("/tiers", response_model=PerformanceTierRead, status_code=201)
def create_performance_tier(
    tier: PerformanceTierCreate,
    tier_service: PerformanceTierService = Depends(get_tier_service),
):
    """
    Create a performance tier.

    Overlapping ranges are accepted; when several active tiers match an
    appointment count the one with the highest minimum applies.

    ## Request Body
    See PerformanceTierCreate schema.

    ## Error Responses
    - **422**: Invalid tier data
    """
    return tier_service.create_tier(tier)


@router.patch("/tiers/{tier_id}", response_model=PerformanceTierRead)
def update_performance_tier(
    tier_id: int,
    update: PerformanceTierUpdate,
    tier_service: PerformanceTierService = Depends(get_tier_service),
):
    """
    Change some fields of a performance tier.

    Records already calculated keep their stored tier figures.

    ## Error Responses
    - **404**: Tier not found
    - **422**: Invalid tier data or a max below the min
    """
    return tier_service.update_tier(tier_id, update)


@router.delete("/tiers/{tier_id}", status_code=204)
def deactivate_performance_tier(
    tier_id: int,
    tier_service: PerformanceTierService = Depends(get_tier_service),
):
    """
    Deactivate a performance tier. Past records still reference it, so the
    row is kept.

    ## Error Responses
    - **404**: Tier not found
    """
    tier_service.deactivate_tier(tier_id)
    return Response(status_code=204)


# Payroll settings


@router.get("/settings", response_model=List[PayrollSettingRead])
def list_payroll_settings(
    settings_service: PayrollSettingsService = Depends(get_settings_service),
):
    return settings_service.list_settings()


@router.put("/settings/{setting_key}", response_model=PayrollSettingRead)
def update_payroll_setting(
    setting_key: str,
    update: PayrollSettingUpdate,
    settings_service: PayrollSettingsService = Depends(get_settings_service),
):
    """
    Create or update a payroll setting such as ``monthly_deduction``.

    ## Error Responses
    - **422**: Value out of range for the setting
    """
    return settings_service.update_setting(
        setting_key,
        update.setting_value,
        updated_by=update.updated_by,
        description=update.description,
    )
