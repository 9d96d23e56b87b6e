# salon_backend/modules/payroll/routes/dependencies.py

"""
FastAPI dependencies for the payroll routes.

Tests override ``get_payroll_repository`` to run the API against an
in-memory store.
"""

from fastapi import Depends

from salon_backend.core.config import get_settings
from salon_backend.core.database import SessionLocal

from ..repositories.base import PayrollRepository
from ..repositories.sqlalchemy_repository import SQLAlchemyPayrollRepository
from ..services.payroll_service import PayrollService
from ..services.payroll_settings_service import PayrollSettingsService
from ..services.performance_tier_service import PerformanceTierService
from ..services.staff_bonus_service import StaffBonusService
from ..services.team_bonus_service import TeamBonusService


def get_payroll_repository() -> PayrollRepository:
    return SQLAlchemyPayrollRepository(SessionLocal)


def get_payroll_service(
    repository: PayrollRepository = Depends(get_payroll_repository),
) -> PayrollService:
    return PayrollService(repository, settings=get_settings())


def get_bonus_service(
    repository: PayrollRepository = Depends(get_payroll_repository),
) -> StaffBonusService:
    return StaffBonusService(repository)


def get_tier_service(
    repository: PayrollRepository = Depends(get_payroll_repository),
) -> PerformanceTierService:
    return PerformanceTierService(repository)


def get_settings_service(
    repository: PayrollRepository = Depends(get_payroll_repository),
) -> PayrollSettingsService:
    return PayrollSettingsService(repository)


def get_team_bonus_service(
    repository: PayrollRepository = Depends(get_payroll_repository),
) -> TeamBonusService:
    return TeamBonusService(repository)
