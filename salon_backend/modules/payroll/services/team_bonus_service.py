# salon_backend/modules/payroll/services/team_bonus_service.py

"""
Team bonus distribution.

A team award is shared equally and stored as one ``team`` bonus per staff
member, so the calculator picks each share up through the ordinary bonus
total and net pay stays commission + tier bonus + bonuses - deductions.
"""

import logging
from typing import List, Optional

from ..enums.payroll_enums import BonusType
from ..exceptions import InvalidStaffError, PayrollValidationError
from ..repositories.base import PayrollRepository
from ..schemas.payroll_schemas import StaffBonusCreate, StaffBonusRead, TeamBonusCreate
from ..utils.money import CENT, quantize_money, split_evenly

logger = logging.getLogger(__name__)


class TeamBonusService:
    def __init__(self, repository: PayrollRepository):
        self.repository = repository

    def split_team_bonus(
        self, award: TeamBonusCreate, created_by: Optional[str] = None
    ) -> List[StaffBonusRead]:
        """
        Split ``award.total_amount`` into equal per-staff team bonuses.

        Shares are whole cents and add up to the rounded total exactly; any
        leftover cents go to the lowest staff ids. All shares are written
        together or not at all.

        Raises:
            InvalidStaffError: a listed staff member is unknown or inactive
            PayrollValidationError: nobody to share with, or less than a cent each
            ImmutableRecordError: a recipient's payroll for the period is approved or paid
        """
        staff_ids = self._recipients(award.staff_ids)
        if not staff_ids:
            raise PayrollValidationError("No active staff to share the team bonus", field="staff_ids")

        total = quantize_money(award.total_amount)
        if total < CENT * len(staff_ids):
            raise PayrollValidationError(
                f"Team bonus {total} is less than one cent per staff member",
                field="total_amount",
            )

        shares = split_evenly(total, len(staff_ids))
        bonuses = [
            StaffBonusCreate(
                staff_id=staff_id,
                bonus_type=BonusType.TEAM,
                amount=share,
                description=award.description,
                awarded_date=award.awarded_date,
                period_month=award.period_month,
                period_year=award.period_year,
                notes=award.notes,
            )
            for staff_id, share in zip(staff_ids, shares)
        ]
        created = self.repository.add_bonuses(bonuses, created_by=created_by)
        logger.info(
            f"Split team bonus {total} across {len(created)} staff "
            f"for {award.period_year}-{award.period_month:02d}"
        )
        return created

    def _recipients(self, staff_ids: Optional[List[int]]) -> List[int]:
        if staff_ids is None:
            return [staff.id for staff in self.repository.list_active_staff()]

        recipients = sorted(set(staff_ids))
        for staff_id in recipients:
            staff = self.repository.get_staff(staff_id)
            if staff is None:
                raise InvalidStaffError(staff_id)
            if not staff.is_active:
                raise InvalidStaffError(staff_id, reason="is inactive")
        return recipients
