# salon_backend/modules/payroll/services/staff_bonus_service.py

"""
Manual bonus awards.

Bonuses attach to a staff member and period. Once that period's payroll
record is approved or paid its bonuses are frozen: awarding or removing
one would silently change money that was already signed off.
"""

import logging
from typing import List, Optional

from ..enums.payroll_enums import LOCKED_STATUSES
from ..exceptions import ImmutableRecordError, InvalidStaffError, PayrollNotFoundError
from ..repositories.base import PayrollRepository
from ..schemas.payroll_schemas import StaffBonusCreate, StaffBonusRead, StaffBonusUpdate

logger = logging.getLogger(__name__)


class StaffBonusService:
    def __init__(self, repository: PayrollRepository):
        self.repository = repository

    def list_bonuses(
        self,
        staff_id: Optional[int] = None,
        period_month: Optional[int] = None,
        period_year: Optional[int] = None,
    ) -> List[StaffBonusRead]:
        return self.repository.list_bonuses(
            staff_id=staff_id, period_month=period_month, period_year=period_year
        )

    def award_bonus(self, bonus: StaffBonusCreate, created_by: Optional[str] = None) -> StaffBonusRead:
        """
        Award a bonus to a staff member for a period.

        Raises:
            InvalidStaffError: unknown or inactive staff member
            ImmutableRecordError: the period's payroll is approved or paid
        """
        staff = self.repository.get_staff(bonus.staff_id)
        if staff is None:
            raise InvalidStaffError(bonus.staff_id)
        if not staff.is_active:
            raise InvalidStaffError(bonus.staff_id, reason="is inactive")

        self._ensure_period_open(bonus.staff_id, bonus.period_month, bonus.period_year)

        created = self.repository.add_bonus(bonus, created_by=created_by)
        logger.info(
            f"Awarded {created.bonus_type.value} bonus {created.amount} to staff "
            f"{created.staff_id} for {created.period_year}-{created.period_month:02d}"
        )
        return created

    def update_bonus(self, bonus_id: int, update: StaffBonusUpdate) -> StaffBonusRead:
        """
        Edit a bonus in place.

        Raises:
            PayrollNotFoundError: unknown bonus id
            ImmutableRecordError: the bonus belongs to an approved or paid period
        """
        bonus = self.repository.get_bonus(bonus_id)
        if bonus is None:
            raise PayrollNotFoundError("Staff bonus", bonus_id)

        self._ensure_period_open(bonus.staff_id, bonus.period_month, bonus.period_year)

        changes = update.model_dump(exclude_unset=True)
        if not changes:
            return bonus
        updated = self.repository.update_bonus(bonus_id, changes)
        if updated is None:
            raise PayrollNotFoundError("Staff bonus", bonus_id)
        logger.info(f"Updated bonus {bonus_id} for staff {bonus.staff_id}: {', '.join(sorted(changes))}")
        return updated

    def remove_bonus(self, bonus_id: int) -> None:
        """
        Delete a bonus.

        Raises:
            PayrollNotFoundError: unknown bonus id
            ImmutableRecordError: the bonus belongs to an approved or paid period
        """
        bonus = self.repository.get_bonus(bonus_id)
        if bonus is None:
            raise PayrollNotFoundError("Staff bonus", bonus_id)

        self._ensure_period_open(bonus.staff_id, bonus.period_month, bonus.period_year)

        if not self.repository.delete_bonus(bonus_id):
            raise PayrollNotFoundError("Staff bonus", bonus_id)
        logger.info(f"Removed bonus {bonus_id} from staff {bonus.staff_id}")

    def _ensure_period_open(self, staff_id: int, period_month: int, period_year: int) -> None:
        # Early rejection only; the repository repeats this check inside the write
        record = self.repository.get_record_for_period(staff_id, period_month, period_year)
        if record is not None and record.status in LOCKED_STATUSES:
            raise ImmutableRecordError(staff_id, period_month, period_year, status=record.status)
