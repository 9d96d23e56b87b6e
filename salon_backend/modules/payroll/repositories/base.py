# salon_backend/modules/payroll/repositories/base.py

"""
Data store contract for the payroll engine.

The engine never talks to a database session directly; it receives a
``PayrollRepository`` so calculations can run against SQL or an
in-memory store alike. Every method may raise ``DataUnavailableError``.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Collection, Dict, List, Optional, Sequence

from ..enums.payroll_enums import PayrollStatus
from ..schemas.payroll_schemas import (
    AppointmentRead,
    PayrollRecordData,
    PayrollRecordRead,
    PayrollSettingRead,
    PerformanceTierCreate,
    PerformanceTierRead,
    StaffBonusCreate,
    StaffBonusRead,
    StaffRead,
)


class PayrollRepository(ABC):
    """Read access to staff, tiers, appointments, bonuses and settings; write access to payroll records."""

    # Staff

    @abstractmethod
    def get_staff(self, staff_id: int) -> Optional[StaffRead]:
        ...

    @abstractmethod
    def list_active_staff(self) -> List[StaffRead]:
        ...

    # Performance tiers

    @abstractmethod
    def list_tiers(self, active_only: bool = False) -> List[PerformanceTierRead]:
        ...

    def list_active_tiers(self) -> List[PerformanceTierRead]:
        return self.list_tiers(active_only=True)

    @abstractmethod
    def add_tier(self, tier: PerformanceTierCreate) -> PerformanceTierRead:
        ...

    @abstractmethod
    def get_tier(self, tier_id: int) -> Optional[PerformanceTierRead]:
        ...

    @abstractmethod
    def update_tier(self, tier_id: int, changes: Dict[str, Any]) -> Optional[PerformanceTierRead]:
        """Apply ``changes`` to a tier. Returns ``None`` for an unknown id."""

    # Appointments

    @abstractmethod
    def list_appointments(
        self,
        staff_id: int,
        start: date,
        end: date,
        statuses: Collection[str],
    ) -> List[AppointmentRead]:
        """Appointments for a staff member dated within [start, end] with one of ``statuses``."""

    # Bonuses

    @abstractmethod
    def list_bonuses(
        self,
        staff_id: Optional[int] = None,
        period_month: Optional[int] = None,
        period_year: Optional[int] = None,
    ) -> List[StaffBonusRead]:
        ...

    @abstractmethod
    def get_bonus(self, bonus_id: int) -> Optional[StaffBonusRead]:
        ...

    # Bonus writes check the staff member's record for the period and write in
    # the same transaction; they raise ImmutableRecordError if it is approved or paid.

    @abstractmethod
    def add_bonus(self, bonus: StaffBonusCreate, created_by: Optional[str] = None) -> StaffBonusRead:
        ...

    @abstractmethod
    def add_bonuses(
        self, bonuses: Sequence[StaffBonusCreate], created_by: Optional[str] = None
    ) -> List[StaffBonusRead]:
        """Insert all of ``bonuses`` or none of them."""

    @abstractmethod
    def update_bonus(self, bonus_id: int, changes: Dict[str, Any]) -> Optional[StaffBonusRead]:
        """Apply ``changes`` to a bonus. Returns ``None`` for an unknown id."""

    @abstractmethod
    def delete_bonus(self, bonus_id: int) -> bool:
        ...

    # Settings

    @abstractmethod
    def get_settings(self) -> Dict[str, Decimal]:
        ...

    @abstractmethod
    def list_setting_rows(self) -> List[PayrollSettingRead]:
        ...

    @abstractmethod
    def set_setting(
        self,
        key: str,
        value: Decimal,
        updated_by: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PayrollSettingRead:
        ...

    # Payroll records

    @abstractmethod
    def upsert_calculated_record(
        self, record: PayrollRecordData, calculated_at: datetime
    ) -> PayrollRecordRead:
        """
        Insert or overwrite the record for (staff_id, period) in one atomic
        conditional write.

        Overwrites only a draft/calculated row. Raises ``ImmutableRecordError``
        without touching the row when it is approved or paid. ``calculated_at``
        is kept from the existing row when none of the computed figures changed.
        """

    @abstractmethod
    def get_record(self, payroll_id: int) -> Optional[PayrollRecordRead]:
        ...

    @abstractmethod
    def get_record_for_period(
        self, staff_id: int, period_month: int, period_year: int
    ) -> Optional[PayrollRecordRead]:
        ...

    @abstractmethod
    def list_records(self, period_month: int, period_year: int) -> List[PayrollRecordRead]:
        ...

    @abstractmethod
    def transition_record(
        self,
        payroll_id: int,
        from_statuses: Collection[PayrollStatus],
        to_status: PayrollStatus,
        **audit_fields,
    ) -> Optional[PayrollRecordRead]:
        """
        Move a record to ``to_status`` only if it is currently in one of
        ``from_statuses``, as a single conditional write.

        Returns the updated record, or ``None`` when the precondition did not
        hold (including an unknown id).
        """
