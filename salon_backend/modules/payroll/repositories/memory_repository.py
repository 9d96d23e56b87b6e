# salon_backend/modules/payroll/repositories/memory_repository.py

"""
In-memory payroll repository.

Used by the test-suite and for local what-if calculations. A single lock
guards every mutation so conditional writes stay atomic under concurrent
batch processing, matching the guarantees of the SQL implementation.
"""

import itertools
import threading
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Collection, Dict, List, Optional, Sequence

from ...appointments.models.appointment_models import AppointmentStatus
from ..enums.payroll_enums import OPEN_STATUSES, PayrollStatus
from ..exceptions import ImmutableRecordError
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
from .base import PayrollRepository


class InMemoryPayrollRepository(PayrollRepository):
    """Dictionary-backed repository with the same semantics as the SQL one."""

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self.staff: Dict[int, StaffRead] = {}
        self.tiers: Dict[int, PerformanceTierRead] = {}
        self.appointments: Dict[int, AppointmentRead] = {}
        self.bonuses: Dict[int, StaffBonusRead] = {}
        self.settings: Dict[str, PayrollSettingRead] = {}
        self.records: Dict[int, PayrollRecordRead] = {}

    def _next_id(self) -> int:
        return next(self._ids)

    # Seeding helpers

    def add_staff(
        self,
        name: str,
        base_commission_rate: Optional[Decimal] = None,
        is_active: bool = True,
        staff_id: Optional[int] = None,
        email: Optional[str] = None,
    ) -> StaffRead:
        with self._lock:
            staff = StaffRead(
                id=staff_id if staff_id is not None else self._next_id(),
                name=name,
                email=email,
                is_active=is_active,
                base_commission_rate=base_commission_rate,
            )
            self.staff[staff.id] = staff
            return staff

    def add_appointment(
        self,
        staff_id: int,
        appointment_date: date,
        total_price: Optional[Decimal] = None,
        status: AppointmentStatus = AppointmentStatus.COMPLETED,
    ) -> AppointmentRead:
        with self._lock:
            appointment = AppointmentRead(
                id=self._next_id(),
                staff_id=staff_id,
                appointment_date=appointment_date,
                status=status,
                total_price=total_price,
            )
            self.appointments[appointment.id] = appointment
            return appointment

    # Staff

    def get_staff(self, staff_id: int) -> Optional[StaffRead]:
        return self.staff.get(staff_id)

    def list_active_staff(self) -> List[StaffRead]:
        return sorted(
            (s for s in self.staff.values() if s.is_active), key=lambda s: s.id
        )

    # Performance tiers

    def list_tiers(self, active_only: bool = False) -> List[PerformanceTierRead]:
        tiers = [t for t in self.tiers.values() if t.is_active or not active_only]
        return sorted(tiers, key=lambda t: (t.min_appointments, t.id))

    def add_tier(self, tier: PerformanceTierCreate) -> PerformanceTierRead:
        with self._lock:
            created = PerformanceTierRead(id=self._next_id(), **tier.model_dump())
            self.tiers[created.id] = created
            return created

    def get_tier(self, tier_id: int) -> Optional[PerformanceTierRead]:
        return self.tiers.get(tier_id)

    def update_tier(self, tier_id: int, changes: Dict[str, Any]) -> Optional[PerformanceTierRead]:
        with self._lock:
            tier = self.tiers.get(tier_id)
            if tier is None:
                return None
            updated = tier.model_copy(update=changes)
            self.tiers[tier_id] = updated
            return updated

    # Appointments

    def list_appointments(
        self,
        staff_id: int,
        start: date,
        end: date,
        statuses: Collection[str],
    ) -> List[AppointmentRead]:
        wanted = {getattr(s, "value", s) for s in statuses}
        return [
            a for a in sorted(self.appointments.values(), key=lambda a: (a.appointment_date, a.id))
            if a.staff_id == staff_id
            and start <= a.appointment_date <= end
            and a.status.value in wanted
        ]

    # Bonuses

    def list_bonuses(
        self,
        staff_id: Optional[int] = None,
        period_month: Optional[int] = None,
        period_year: Optional[int] = None,
    ) -> List[StaffBonusRead]:
        bonuses = [
            b for b in self.bonuses.values()
            if (staff_id is None or b.staff_id == staff_id)
            and (period_month is None or b.period_month == period_month)
            and (period_year is None or b.period_year == period_year)
        ]
        return sorted(bonuses, key=lambda b: (b.awarded_date, b.id), reverse=True)

    def get_bonus(self, bonus_id: int) -> Optional[StaffBonusRead]:
        return self.bonuses.get(bonus_id)

    def add_bonus(self, bonus: StaffBonusCreate, created_by: Optional[str] = None) -> StaffBonusRead:
        return self.add_bonuses([bonus], created_by=created_by)[0]

    def add_bonuses(
        self, bonuses: Sequence[StaffBonusCreate], created_by: Optional[str] = None
    ) -> List[StaffBonusRead]:
        with self._lock:
            for bonus in bonuses:
                self._ensure_period_open(bonus.staff_id, bonus.period_month, bonus.period_year)
            created = []
            for bonus in bonuses:
                data = bonus.model_dump()
                data["awarded_date"] = data["awarded_date"] or date.today()
                row = StaffBonusRead(id=self._next_id(), created_by=created_by, **data)
                self.bonuses[row.id] = row
                created.append(row)
            return created

    def update_bonus(self, bonus_id: int, changes: Dict[str, Any]) -> Optional[StaffBonusRead]:
        with self._lock:
            bonus = self.bonuses.get(bonus_id)
            if bonus is None:
                return None
            self._ensure_period_open(bonus.staff_id, bonus.period_month, bonus.period_year)
            updated = bonus.model_copy(update=changes)
            self.bonuses[bonus_id] = updated
            return updated

    def delete_bonus(self, bonus_id: int) -> bool:
        with self._lock:
            bonus = self.bonuses.get(bonus_id)
            if bonus is None:
                return False
            self._ensure_period_open(bonus.staff_id, bonus.period_month, bonus.period_year)
            del self.bonuses[bonus_id]
            return True

    def _ensure_period_open(self, staff_id: int, period_month: int, period_year: int) -> None:
        # Caller holds the lock
        record = self._find_for_period(staff_id, period_month, period_year)
        if record is not None and record.status not in OPEN_STATUSES:
            raise ImmutableRecordError(staff_id, period_month, period_year, status=record.status)

    # Settings

    def get_settings(self) -> Dict[str, Decimal]:
        return {key: row.setting_value for key, row in self.settings.items()}

    def list_setting_rows(self) -> List[PayrollSettingRead]:
        return [self.settings[key] for key in sorted(self.settings)]

    def set_setting(
        self,
        key: str,
        value: Decimal,
        updated_by: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PayrollSettingRead:
        with self._lock:
            previous = self.settings.get(key)
            row = PayrollSettingRead(
                setting_key=key,
                setting_value=value,
                description=description if description is not None else (
                    previous.description if previous else None
                ),
                updated_by=updated_by,
                updated_at=datetime.utcnow(),
            )
            self.settings[key] = row
            return row

    # Payroll records

    def upsert_calculated_record(
        self, record: PayrollRecordData, calculated_at: datetime
    ) -> PayrollRecordRead:
        with self._lock:
            existing = self._find_for_period(
                record.staff_id, record.period_month, record.period_year
            )
            if existing is not None and existing.status not in OPEN_STATUSES:
                raise ImmutableRecordError(
                    record.staff_id,
                    record.period_month,
                    record.period_year,
                    status=existing.status,
                )
            if existing is not None and existing.same_figures(record):
                calculated_at = existing.calculated_at or calculated_at
            saved = PayrollRecordRead(
                **record.model_dump(exclude={"status"}),
                status=PayrollStatus.CALCULATED,
                id=existing.id if existing else self._next_id(),
                calculated_at=calculated_at,
            )
            self.records[saved.id] = saved
            return saved

    def _find_for_period(
        self, staff_id: int, period_month: int, period_year: int
    ) -> Optional[PayrollRecordRead]:
        for record in self.records.values():
            if (
                record.staff_id == staff_id
                and record.period_month == period_month
                and record.period_year == period_year
            ):
                return record
        return None

    def get_record(self, payroll_id: int) -> Optional[PayrollRecordRead]:
        return self.records.get(payroll_id)

    def get_record_for_period(
        self, staff_id: int, period_month: int, period_year: int
    ) -> Optional[PayrollRecordRead]:
        return self._find_for_period(staff_id, period_month, period_year)

    def list_records(self, period_month: int, period_year: int) -> List[PayrollRecordRead]:
        records = [
            r for r in self.records.values()
            if r.period_month == period_month and r.period_year == period_year
        ]
        return sorted(records, key=lambda r: (-r.net_pay, r.staff_id))

    def transition_record(
        self,
        payroll_id: int,
        from_statuses: Collection[PayrollStatus],
        to_status: PayrollStatus,
        **audit_fields,
    ) -> Optional[PayrollRecordRead]:
        with self._lock:
            record = self.records.get(payroll_id)
            if record is None or record.status not in from_statuses:
                return None
            updated = record.model_copy(update={"status": to_status, **audit_fields})
            self.records[payroll_id] = updated
            return updated
