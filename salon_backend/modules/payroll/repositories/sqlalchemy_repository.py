# salon_backend/modules/payroll/repositories/sqlalchemy_repository.py

"""
SQLAlchemy implementation of the payroll repository.

Each call opens its own session from the injected session factory, so the
batch service can run several staff calculations concurrently without
sharing a session between threads.
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from functools import wraps
from typing import Any, Collection, Dict, List, Optional, Sequence

from sqlalchemy import and_, case, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ...appointments.models.appointment_models import Appointment
from ...staff.models.staff_models import StaffMember
from ..enums.payroll_enums import OPEN_STATUSES, PayrollStatus
from ..exceptions import DataUnavailableError, ImmutableRecordError, PayrollValidationError
from ..models.payroll_configuration import PayrollSetting
from ..models.payroll_models import PayrollRecord, PerformanceTier, StaffBonus
from ..schemas.payroll_schemas import (
    RECORD_FIGURE_FIELDS,
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

logger = logging.getLogger(__name__)

PERIOD_KEY = ("staff_id", "period_month", "period_year")

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _calculated_at_expr(incoming):
    """Keep the stored calculated_at when none of the computed figures change."""
    table = PayrollRecord.__table__
    unchanged = and_(
        *(table.c[name].is_not_distinct_from(incoming[name]) for name in RECORD_FIGURE_FIELDS)
    )
    return case((unchanged, table.c.calculated_at), else_=incoming["calculated_at"])


def translate_db_errors(operation: str):
    """Re-raise SQLAlchemy failures as payroll errors at the repository boundary."""
    def decorator(func_):
        @wraps(func_)
        def wrapper(*args, **kwargs):
            try:
                return func_(*args, **kwargs)
            except IntegrityError as e:
                logger.warning(f"Integrity error during {operation}: {e.orig}")
                raise PayrollValidationError(f"{operation} violates a data constraint") from e
            except SQLAlchemyError as e:
                logger.error(f"Database error during {operation}: {str(e)}")
                raise DataUnavailableError(str(e), operation=operation) from e
        return wrapper
    return decorator


class SQLAlchemyPayrollRepository(PayrollRepository):
    """Payroll repository backed by a relational database."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self):
        db: Session = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    # Staff

    @translate_db_errors("load staff")
    def get_staff(self, staff_id: int) -> Optional[StaffRead]:
        with self._session() as db:
            staff = db.get(StaffMember, staff_id)
            return StaffRead.model_validate(staff) if staff else None

    @translate_db_errors("list active staff")
    def list_active_staff(self) -> List[StaffRead]:
        with self._session() as db:
            rows = db.scalars(
                select(StaffMember)
                .where(StaffMember.is_active.is_(True))
                .order_by(StaffMember.id)
            ).all()
            return [StaffRead.model_validate(row) for row in rows]

    # Performance tiers

    @translate_db_errors("list performance tiers")
    def list_tiers(self, active_only: bool = False) -> List[PerformanceTierRead]:
        with self._session() as db:
            query = select(PerformanceTier)
            if active_only:
                query = query.where(PerformanceTier.is_active.is_(True))
            rows = db.scalars(query.order_by(PerformanceTier.min_appointments)).all()
            return [PerformanceTierRead.model_validate(row) for row in rows]

    @translate_db_errors("create performance tier")
    def add_tier(self, tier: PerformanceTierCreate) -> PerformanceTierRead:
        with self._session() as db:
            row = PerformanceTier(**tier.model_dump())
            db.add(row)
            db.commit()
            db.refresh(row)
            return PerformanceTierRead.model_validate(row)

    @translate_db_errors("load performance tier")
    def get_tier(self, tier_id: int) -> Optional[PerformanceTierRead]:
        with self._session() as db:
            row = db.get(PerformanceTier, tier_id)
            return PerformanceTierRead.model_validate(row) if row else None

    @translate_db_errors("update performance tier")
    def update_tier(self, tier_id: int, changes: Dict[str, Any]) -> Optional[PerformanceTierRead]:
        with self._session() as db:
            row = db.get(PerformanceTier, tier_id)
            if row is None:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            db.commit()
            db.refresh(row)
            return PerformanceTierRead.model_validate(row)

    # Appointments

    @translate_db_errors("list appointments")
    def list_appointments(
        self,
        staff_id: int,
        start: date,
        end: date,
        statuses: Collection[str],
    ) -> List[AppointmentRead]:
        with self._session() as db:
            rows = db.scalars(
                select(Appointment).where(
                    and_(
                        Appointment.staff_id == staff_id,
                        Appointment.appointment_date >= start,
                        Appointment.appointment_date <= end,
                        Appointment.status.in_(list(statuses)),
                    )
                ).order_by(Appointment.appointment_date, Appointment.id)
            ).all()
            return [AppointmentRead.model_validate(row) for row in rows]

    # Bonuses

    @translate_db_errors("list bonuses")
    def list_bonuses(
        self,
        staff_id: Optional[int] = None,
        period_month: Optional[int] = None,
        period_year: Optional[int] = None,
    ) -> List[StaffBonusRead]:
        with self._session() as db:
            query = select(StaffBonus)
            if staff_id is not None:
                query = query.where(StaffBonus.staff_id == staff_id)
            if period_month is not None:
                query = query.where(StaffBonus.period_month == period_month)
            if period_year is not None:
                query = query.where(StaffBonus.period_year == period_year)
            rows = db.scalars(
                query.order_by(StaffBonus.awarded_date.desc(), StaffBonus.id.desc())
            ).all()
            return [StaffBonusRead.model_validate(row) for row in rows]

    @translate_db_errors("load bonus")
    def get_bonus(self, bonus_id: int) -> Optional[StaffBonusRead]:
        with self._session() as db:
            row = db.get(StaffBonus, bonus_id)
            return StaffBonusRead.model_validate(row) if row else None

    def add_bonus(self, bonus: StaffBonusCreate, created_by: Optional[str] = None) -> StaffBonusRead:
        return self.add_bonuses([bonus], created_by=created_by)[0]

    @translate_db_errors("award bonuses")
    def add_bonuses(
        self, bonuses: Sequence[StaffBonusCreate], created_by: Optional[str] = None
    ) -> List[StaffBonusRead]:
        with self._session() as db:
            rows = []
            for bonus in bonuses:
                self._lock_open_period(db, bonus.staff_id, bonus.period_month, bonus.period_year)
                data = bonus.model_dump()
                data["awarded_date"] = data["awarded_date"] or date.today()
                rows.append(StaffBonus(**data, created_by=created_by))
            db.add_all(rows)
            db.commit()
            for row in rows:
                db.refresh(row)
            return [StaffBonusRead.model_validate(row) for row in rows]

    @translate_db_errors("update bonus")
    def update_bonus(self, bonus_id: int, changes: Dict[str, Any]) -> Optional[StaffBonusRead]:
        with self._session() as db:
            row = db.get(StaffBonus, bonus_id)
            if row is None:
                return None
            self._lock_open_period(db, row.staff_id, row.period_month, row.period_year)
            for key, value in changes.items():
                setattr(row, key, value)
            db.commit()
            db.refresh(row)
            return StaffBonusRead.model_validate(row)

    @translate_db_errors("delete bonus")
    def delete_bonus(self, bonus_id: int) -> bool:
        with self._session() as db:
            row = db.get(StaffBonus, bonus_id)
            if row is None:
                return False
            self._lock_open_period(db, row.staff_id, row.period_month, row.period_year)
            db.delete(row)
            db.commit()
            return True

    def _lock_open_period(self, db: Session, staff_id: int, period_month: int, period_year: int) -> None:
        """
        Lock the staff member's record for the period until the caller commits,
        so the record cannot be approved between this check and the bonus write.
        """
        record = self._find_for_period(db, staff_id, period_month, period_year, for_update=True)
        if record is not None and record.status not in OPEN_STATUSES:
            db.rollback()
            raise ImmutableRecordError(staff_id, period_month, period_year, status=record.status)

    # Settings

    @translate_db_errors("load payroll settings")
    def get_settings(self) -> Dict[str, Decimal]:
        with self._session() as db:
            rows = db.scalars(select(PayrollSetting)).all()
            return {row.setting_key: Decimal(row.setting_value) for row in rows}

    @translate_db_errors("list payroll settings")
    def list_setting_rows(self) -> List[PayrollSettingRead]:
        with self._session() as db:
            rows = db.scalars(select(PayrollSetting).order_by(PayrollSetting.setting_key)).all()
            return [PayrollSettingRead.model_validate(row) for row in rows]

    @translate_db_errors("update payroll setting")
    def set_setting(
        self,
        key: str,
        value: Decimal,
        updated_by: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PayrollSettingRead:
        with self._session() as db:
            row = db.scalars(
                select(PayrollSetting).where(PayrollSetting.setting_key == key)
            ).first()
            if row is None:
                row = PayrollSetting(setting_key=key)
                db.add(row)
            row.setting_value = value
            row.updated_by = updated_by
            if description is not None:
                row.description = description
            db.commit()
            db.refresh(row)
            return PayrollSettingRead.model_validate(row)

    # Payroll records

    @translate_db_errors("save payroll record")
    def upsert_calculated_record(
        self, record: PayrollRecordData, calculated_at: datetime
    ) -> PayrollRecordRead:
        values = record.model_dump()
        values["status"] = PayrollStatus.CALCULATED
        values["calculated_at"] = calculated_at

        with self._session() as db:
            dialect = db.get_bind().dialect.name
            insert = _DIALECT_INSERTS.get(dialect)
            if insert is None:
                payroll_id = self._upsert_portable(db, values)
            else:
                table = PayrollRecord.__table__
                stmt = insert(table).values(**values)
                changes = {
                    key: stmt.excluded[key] for key in values if key not in PERIOD_KEY
                }
                changes["calculated_at"] = _calculated_at_expr(stmt.excluded)
                changes["updated_at"] = func.now()
                stmt = stmt.on_conflict_do_update(
                    index_elements=list(PERIOD_KEY),
                    set_=changes,
                    where=table.c.status.in_(OPEN_STATUSES),
                ).returning(table.c.id)
                payroll_id = db.execute(stmt).scalar_one_or_none()

            if payroll_id is None:
                db.rollback()
                existing = self._find_for_period(
                    db, record.staff_id, record.period_month, record.period_year
                )
                raise ImmutableRecordError(
                    record.staff_id,
                    record.period_month,
                    record.period_year,
                    status=existing.status if existing else None,
                )

            db.commit()
            return PayrollRecordRead.model_validate(db.get(PayrollRecord, payroll_id))

    def _upsert_portable(self, db: Session, values: dict) -> Optional[int]:
        """Conditional UPDATE, then INSERT guarded by the unique constraint."""
        key_filter = and_(*(getattr(PayrollRecord, key) == values[key] for key in PERIOD_KEY))
        changes = {key: value for key, value in values.items() if key not in PERIOD_KEY}
        changes["calculated_at"] = _calculated_at_expr(values)

        def conditional_update() -> Optional[int]:
            result = db.execute(
                update(PayrollRecord)
                .where(key_filter, PayrollRecord.status.in_(OPEN_STATUSES))
                .values(**changes, updated_at=func.now())
            )
            if result.rowcount != 1:
                return None
            return db.scalars(select(PayrollRecord.id).where(key_filter)).one()

        payroll_id = conditional_update()
        if payroll_id is not None:
            return payroll_id

        try:
            with db.begin_nested():
                row = PayrollRecord(**values)
                db.add(row)
            return row.id
        except IntegrityError:
            # Row exists: either signed off, or inserted concurrently as calculated
            return conditional_update()

    @staticmethod
    def _find_for_period(
        db: Session, staff_id: int, period_month: int, period_year: int, for_update: bool = False
    ):
        query = select(PayrollRecord).where(
            PayrollRecord.staff_id == staff_id,
            PayrollRecord.period_month == period_month,
            PayrollRecord.period_year == period_year,
        )
        if for_update:
            query = query.with_for_update()
        return db.scalars(query).first()

    @translate_db_errors("load payroll record")
    def get_record(self, payroll_id: int) -> Optional[PayrollRecordRead]:
        with self._session() as db:
            row = db.get(PayrollRecord, payroll_id)
            return PayrollRecordRead.model_validate(row) if row else None

    @translate_db_errors("load payroll record")
    def get_record_for_period(
        self, staff_id: int, period_month: int, period_year: int
    ) -> Optional[PayrollRecordRead]:
        with self._session() as db:
            row = self._find_for_period(db, staff_id, period_month, period_year)
            return PayrollRecordRead.model_validate(row) if row else None

    @translate_db_errors("list payroll records")
    def list_records(self, period_month: int, period_year: int) -> List[PayrollRecordRead]:
        with self._session() as db:
            rows = db.scalars(
                select(PayrollRecord)
                .where(
                    PayrollRecord.period_month == period_month,
                    PayrollRecord.period_year == period_year,
                )
                .order_by(PayrollRecord.net_pay.desc(), PayrollRecord.staff_id)
            ).all()
            return [PayrollRecordRead.model_validate(row) for row in rows]

    @translate_db_errors("update payroll status")
    def transition_record(
        self,
        payroll_id: int,
        from_statuses: Collection[PayrollStatus],
        to_status: PayrollStatus,
        **audit_fields,
    ) -> Optional[PayrollRecordRead]:
        with self._session() as db:
            result = db.execute(
                update(PayrollRecord)
                .where(
                    PayrollRecord.id == payroll_id,
                    PayrollRecord.status.in_(list(from_statuses)),
                )
                .values(status=to_status, updated_at=func.now(), **audit_fields)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                db.rollback()
                return None
            db.commit()
            return PayrollRecordRead.model_validate(db.get(PayrollRecord, payroll_id))
