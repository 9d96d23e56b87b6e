from sqlalchemy import (
    Column, Integer, String, Numeric, ForeignKey, DateTime, Date, Boolean, Text,
    Enum, UniqueConstraint, Index, CheckConstraint,
)

from salon_backend.core.database import Base
from salon_backend.core.mixins import TimestampMixin
from salon_backend.modules.payroll.enums import PayrollStatus, BonusType


class PerformanceTier(Base, TimestampMixin):
    __tablename__ = "performance_tiers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    min_appointments = Column(Integer, nullable=False)
    max_appointments = Column(Integer, nullable=True)  # NULL = unbounded
    commission_multiplier = Column(Numeric(6, 4), default=1, nullable=False)
    monthly_bonus = Column(Numeric(12, 2), default=0, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint("commission_multiplier > 0", name="ck_tier_multiplier_positive"),
        CheckConstraint("monthly_bonus >= 0", name="ck_tier_bonus_non_negative"),
        Index("ix_performance_tiers_active_min", "is_active", "min_appointments"),
    )


class StaffBonus(Base, TimestampMixin):
    __tablename__ = "staff_bonuses"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False)
    bonus_type = Column(
        Enum(BonusType, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String(255), nullable=False)
    awarded_date = Column(Date, nullable=False)
    period_month = Column(Integer, nullable=False)
    period_year = Column(Integer, nullable=False)
    created_by = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_staff_bonuses_staff_period", "staff_id", "period_year", "period_month"),
    )


class PayrollRecord(Base, TimestampMixin):
    __tablename__ = "payroll_records"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False)
    period_month = Column(Integer, nullable=False)
    period_year = Column(Integer, nullable=False)

    # Performance
    appointment_count = Column(Integer, default=0, nullable=False)
    gross_revenue = Column(Numeric(12, 2), default=0, nullable=False)
    commission_rate = Column(Numeric(5, 4), default=0, nullable=False)
    performance_tier_id = Column(Integer, ForeignKey("performance_tiers.id"), nullable=True)
    tier_multiplier = Column(Numeric(6, 4), default=1, nullable=False)

    # Earnings
    commission_amount = Column(Numeric(12, 2), default=0, nullable=False)
    tier_bonus = Column(Numeric(12, 2), default=0, nullable=False)
    bonus_total = Column(Numeric(12, 2), default=0, nullable=False)
    deductions = Column(Numeric(12, 2), default=0, nullable=False)
    net_pay = Column(Numeric(12, 2), default=0, nullable=False)

    # Lifecycle
    status = Column(
        Enum(PayrollStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=PayrollStatus.CALCULATED,
        nullable=False,
    )
    calculated_at = Column(DateTime, nullable=True)
    approved_by = Column(String(100), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "staff_id", "period_month", "period_year", name="uq_payroll_record_staff_period"
        ),
        Index("ix_payroll_records_period", "period_year", "period_month"),
        Index("ix_payroll_records_status", "status"),
    )
