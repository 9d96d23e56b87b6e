from enum import Enum

from sqlalchemy import Column, Integer, Numeric, Date, ForeignKey, Index
from sqlalchemy import Enum as SQLEnum

from salon_backend.core.database import Base
from salon_backend.core.mixins import TimestampMixin


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Statuses that represent a finalized visit the salon can bill for
BILLABLE_STATUSES = frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED})


class Appointment(Base, TimestampMixin):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False)
    appointment_date = Column(Date, nullable=False)
    status = Column(
        SQLEnum(AppointmentStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=AppointmentStatus.PENDING,
        nullable=False,
    )
    total_price = Column(Numeric(12, 2), nullable=True)

    __table_args__ = (
        Index("ix_appointments_staff_date", "staff_id", "appointment_date"),
    )
