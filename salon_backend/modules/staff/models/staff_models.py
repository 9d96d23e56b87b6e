from sqlalchemy import Column, Integer, String, Numeric, Boolean

from salon_backend.core.database import Base
from salon_backend.core.mixins import TimestampMixin


class StaffMember(Base, TimestampMixin):
    __tablename__ = "staff_members"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    email = Column(String(255), unique=True)
    phone = Column(String(50))
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    # Fraction of service revenue, e.g. 0.10 for 10%
    base_commission_rate = Column(Numeric(5, 4), nullable=True)

