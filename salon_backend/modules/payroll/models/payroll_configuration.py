"""
Administrator-managed payroll settings.

A flat key/value table with an audit trail of who changed a value last.
The engine reads it as a snapshot (see ``PayrollSettingsSnapshot``).
"""

from sqlalchemy import Column, Integer, String, Numeric, Text

from salon_backend.core.database import Base
from salon_backend.core.mixins import TimestampMixin


class PayrollSetting(Base, TimestampMixin):
    __tablename__ = "payroll_settings"

    id = Column(Integer, primary_key=True, index=True)
    setting_key = Column(String(100), unique=True, nullable=False, index=True)
    setting_value = Column(Numeric(12, 4), nullable=False)
    description = Column(Text, nullable=True)
    updated_by = Column(String(100), nullable=True)
