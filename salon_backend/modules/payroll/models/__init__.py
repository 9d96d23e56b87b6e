from .payroll_models import PerformanceTier, StaffBonus, PayrollRecord
from .payroll_configuration import PayrollSetting

__all__ = [
    "PerformanceTier",
    "StaffBonus",
    "PayrollRecord",
    "PayrollSetting",
]
