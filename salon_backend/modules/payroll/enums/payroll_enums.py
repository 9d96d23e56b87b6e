from enum import Enum


class PayrollStatus(str, Enum):
    DRAFT = "draft"
    CALCULATED = "calculated"
    APPROVED = "approved"
    PAID = "paid"


# Records in these states may still be recalculated or approved
OPEN_STATUSES = (PayrollStatus.DRAFT, PayrollStatus.CALCULATED)

# Records in these states are signed off and must never be rewritten
LOCKED_STATUSES = (PayrollStatus.APPROVED, PayrollStatus.PAID)


class BonusType(str, Enum):
    INDIVIDUAL = "individual"
    TEAM = "team"
    CUSTOM = "custom"


class PayrollSettingKey(str, Enum):
    """Keys of the administrator-managed ``payroll_settings`` table."""
    MONTHLY_DEDUCTION = "monthly_deduction"
    DEFAULT_COMMISSION_RATE = "default_commission_rate"
