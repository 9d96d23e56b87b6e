from .payroll_enums import PayrollStatus, BonusType, PayrollSettingKey

__all__ = ["PayrollStatus", "BonusType", "PayrollSettingKey"]
