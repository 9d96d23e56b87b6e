# salon_backend/modules/payroll/services/payroll_settings_service.py

"""
Payroll settings access.

Settings are an administrator-managed key/value table. The engine never
reads individual keys ad hoc; it takes a ``PayrollSettingsSnapshot`` so a
whole batch runs against one consistent deduction policy.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from ..enums.payroll_enums import PayrollSettingKey
from ..exceptions import PayrollValidationError
from ..repositories.base import PayrollRepository
from ..schemas.payroll_schemas import PayrollSettingRead, PayrollSettingsSnapshot

logger = logging.getLogger(__name__)


class PayrollSettingsService:
    """Reads and updates the payroll settings table."""

    def __init__(self, repository: PayrollRepository):
        self.repository = repository

    def get_snapshot(self) -> PayrollSettingsSnapshot:
        """Load every setting once into an immutable snapshot."""
        return PayrollSettingsSnapshot(values=self.repository.get_settings())

    def list_settings(self) -> List[PayrollSettingRead]:
        return self.repository.list_setting_rows()

    def update_setting(
        self,
        key: str,
        value: Decimal,
        updated_by: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PayrollSettingRead:
        """
        Create or update a setting, recording who changed it.

        Raises:
            PayrollValidationError: the value is out of range for a known key
        """
        key = key.strip()
        if not key:
            raise PayrollValidationError("Setting key is required", field="setting_key")

        if key == PayrollSettingKey.DEFAULT_COMMISSION_RATE.value and not (
            Decimal("0") <= value <= Decimal("1")
        ):
            raise PayrollValidationError(
                "Default commission rate must be a fraction between 0 and 1",
                field="setting_value",
            )
        if key == PayrollSettingKey.MONTHLY_DEDUCTION.value and value < 0:
            raise PayrollValidationError(
                "Monthly deduction cannot be negative", field="setting_value"
            )

        setting = self.repository.set_setting(
            key, value, updated_by=updated_by, description=description
        )
        logger.info(f"Payroll setting '{key}' set to {value} by {updated_by or 'unknown'}")
        return setting
