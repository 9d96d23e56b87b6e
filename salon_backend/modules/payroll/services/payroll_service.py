# salon_backend/modules/payroll/services/payroll_service.py

"""
Payroll engine entry point.

Wires the calculator, batch processor and lifecycle manager around one
repository and exposes the operations the API layer calls.
"""

import asyncio
import logging
from typing import Optional

from salon_backend.core.config import Settings, get_settings

from ..repositories.base import PayrollRepository
from ..schemas.payroll_schemas import PayrollPeriod, PayrollRecordRead, PeriodSummary
from .batch_payroll_service import BatchPayrollService, build_period_summary
from .bonus_aggregator import BonusAggregator
from .payroll_calculator import PayrollCalculator
from .payroll_lifecycle_service import PayrollLifecycleService
from .payroll_settings_service import PayrollSettingsService
from .revenue_aggregator import RevenueAggregator

logger = logging.getLogger(__name__)


class PayrollService:
    """Calculate, summarize, approve and pay staff payroll."""

    def __init__(self, repository: PayrollRepository, settings: Optional[Settings] = None):
        config = settings or get_settings()
        timeout = config.payroll_query_timeout_seconds

        self.repository = repository
        self.settings_service = PayrollSettingsService(repository)
        self.revenue_aggregator = RevenueAggregator(repository, timeout)
        self.bonus_aggregator = BonusAggregator(repository, timeout)
        self.calculator = PayrollCalculator(
            repository,
            revenue_aggregator=self.revenue_aggregator,
            bonus_aggregator=self.bonus_aggregator,
            settings_service=self.settings_service,
            timeout_seconds=timeout,
        )
        self.lifecycle = PayrollLifecycleService(repository)
        self.batch_service = BatchPayrollService(
            repository,
            calculator=self.calculator,
            lifecycle=self.lifecycle,
            settings_service=self.settings_service,
            max_concurrency=config.payroll_batch_concurrency,
            timeout_seconds=timeout,
        )

    async def calculate_staff_payroll(
        self, staff_id: int, period: PayrollPeriod
    ) -> PayrollRecordRead:
        """
        Calculate one staff member's payroll and upsert the record.

        Raises:
            InvalidStaffError: unknown or inactive staff member
            DataUnavailableError: a store query failed or timed out
            ImmutableRecordError: the period is already approved or paid
        """
        record = await self.calculator.calculate(staff_id, period)
        return await asyncio.to_thread(self.lifecycle.save_calculated, record)

    async def calculate_all_staff_payroll(self, period: PayrollPeriod) -> PeriodSummary:
        """Calculate and save payroll for every active staff member."""
        return await self.batch_service.process_period(period)

    def get_payroll_summary(self, period: PayrollPeriod) -> PeriodSummary:
        """Summarize already-saved records for a period. Read-only."""
        records = self.repository.list_records(period.month, period.year)
        return build_period_summary(period, records)

    def approve_payroll(self, payroll_id: int, approver_id: str) -> None:
        self.lifecycle.approve(payroll_id, approver_id)

    def mark_as_paid(self, payroll_id: int) -> None:
        self.lifecycle.mark_paid(payroll_id)
