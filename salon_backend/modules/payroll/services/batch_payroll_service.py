# salon_backend/modules/payroll/services/batch_payroll_service.py

"""
Batch payroll processing service.

Calculates payroll for every active staff member in a period, persisting
each result as soon as its own calculation finishes. One staff member's
failure is recorded in the summary and never blocks the rest.
"""

import asyncio
import logging
import time
from typing import Iterable, List, Optional, Tuple

from ..exceptions import PayrollException
from ..repositories.base import PayrollRepository
from ..schemas.error_schemas import PayrollErrorCodes
from ..schemas.payroll_schemas import (
    PayrollPeriod,
    PayrollRecordRead,
    PayrollSettingsSnapshot,
    PeriodSummary,
    StaffPayrollFailure,
    StaffRead,
)
from ..utils.money import ZERO, quantize_money
from .payroll_calculator import PayrollCalculator
from .payroll_lifecycle_service import PayrollLifecycleService
from .payroll_settings_service import PayrollSettingsService
from .store_calls import call_store

logger = logging.getLogger(__name__)

StaffResult = Tuple[Optional[PayrollRecordRead], Optional[StaffPayrollFailure]]


def build_period_summary(
    period: PayrollPeriod,
    records: Iterable[PayrollRecordRead],
    failures: Optional[List[StaffPayrollFailure]] = None,
) -> PeriodSummary:
    """Aggregate payroll records into period totals."""
    records = sorted(records, key=lambda r: (-r.net_pay, r.staff_id))
    return PeriodSummary(
        period_month=period.month,
        period_year=period.year,
        staff_processed=len(records),
        total_gross_revenue=quantize_money(sum((r.gross_revenue for r in records), ZERO)),
        total_commission=quantize_money(sum((r.commission_amount for r in records), ZERO)),
        total_tier_bonuses=quantize_money(sum((r.tier_bonus for r in records), ZERO)),
        total_bonuses=quantize_money(sum((r.bonus_total for r in records), ZERO)),
        total_deductions=quantize_money(sum((r.deductions for r in records), ZERO)),
        total_net_pay=quantize_money(sum((r.net_pay for r in records), ZERO)),
        failures=sorted(failures or [], key=lambda f: f.staff_id),
        records=records,
    )


class BatchPayrollService:
    """Service for batch payroll processing."""

    def __init__(
        self,
        repository: PayrollRepository,
        calculator: Optional[PayrollCalculator] = None,
        lifecycle: Optional[PayrollLifecycleService] = None,
        settings_service: Optional[PayrollSettingsService] = None,
        max_concurrency: int = 5,
        timeout_seconds: float = 10.0,
    ):
        """Initialize batch payroll service.

        Args:
            repository: Payroll data store
            calculator: Single staff calculator
            lifecycle: Record persistence and transitions
            settings_service: Source of the settings snapshot
            max_concurrency: Staff members calculated at the same time
            timeout_seconds: Timeout for each store query
        """
        self.repository = repository
        self.settings_service = settings_service or PayrollSettingsService(repository)
        self.calculator = calculator or PayrollCalculator(
            repository, settings_service=self.settings_service, timeout_seconds=timeout_seconds
        )
        self.lifecycle = lifecycle or PayrollLifecycleService(repository)
        self.max_concurrency = max(1, max_concurrency)
        self.timeout_seconds = timeout_seconds

    async def process_period(self, period: PayrollPeriod) -> PeriodSummary:
        """Process payroll for all active staff in a period.

        The settings snapshot is loaded once so every staff member is
        calculated against the same deduction policy.

        Args:
            period: Payroll period

        Returns:
            Period summary with saved records and per-staff failures

        Raises:
            DataUnavailableError: staff or settings could not be loaded at all
        """
        started = time.time()
        snapshot = await call_store(
            "load payroll settings", self.timeout_seconds, self.settings_service.get_snapshot
        )
        staff_members = await call_store(
            "list active staff", self.timeout_seconds, self.repository.list_active_staff
        )
        logger.info(f"Starting payroll batch for {period}: {len(staff_members)} active staff")

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(staff: StaffRead) -> StaffResult:
            async with semaphore:
                return await self._process_staff(staff, period, snapshot)

        results = await asyncio.gather(*[bounded(staff) for staff in staff_members])

        records = [record for record, _ in results if record is not None]
        failures = [failure for _, failure in results if failure is not None]

        summary = build_period_summary(period, records, failures)
        logger.info(
            f"Finished payroll batch for {period} in {time.time() - started:.2f}s: "
            f"{summary.staff_processed} saved, {summary.failed_count} failed"
        )
        return summary

    async def _process_staff(
        self,
        staff: StaffRead,
        period: PayrollPeriod,
        snapshot: PayrollSettingsSnapshot,
    ) -> StaffResult:
        """Calculate and save one staff member; failures are returned, not raised."""
        try:
            record = await self.calculator.calculate(staff.id, period, settings=snapshot)
            saved = await asyncio.to_thread(self.lifecycle.save_calculated, record)
            return saved, None

        except PayrollException as e:
            logger.error(f"Error processing payroll for staff {staff.id}: {e.message}")
            return None, StaffPayrollFailure(
                staff_id=staff.id, staff_name=staff.name, code=e.code, message=e.message
            )
        except Exception as e:
            logger.exception(f"Unexpected error processing payroll for staff {staff.id}")
            return None, StaffPayrollFailure(
                staff_id=staff.id,
                staff_name=staff.name,
                code=PayrollErrorCodes.INTERNAL_ERROR,
                message=str(e),
            )
