# salon_backend/modules/payroll/services/payroll_calculator.py

"""
Single staff member payroll calculation.

Combines revenue aggregation, tier resolution and bonus aggregation into
one ``PayrollRecordData`` for a period. Nothing is persisted here.
"""

import logging
from decimal import Decimal
from typing import Optional

from ..exceptions import InvalidStaffError
from ..repositories.base import PayrollRepository
from ..schemas.payroll_schemas import (
    PayrollPeriod,
    PayrollRecordData,
    PayrollSettingsSnapshot,
    StaffRead,
)
from ..utils.money import quantize_money
from .bonus_aggregator import BonusAggregator
from .payroll_settings_service import PayrollSettingsService
from .revenue_aggregator import RevenueAggregator
from .store_calls import call_store
from .tier_resolver import resolve_performance_tier

logger = logging.getLogger(__name__)


class PayrollCalculator:
    """Computes one staff member's payroll for one period."""

    def __init__(
        self,
        repository: PayrollRepository,
        revenue_aggregator: Optional[RevenueAggregator] = None,
        bonus_aggregator: Optional[BonusAggregator] = None,
        settings_service: Optional[PayrollSettingsService] = None,
        timeout_seconds: float = 10.0,
    ):
        self.repository = repository
        self.timeout_seconds = timeout_seconds
        self.revenue_aggregator = revenue_aggregator or RevenueAggregator(repository, timeout_seconds)
        self.bonus_aggregator = bonus_aggregator or BonusAggregator(repository, timeout_seconds)
        self.settings_service = settings_service or PayrollSettingsService(repository)

    async def calculate(
        self,
        staff_id: int,
        period: PayrollPeriod,
        settings: Optional[PayrollSettingsSnapshot] = None,
        timeout: Optional[float] = None,
    ) -> PayrollRecordData:
        """
        Calculate payroll for a staff member.

        commission = gross revenue x base commission rate x tier multiplier
        net pay    = commission + tier bonus + bonuses - deductions

        Net pay is not floored at zero.

        Args:
            staff_id: Staff member to calculate
            period: Payroll period
            settings: Settings snapshot; loaded for this call when omitted
            timeout: Per-query timeout override in seconds

        Returns:
            Unsaved payroll record in ``calculated`` status

        Raises:
            InvalidStaffError: unknown or inactive staff member
            DataUnavailableError: a store query failed or timed out
        """
        timeout = timeout or self.timeout_seconds

        staff = await self._load_active_staff(staff_id, timeout)
        if settings is None:
            settings = await call_store(
                "load payroll settings", timeout, self.settings_service.get_snapshot
            )

        revenue = await self.revenue_aggregator.aggregate(
            staff.id, period.start_date, period.end_date, timeout=timeout
        )

        tiers = await call_store(
            "list performance tiers", timeout, self.repository.list_active_tiers
        )
        tier = resolve_performance_tier(revenue.appointment_count, tiers)

        commission_rate = self._commission_rate(staff, settings)
        commission = quantize_money(revenue.gross_revenue * commission_rate * tier.multiplier)
        tier_bonus = quantize_money(tier.monthly_bonus)

        bonus_total = await self.bonus_aggregator.total_for_period(
            staff.id, period, timeout=timeout
        )
        deductions = quantize_money(settings.monthly_deduction)

        net_pay = quantize_money(commission + tier_bonus + bonus_total - deductions)
        if net_pay < 0:
            logger.warning(
                f"Negative net pay {net_pay} for staff {staff.id} in {period}: "
                f"deductions {deductions} exceed earnings"
            )

        logger.info(
            f"Calculated payroll for staff {staff.id} in {period}: "
            f"{revenue.appointment_count} appointments, tier "
            f"{tier.tier_name or 'default'}, net pay {net_pay}"
        )

        return PayrollRecordData(
            staff_id=staff.id,
            period_month=period.month,
            period_year=period.year,
            appointment_count=revenue.appointment_count,
            gross_revenue=revenue.gross_revenue,
            commission_rate=commission_rate,
            performance_tier_id=tier.tier_id,
            tier_multiplier=tier.multiplier,
            commission_amount=commission,
            tier_bonus=tier_bonus,
            bonus_total=bonus_total,
            deductions=deductions,
            net_pay=net_pay,
        )

    async def _load_active_staff(self, staff_id: int, timeout: float) -> StaffRead:
        staff = await call_store("load staff", timeout, self.repository.get_staff, staff_id)
        if staff is None:
            raise InvalidStaffError(staff_id)
        if not staff.is_active:
            raise InvalidStaffError(staff_id, reason="is inactive")
        return staff

    @staticmethod
    def _commission_rate(staff: StaffRead, settings: PayrollSettingsSnapshot) -> Decimal:
        if staff.base_commission_rate is not None:
            return staff.base_commission_rate
        return settings.default_commission_rate
