# salon_backend/modules/payroll/services/bonus_aggregator.py

"""
Discretionary bonus aggregation per staff member and period.
"""

from decimal import Decimal
from typing import Optional

from ..repositories.base import PayrollRepository
from ..schemas.payroll_schemas import BonusBreakdown, PayrollPeriod
from ..utils.money import ZERO, quantize_money
from .store_calls import call_store


class BonusAggregator:
    """Sums individual, team and custom bonuses awarded for a period."""

    def __init__(self, repository: PayrollRepository, timeout_seconds: float = 10.0):
        self.repository = repository
        self.timeout_seconds = timeout_seconds

    async def total_for_period(
        self, staff_id: int, period: PayrollPeriod, timeout: Optional[float] = None
    ) -> Decimal:
        """Total of all bonuses for the staff member and period; 0 when there are none."""
        bonuses = await self._load(staff_id, period, timeout)
        return quantize_money(sum((b.amount for b in bonuses), ZERO))

    async def breakdown_for_period(
        self, staff_id: int, period: PayrollPeriod, timeout: Optional[float] = None
    ) -> BonusBreakdown:
        bonuses = await self._load(staff_id, period, timeout)
        totals = {}
        for bonus in bonuses:
            key = bonus.bonus_type.value
            totals[key] = totals.get(key, ZERO) + bonus.amount
        return BonusBreakdown(**{k: quantize_money(v) for k, v in totals.items()})

    async def _load(self, staff_id: int, period: PayrollPeriod, timeout: Optional[float]):
        return await call_store(
            "list bonuses",
            timeout or self.timeout_seconds,
            self.repository.list_bonuses,
            staff_id=staff_id,
            period_month=period.month,
            period_year=period.year,
        )
