# salon_backend/modules/payroll/services/revenue_aggregator.py

"""
Completed-appointment revenue aggregation.
"""

import logging
from datetime import date
from typing import Optional

from ...appointments.models.appointment_models import BILLABLE_STATUSES
from ..exceptions import PayrollValidationError
from ..repositories.base import PayrollRepository
from ..schemas.payroll_schemas import RevenueTotals
from ..utils.money import ZERO, quantize_money, to_decimal
from .store_calls import call_store

logger = logging.getLogger(__name__)


class RevenueAggregator:
    """Counts billable appointments and sums their prices for a staff member."""

    def __init__(self, repository: PayrollRepository, timeout_seconds: float = 10.0):
        self.repository = repository
        self.timeout_seconds = timeout_seconds

    async def aggregate(
        self,
        staff_id: int,
        start: date,
        end: date,
        timeout: Optional[float] = None,
    ) -> RevenueTotals:
        """
        Aggregate qualifying appointments dated within [start, end].

        Cancelled, no-show and pending appointments never qualify. An
        appointment without a recorded price still counts but adds nothing
        to revenue.

        Raises:
            DataUnavailableError: the appointment query failed or timed out
        """
        if end < start:
            raise PayrollValidationError("Period end must not be before period start", field="end")

        appointments = await call_store(
            "list appointments",
            timeout or self.timeout_seconds,
            self.repository.list_appointments,
            staff_id,
            start,
            end,
            [status.value for status in BILLABLE_STATUSES],
        )

        gross_revenue = sum((to_decimal(a.total_price) for a in appointments), ZERO)
        totals = RevenueTotals(
            appointment_count=len(appointments),
            gross_revenue=quantize_money(gross_revenue),
        )
        logger.debug(
            f"Staff {staff_id}: {totals.appointment_count} billable appointments, "
            f"revenue {totals.gross_revenue} between {start} and {end}"
        )
        return totals
