# salon_backend/modules/payroll/services/payroll_lifecycle_service.py

"""
Payroll record lifecycle.

    draft/calculated --approve--> approved --mark paid--> paid

Recalculation overwrites draft/calculated records in place and is rejected
for approved or paid ones. No transition moves a record backward. Every
write is a single conditional statement in the repository, so a concurrent
recalculation can never clobber a record that was just approved.
"""

import logging
from datetime import datetime

from ..enums.payroll_enums import LOCKED_STATUSES, OPEN_STATUSES, PayrollStatus
from ..exceptions import (
    AlreadyApprovedError,
    AlreadyPaidError,
    ConcurrencyError,
    NotApprovedError,
    PayrollNotFoundError,
    PayrollValidationError,
)
from ..repositories.base import PayrollRepository
from ..schemas.payroll_schemas import PayrollRecordData, PayrollRecordRead

logger = logging.getLogger(__name__)


class PayrollLifecycleService:
    """Persists calculated payroll and applies approve / mark-paid transitions."""

    def __init__(self, repository: PayrollRepository):
        self.repository = repository

    def save_calculated(self, record: PayrollRecordData) -> PayrollRecordRead:
        """
        Upsert a calculated record for its (staff, period).

        Raises:
            ImmutableRecordError: the period is already approved or paid
        """
        saved = self.repository.upsert_calculated_record(
            record, calculated_at=datetime.utcnow()
        )
        logger.info(
            f"Saved payroll record {saved.id} for staff {saved.staff_id} "
            f"({saved.period_year}-{saved.period_month:02d})"
        )
        return saved

    def approve(self, payroll_id: int, approver_id: str) -> PayrollRecordRead:
        """
        Approve a draft or calculated record.

        Raises:
            PayrollNotFoundError: unknown payroll id
            AlreadyApprovedError: record is approved or paid
        """
        if not approver_id:
            raise PayrollValidationError("Approver is required", field="approver_id")

        updated = self.repository.transition_record(
            payroll_id,
            OPEN_STATUSES,
            PayrollStatus.APPROVED,
            approved_by=approver_id,
            approved_at=datetime.utcnow(),
        )
        if updated is None:
            current = self._get_existing(payroll_id)
            if current.status in LOCKED_STATUSES:
                raise AlreadyApprovedError(payroll_id, status=current.status)
            raise ConcurrencyError("Payroll record", payroll_id)

        logger.info(f"Payroll record {payroll_id} approved by {approver_id}")
        return updated

    def mark_paid(self, payroll_id: int) -> PayrollRecordRead:
        """
        Mark an approved record as paid.

        Raises:
            PayrollNotFoundError: unknown payroll id
            NotApprovedError: record has not been approved yet
            AlreadyPaidError: record is already paid
        """
        updated = self.repository.transition_record(
            payroll_id,
            (PayrollStatus.APPROVED,),
            PayrollStatus.PAID,
            paid_at=datetime.utcnow(),
        )
        if updated is None:
            current = self._get_existing(payroll_id)
            if current.status == PayrollStatus.PAID:
                raise AlreadyPaidError(payroll_id)
            if current.status in OPEN_STATUSES:
                raise NotApprovedError(payroll_id, status=current.status)
            raise ConcurrencyError("Payroll record", payroll_id)

        logger.info(f"Payroll record {payroll_id} marked as paid")
        return updated

    def _get_existing(self, payroll_id: int) -> PayrollRecordRead:
        record = self.repository.get_record(payroll_id)
        if record is None:
            raise PayrollNotFoundError("Payroll record", payroll_id)
        return record
