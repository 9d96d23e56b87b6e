# salon_backend/modules/payroll/tests/test_batch_payroll_service.py

"""
Tests for batch payroll processing.
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

from ..enums.payroll_enums import PayrollStatus
from ..repositories.memory_repository import InMemoryPayrollRepository
from ..schemas.error_schemas import PayrollErrorCodes
from ..schemas.payroll_schemas import PayrollRecordData
from ..services.batch_payroll_service import BatchPayrollService, build_period_summary


class FailingAppointmentsRepository(InMemoryPayrollRepository):
    """Appointment lookups fail for selected staff members."""

    def __init__(self, failing_staff_ids, error=None):
        super().__init__()
        self.failing_staff_ids = set(failing_staff_ids)
        self.error = error or ConnectionError("appointments database unreachable")

    def list_appointments(self, staff_id, start, end, statuses):
        if staff_id in self.failing_staff_ids:
            raise self.error
        return super().list_appointments(staff_id, start, end, statuses)


def seed_staff(repository, count=5):
    staff = []
    for i in range(1, count + 1):
        member = repository.add_staff(
            f"Stylist {i}", base_commission_rate=Decimal("0.10"), staff_id=i
        )
        for day in range(1, i + 1):
            repository.add_appointment(member.id, date(2025, 3, day), Decimal("100.00"))
        staff.append(member)
    return staff


class TestBatchPayrollService:
    """Test whole-period processing."""

    @pytest.mark.asyncio
    async def test_processes_every_active_staff_member(self, repository, period):
        seed_staff(repository)
        repository.add_staff("Former stylist", is_active=False, staff_id=99)

        summary = await BatchPayrollService(repository).process_period(period)

        assert summary.staff_processed == 5
        assert summary.failures == []
        assert {r.staff_id for r in summary.records} == {1, 2, 3, 4, 5}
        assert repository.get_record_for_period(99, 3, 2025) is None
        assert all(r.status == PayrollStatus.CALCULATED for r in summary.records)

    @pytest.mark.asyncio
    async def test_one_failure_does_not_block_others(self, period):
        repository = FailingAppointmentsRepository({3})
        seed_staff(repository)

        summary = await BatchPayrollService(repository).process_period(period)

        assert summary.staff_processed == 4
        assert summary.failed_count == 1
        assert summary.failures[0].staff_id == 3
        assert summary.failures[0].code == PayrollErrorCodes.DATA_UNAVAILABLE
        assert repository.get_record_for_period(3, 3, 2025) is None
        assert len(repository.list_records(3, 2025)) == 4

    @pytest.mark.asyncio
    async def test_unexpected_error_reported_as_internal(self, period):
        repository = FailingAppointmentsRepository({2}, error=RuntimeError("boom"))
        seed_staff(repository, count=3)

        summary = await BatchPayrollService(repository).process_period(period)

        assert summary.staff_processed == 2
        assert summary.failures[0].code == PayrollErrorCodes.INTERNAL_ERROR
        assert summary.failures[0].message == "boom"

    @pytest.mark.asyncio
    async def test_locked_record_reported_and_untouched(self, repository, period):
        seed_staff(repository, count=2)
        service = BatchPayrollService(repository)
        first = await service.process_period(period)
        locked = next(r for r in first.records if r.staff_id == 1)
        service.lifecycle.approve(locked.id, "manager-1")

        summary = await service.process_period(period)

        assert summary.staff_processed == 1
        assert summary.failures[0].staff_id == 1
        assert summary.failures[0].code == PayrollErrorCodes.IMMUTABLE_RECORD
        assert repository.get_record(locked.id).status == PayrollStatus.APPROVED

    @pytest.mark.asyncio
    async def test_settings_snapshot_loaded_once(self, repository, period):
        seed_staff(repository)
        service = BatchPayrollService(repository, max_concurrency=2)

        with patch.object(
            service.settings_service,
            "get_snapshot",
            wraps=service.settings_service.get_snapshot,
        ) as get_snapshot:
            await service.process_period(period)

        assert get_snapshot.call_count == 1

    @pytest.mark.asyncio
    async def test_no_active_staff(self, repository, period):
        summary = await BatchPayrollService(repository).process_period(period)

        assert summary.staff_processed == 0
        assert summary.total_net_pay == Decimal("0")

    @pytest.mark.asyncio
    async def test_totals_match_records(self, repository, period):
        seed_staff(repository)

        summary = await BatchPayrollService(repository).process_period(period)

        assert summary.total_gross_revenue == Decimal("1500.00")
        assert summary.total_commission == Decimal("150.00")
        assert summary.total_net_pay == sum(r.net_pay for r in summary.records)


class TestBuildPeriodSummary:
    def test_orders_by_net_pay_descending(self, repository, period):
        seed_staff(repository, count=3)
        records = []
        for staff_id, net in ((1, "50.00"), (2, "300.00"), (3, "120.00")):
            records.append(repository.upsert_calculated_record(
                PayrollRecordData(
                    staff_id=staff_id, period_month=3, period_year=2025, net_pay=Decimal(net)
                ),
                calculated_at=datetime.utcnow(),
            ))

        summary = build_period_summary(period, records)

        assert [r.staff_id for r in summary.records] == [2, 3, 1]
        assert summary.total_net_pay == Decimal("470.00")
