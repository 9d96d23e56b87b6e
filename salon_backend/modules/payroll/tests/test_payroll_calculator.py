# salon_backend/modules/payroll/tests/test_payroll_calculator.py

"""
Tests for single staff payroll calculation.
"""

import pytest
from decimal import Decimal
from unittest.mock import patch

from ..enums.payroll_enums import PayrollSettingKey, PayrollStatus
from ..exceptions import InvalidStaffError
from ..schemas.payroll_schemas import PayrollSettingsSnapshot
from ..services.payroll_calculator import PayrollCalculator


class TestPayrollCalculator:
    """Test commission, tier and bonus calculation."""

    @pytest.fixture
    def calculator(self, repository):
        return PayrollCalculator(repository, timeout_seconds=2.0)

    @pytest.mark.asyncio
    async def test_no_appointments(self, calculator, repository, period, bonus_factory, monthly_deduction):
        staff = repository.add_staff("Ana", base_commission_rate=Decimal("0.10"))
        bonus_factory(staff.id, Decimal("25.00"))
        monthly_deduction(Decimal("40.00"))

        record = await calculator.calculate(staff.id, period)

        assert record.appointment_count == 0
        assert record.gross_revenue == Decimal("0.00")
        assert record.commission_amount == Decimal("0.00")
        assert record.performance_tier_id is None
        assert record.tier_multiplier == Decimal("1.0")
        assert record.net_pay == Decimal("-15.00")

    @pytest.mark.asyncio
    async def test_tiered_commission_with_bonus(
        self, calculator, repository, period, standard_tiers, appointment_factory, bonus_factory
    ):
        staff = repository.add_staff("Ana", base_commission_rate=Decimal("0.10"))
        appointment_factory(staff.id, 12, price=Decimal("100.00"))
        bonus_factory(staff.id, Decimal("30.00"))

        record = await calculator.calculate(staff.id, period)

        assert record.appointment_count == 12
        assert record.gross_revenue == Decimal("1200.00")
        assert record.performance_tier_id == standard_tiers[1].id
        assert record.tier_multiplier == Decimal("1.2")
        assert record.commission_amount == Decimal("144.00")
        assert record.tier_bonus == Decimal("50.00")
        assert record.bonus_total == Decimal("30.00")
        assert record.deductions == Decimal("0.00")
        assert record.net_pay == Decimal("224.00")
        assert record.status == PayrollStatus.CALCULATED

    @pytest.mark.asyncio
    async def test_net_pay_identity(
        self, calculator, repository, period, standard_tiers, appointment_factory,
        bonus_factory, monthly_deduction
    ):
        staff = repository.add_staff("Ana", base_commission_rate=Decimal("0.20"))
        appointment_factory(staff.id, 25, price=Decimal("73.40"))
        bonus_factory(staff.id, Decimal("12.34"))
        monthly_deduction(Decimal("9.99"))

        record = await calculator.calculate(staff.id, period)

        assert record.net_pay == (
            record.commission_amount + record.tier_bonus + record.bonus_total - record.deductions
        )
        assert record.performance_tier_id == standard_tiers[2].id

    @pytest.mark.asyncio
    async def test_falls_back_to_default_commission_rate(
        self, calculator, repository, period, appointment_factory
    ):
        staff = repository.add_staff("Ana")
        repository.set_setting(PayrollSettingKey.DEFAULT_COMMISSION_RATE.value, Decimal("0.15"))
        appointment_factory(staff.id, 4, price=Decimal("100.00"))

        record = await calculator.calculate(staff.id, period)

        assert record.commission_rate == Decimal("0.15")
        assert record.commission_amount == Decimal("60.00")

    @pytest.mark.asyncio
    async def test_commission_rounds_half_up(self, calculator, repository, period, appointment_factory):
        staff = repository.add_staff("Ana", base_commission_rate=Decimal("0.125"))
        appointment_factory(staff.id, 3, price=Decimal("33.33"))

        record = await calculator.calculate(staff.id, period)

        # 99.99 x 0.125 = 12.49875
        assert record.commission_amount == Decimal("12.50")

    @pytest.mark.asyncio
    async def test_unknown_staff(self, calculator, period):
        with pytest.raises(InvalidStaffError) as exc_info:
            await calculator.calculate(999, period)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_inactive_staff(self, calculator, repository, period):
        staff = repository.add_staff("Ana", is_active=False)

        with pytest.raises(InvalidStaffError):
            await calculator.calculate(staff.id, period)

    @pytest.mark.asyncio
    async def test_recalculation_is_deterministic(
        self, calculator, repository, period, standard_tiers, appointment_factory, bonus_factory
    ):
        staff = repository.add_staff("Ana", base_commission_rate=Decimal("0.10"))
        appointment_factory(staff.id, 15, price=Decimal("55.55"))
        bonus_factory(staff.id, Decimal("10.00"))

        first = await calculator.calculate(staff.id, period)
        second = await calculator.calculate(staff.id, period)

        assert first == second

    @pytest.mark.asyncio
    async def test_injected_snapshot_is_used(
        self, calculator, repository, period, monthly_deduction
    ):
        staff = repository.add_staff("Ana", base_commission_rate=Decimal("0.10"))
        monthly_deduction(Decimal("100.00"))
        snapshot = PayrollSettingsSnapshot(
            values={PayrollSettingKey.MONTHLY_DEDUCTION.value: Decimal("5.00")}
        )

        with patch.object(calculator.settings_service, "get_snapshot") as get_snapshot:
            record = await calculator.calculate(staff.id, period, settings=snapshot)

        get_snapshot.assert_not_called()
        assert record.deductions == Decimal("5.00")
        assert record.net_pay == Decimal("-5.00")
