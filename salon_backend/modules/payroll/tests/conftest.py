# salon_backend/modules/payroll/tests/conftest.py

"""
Pytest fixtures and factories for payroll module tests.

Most tests run against the in-memory repository, which shares the
conditional-write semantics of the SQL one.
"""

import pytest
from datetime import date
from decimal import Decimal

from ...appointments.models.appointment_models import AppointmentStatus
from ..enums.payroll_enums import BonusType, PayrollSettingKey
from ..repositories.memory_repository import InMemoryPayrollRepository
from ..schemas.payroll_schemas import (
    PayrollPeriod,
    PerformanceTierCreate,
    StaffBonusCreate,
)


@pytest.fixture
def repository():
    return InMemoryPayrollRepository()


@pytest.fixture
def period():
    return PayrollPeriod(month=3, year=2025)


@pytest.fixture
def standard_tiers(repository):
    """Bronze [0, 9] x1.0, Silver [10, 20] x1.2 + $50, Gold [21, open) x1.5 + $150."""
    return [
        repository.add_tier(PerformanceTierCreate(
            name="Bronze",
            min_appointments=0,
            max_appointments=9,
            commission_multiplier=Decimal("1.0"),
        )),
        repository.add_tier(PerformanceTierCreate(
            name="Silver",
            min_appointments=10,
            max_appointments=20,
            commission_multiplier=Decimal("1.2"),
            monthly_bonus=Decimal("50.00"),
        )),
        repository.add_tier(PerformanceTierCreate(
            name="Gold",
            min_appointments=21,
            max_appointments=None,
            commission_multiplier=Decimal("1.5"),
            monthly_bonus=Decimal("150.00"),
        )),
    ]


@pytest.fixture
def appointment_factory(repository, period):
    """Create ``count`` appointments for a staff member inside the period."""
    def create_appointments(
        staff_id: int,
        count: int,
        price: Decimal = Decimal("100.00"),
        status: AppointmentStatus = AppointmentStatus.COMPLETED,
    ):
        return [
            repository.add_appointment(
                staff_id,
                date(period.year, period.month, (i % 28) + 1),
                total_price=price,
                status=status,
            )
            for i in range(count)
        ]

    return create_appointments


@pytest.fixture
def bonus_factory(repository, period):
    def create_bonus(
        staff_id: int,
        amount: Decimal,
        bonus_type: BonusType = BonusType.INDIVIDUAL,
        description: str = "Top retail sales",
    ):
        return repository.add_bonus(
            StaffBonusCreate(
                staff_id=staff_id,
                bonus_type=bonus_type,
                amount=amount,
                description=description,
                awarded_date=period.end_date,
                period_month=period.month,
                period_year=period.year,
            ),
            created_by="manager-1",
        )

    return create_bonus


@pytest.fixture
def monthly_deduction(repository):
    def set_deduction(amount: Decimal):
        return repository.set_setting(
            PayrollSettingKey.MONTHLY_DEDUCTION.value, amount, updated_by="admin"
        )

    return set_deduction
