# salon_backend/modules/payroll/schemas/payroll_schemas.py

"""
Pydantic schemas for the payroll engine and its API endpoints.

Provides models for:
- Payroll periods
- Staff, tier, appointment and bonus read models returned by repositories
- Calculated payroll records and period summaries
- Request bodies for the payroll routes
"""

import calendar
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ...appointments.models.appointment_models import AppointmentStatus
from ..enums.payroll_enums import BonusType, PayrollSettingKey, PayrollStatus
from ..exceptions import InvalidPeriodError
from ..utils.money import ZERO, to_decimal


# Period


class PayrollPeriod(BaseModel):
    """A calendar month payroll is computed over."""

    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1, le=12, description="Calendar month, 1-12")
    year: int = Field(..., ge=1000, le=9999, description="Four-digit year")

    @property
    def start_date(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end_date(self) -> date:
        last_day = calendar.monthrange(self.year, self.month)[1]
        return date(self.year, self.month, last_day)

    def __str__(self) -> str:
        return f"{self.year}-{self.month:02d}"


def build_period(month: Optional[int], year: Optional[int]) -> PayrollPeriod:
    """
    Build a validated payroll period.

    Raises:
        InvalidPeriodError: month or year is missing or out of range
    """
    if month is None:
        raise InvalidPeriodError("Period month is required", field="month")
    if year is None:
        raise InvalidPeriodError("Period year is required", field="year")
    try:
        return PayrollPeriod(month=month, year=year)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error.get("loc") else None
        raise InvalidPeriodError(
            f"Invalid payroll period {year}-{month}: {error['msg']}", field=field
        ) from e


# Repository read models


def _reject_explicit_nulls(model: BaseModel, fields) -> None:
    """Partial updates may omit a required column but never set it to null."""
    nulls = [name for name in fields if name in model.model_fields_set and getattr(model, name) is None]
    if nulls:
        raise ValueError(f"{', '.join(nulls)} cannot be null")


class StaffRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None
    is_active: bool = True
    base_commission_rate: Optional[Decimal] = None


class PerformanceTierRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    min_appointments: int
    max_appointments: Optional[int] = None
    commission_multiplier: Decimal
    monthly_bonus: Decimal = ZERO
    description: Optional[str] = None
    is_active: bool = True

    def contains(self, appointment_count: int) -> bool:
        if appointment_count < self.min_appointments:
            return False
        return self.max_appointments is None or appointment_count <= self.max_appointments


class PerformanceTierCreate(BaseModel):
    """Request model for creating a performance tier"""

    name: str = Field(..., min_length=1, max_length=100)
    min_appointments: int = Field(..., ge=0)
    max_appointments: Optional[int] = Field(None, ge=0)
    commission_multiplier: Decimal = Field(..., gt=0)
    monthly_bonus: Decimal = Field(ZERO, ge=0)
    description: Optional[str] = None
    is_active: bool = True

    @model_validator(mode="after")
    def validate_range(self):
        if self.max_appointments is not None and self.max_appointments < self.min_appointments:
            raise ValueError("max_appointments must be greater than or equal to min_appointments")
        return self


class PerformanceTierUpdate(BaseModel):
    """Partial update of a performance tier. The merged range is checked by the service."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    min_appointments: Optional[int] = Field(None, ge=0)
    max_appointments: Optional[int] = Field(None, ge=0)
    commission_multiplier: Optional[Decimal] = Field(None, gt=0)
    monthly_bonus: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def reject_nulls(self):
        _reject_explicit_nulls(
            self, ("name", "min_appointments", "commission_multiplier", "monthly_bonus", "is_active")
        )
        return self


class AppointmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    staff_id: int
    appointment_date: date
    status: AppointmentStatus
    total_price: Optional[Decimal] = None


class StaffBonusRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    staff_id: int
    bonus_type: BonusType
    amount: Decimal
    description: str
    awarded_date: date
    period_month: int
    period_year: int
    created_by: Optional[str] = None
    notes: Optional[str] = None


class StaffBonusCreate(BaseModel):
    """Request model for awarding a bonus"""

    staff_id: int
    bonus_type: BonusType
    amount: Decimal = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=255)
    awarded_date: Optional[date] = None
    period_month: int = Field(..., ge=1, le=12)
    period_year: int = Field(..., ge=1000, le=9999)
    notes: Optional[str] = None


class StaffBonusUpdate(BaseModel):
    """Editable bonus fields. Staff member and period are fixed once awarded."""

    bonus_type: Optional[BonusType] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    awarded_date: Optional[date] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def reject_nulls(self):
        _reject_explicit_nulls(self, ("bonus_type", "amount", "description", "awarded_date"))
        return self


class TeamBonusCreate(BaseModel):
    """
    Request model for splitting one team award across staff members.

    When ``staff_ids`` is omitted the award is shared by every active staff
    member.
    """

    total_amount: Decimal = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=255)
    period_month: int = Field(..., ge=1, le=12)
    period_year: int = Field(..., ge=1000, le=9999)
    staff_ids: Optional[List[int]] = Field(None, min_length=1)
    awarded_date: Optional[date] = None
    notes: Optional[str] = None


class BonusBreakdown(BaseModel):
    """Per-type bonus totals. Types are additive and carry no weighting."""

    individual: Decimal = ZERO
    team: Decimal = ZERO
    custom: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.individual + self.team + self.custom


# Settings


class PayrollSettingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    setting_key: str
    setting_value: Decimal
    description: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None


class PayrollSettingUpdate(BaseModel):
    setting_value: Decimal
    description: Optional[str] = None
    updated_by: Optional[str] = None


class PayrollSettingsSnapshot(BaseModel):
    """
    Immutable view of the payroll settings table.

    Loaded once per batch so every staff member in the batch is calculated
    against the same deduction policy even if an administrator edits the
    settings mid-run.
    """

    model_config = ConfigDict(frozen=True)

    values: Dict[str, Decimal] = Field(default_factory=dict)
    loaded_at: datetime = Field(default_factory=datetime.utcnow)

    def get(self, key: str, default: Decimal = ZERO) -> Decimal:
        value = self.values.get(key)
        return default if value is None else to_decimal(value)

    @property
    def monthly_deduction(self) -> Decimal:
        return self.get(PayrollSettingKey.MONTHLY_DEDUCTION.value)

    @property
    def default_commission_rate(self) -> Decimal:
        return self.get(PayrollSettingKey.DEFAULT_COMMISSION_RATE.value)


# Calculation results


class TierResolution(BaseModel):
    """Outcome of resolving a performance tier for an appointment count."""

    model_config = ConfigDict(frozen=True)

    tier_id: Optional[int] = None
    tier_name: Optional[str] = None
    multiplier: Decimal = Decimal("1.0")
    monthly_bonus: Decimal = ZERO

    @classmethod
    def default(cls) -> "TierResolution":
        return cls()

    @property
    def is_default(self) -> bool:
        return self.tier_id is None


class RevenueTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    appointment_count: int = 0
    gross_revenue: Decimal = ZERO


# Fields produced by a calculation; calculated_at only moves when one of these changes
RECORD_FIGURE_FIELDS = (
    "appointment_count",
    "gross_revenue",
    "commission_rate",
    "performance_tier_id",
    "tier_multiplier",
    "commission_amount",
    "tier_bonus",
    "bonus_total",
    "deductions",
    "net_pay",
)


class PayrollRecordData(BaseModel):
    """A computed payroll record that has not been persisted yet."""

    staff_id: int
    period_month: int
    period_year: int
    appointment_count: int = 0
    gross_revenue: Decimal = ZERO
    commission_rate: Decimal = ZERO
    performance_tier_id: Optional[int] = None
    tier_multiplier: Decimal = Decimal("1.0")
    commission_amount: Decimal = ZERO
    tier_bonus: Decimal = ZERO
    bonus_total: Decimal = ZERO
    deductions: Decimal = ZERO
    net_pay: Decimal = ZERO
    status: PayrollStatus = PayrollStatus.CALCULATED

    def same_figures(self, other: "PayrollRecordData") -> bool:
        """True when every computed amount and count matches ``other``."""
        return all(getattr(self, name) == getattr(other, name) for name in RECORD_FIGURE_FIELDS)


class PayrollRecordRead(PayrollRecordData):
    model_config = ConfigDict(from_attributes=True)

    id: int
    calculated_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None


class StaffPayrollFailure(BaseModel):
    """A staff member whose payroll could not be calculated in a batch."""

    staff_id: int
    staff_name: Optional[str] = None
    code: str
    message: str


class PeriodSummary(BaseModel):
    """Totals for one payroll period, plus any per-staff batch failures."""

    period_month: int
    period_year: int
    staff_processed: int = 0
    total_gross_revenue: Decimal = ZERO
    total_commission: Decimal = ZERO
    total_tier_bonuses: Decimal = ZERO
    total_bonuses: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_net_pay: Decimal = ZERO
    failures: List[StaffPayrollFailure] = Field(default_factory=list)
    records: List[PayrollRecordRead] = Field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.failures)


# Request / response bodies


class CalculatePayrollRequest(BaseModel):
    staff_id: int
    month: Optional[int] = None
    year: Optional[int] = None


class PeriodRequest(BaseModel):
    month: Optional[int] = None
    year: Optional[int] = None


class ApprovePayrollRequest(BaseModel):
    payroll_id: int
    approver_id: str = Field(..., min_length=1, max_length=100)


class MarkPaidRequest(BaseModel):
    payroll_id: int


class LifecycleResponse(BaseModel):
    success: bool = True
    message: str
