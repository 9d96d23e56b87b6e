"""Payroll services module."""

from .tier_resolver import resolve_performance_tier, find_overlapping_tiers
from .revenue_aggregator import RevenueAggregator
from .bonus_aggregator import BonusAggregator
from .payroll_calculator import PayrollCalculator
from .payroll_lifecycle_service import PayrollLifecycleService
from .batch_payroll_service import BatchPayrollService, build_period_summary
from .payroll_settings_service import PayrollSettingsService
from .staff_bonus_service import StaffBonusService
from .performance_tier_service import PerformanceTierService
from .team_bonus_service import TeamBonusService
from .payroll_service import PayrollService

__all__ = [
    'resolve_performance_tier',
    'find_overlapping_tiers',
    'RevenueAggregator',
    'BonusAggregator',
    'PayrollCalculator',
    'PayrollLifecycleService',
    'BatchPayrollService',
    'build_period_summary',
    'PayrollSettingsService',
    'StaffBonusService',
    'PerformanceTierService',
    'TeamBonusService',
    'PayrollService',
]
