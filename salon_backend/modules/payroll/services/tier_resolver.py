# salon_backend/modules/payroll/services/tier_resolver.py

"""
Performance tier resolution.

Maps a monthly appointment count to a commission multiplier and a flat
monthly bonus. Pure functions only: callers load the tiers.
"""

from itertools import combinations
from typing import Iterable, List, Tuple

from ..exceptions import PayrollValidationError
from ..schemas.payroll_schemas import PerformanceTierRead, TierResolution


def resolve_performance_tier(
    appointment_count: int, tiers: Iterable[PerformanceTierRead]
) -> TierResolution:
    """
    Resolve the tier for an appointment count.

    Only active tiers are considered. When several ranges contain the count
    the tier with the greatest ``min_appointments`` wins; equal minimums fall
    back to the lowest id so the result never depends on input order. A count
    outside every range (including gaps between tiers) gets the default
    resolution: multiplier 1.0, no monthly bonus.

    Args:
        appointment_count: Qualifying appointments in the period
        tiers: Candidate performance tiers

    Returns:
        TierResolution for the matching tier or the default
    """
    if appointment_count < 0:
        raise PayrollValidationError(
            "Appointment count cannot be negative", field="appointment_count"
        )

    matching = [t for t in tiers if t.is_active and t.contains(appointment_count)]
    if not matching:
        return TierResolution.default()

    tier = min(matching, key=lambda t: (-t.min_appointments, t.id))
    return TierResolution(
        tier_id=tier.id,
        tier_name=tier.name,
        multiplier=tier.commission_multiplier,
        monthly_bonus=tier.monthly_bonus,
    )


def _ranges_overlap(a: PerformanceTierRead, b: PerformanceTierRead) -> bool:
    a_max = a.max_appointments if a.max_appointments is not None else float("inf")
    b_max = b.max_appointments if b.max_appointments is not None else float("inf")
    return a.min_appointments <= b_max and b.min_appointments <= a_max


def find_overlapping_tiers(
    tiers: Iterable[PerformanceTierRead],
) -> List[Tuple[PerformanceTierRead, PerformanceTierRead]]:
    """Return every pair of active tiers whose appointment ranges overlap."""
    active = sorted((t for t in tiers if t.is_active), key=lambda t: (t.min_appointments, t.id))
    return [(a, b) for a, b in combinations(active, 2) if _ranges_overlap(a, b)]
