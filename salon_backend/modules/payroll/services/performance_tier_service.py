# salon_backend/modules/payroll/services/performance_tier_service.py

"""
Performance tier administration.
"""

import logging
from typing import List, Tuple

from ..exceptions import PayrollNotFoundError, PayrollValidationError
from ..repositories.base import PayrollRepository
from ..schemas.payroll_schemas import (
    PerformanceTierCreate,
    PerformanceTierRead,
    PerformanceTierUpdate,
)
from .tier_resolver import find_overlapping_tiers

logger = logging.getLogger(__name__)


class PerformanceTierService:
    def __init__(self, repository: PayrollRepository):
        self.repository = repository

    def list_tiers(self, active_only: bool = False) -> List[PerformanceTierRead]:
        return self.repository.list_tiers(active_only=active_only)

    def create_tier(self, tier: PerformanceTierCreate) -> PerformanceTierRead:
        """Create a tier. Overlapping active ranges are allowed but logged."""
        created = self.repository.add_tier(tier)
        upper = created.max_appointments if created.max_appointments is not None else "open"
        logger.info(
            f"Created performance tier '{created.name}' "
            f"[{created.min_appointments}, {upper}]"
        )
        self._warn_overlaps(created)
        return created

    def update_tier(self, tier_id: int, update: PerformanceTierUpdate) -> PerformanceTierRead:
        """
        Change some fields of a tier.

        Records that were already calculated keep the tier figures they were
        calculated with; the change applies from the next calculation.

        Raises:
            PayrollNotFoundError: unknown tier id
            PayrollValidationError: the resulting range has max below min
        """
        current = self.repository.get_tier(tier_id)
        if current is None:
            raise PayrollNotFoundError("Performance tier", tier_id)

        changes = update.model_dump(exclude_unset=True)
        merged = current.model_copy(update=changes)
        if merged.max_appointments is not None and merged.max_appointments < merged.min_appointments:
            raise PayrollValidationError(
                "max_appointments must be greater than or equal to min_appointments",
                field="max_appointments",
            )
        if not changes:
            return current

        updated = self.repository.update_tier(tier_id, changes)
        if updated is None:
            raise PayrollNotFoundError("Performance tier", tier_id)
        logger.info(f"Updated performance tier {tier_id}: {', '.join(sorted(changes))}")
        if updated.is_active:
            self._warn_overlaps(updated)
        return updated

    def deactivate_tier(self, tier_id: int) -> PerformanceTierRead:
        """Retire a tier. It stays referenced by past records but no longer resolves."""
        return self.update_tier(tier_id, PerformanceTierUpdate(is_active=False))

    def find_overlaps(self) -> List[Tuple[PerformanceTierRead, PerformanceTierRead]]:
        return find_overlapping_tiers(self.repository.list_tiers(active_only=True))

    def _warn_overlaps(self, tier: PerformanceTierRead) -> None:
        for a, b in self.find_overlaps():
            if tier.id in (a.id, b.id):
                logger.warning(
                    f"Performance tiers '{a.name}' and '{b.name}' overlap; "
                    "the tier with the higher minimum wins"
                )
