# =============================================================================
# lifetrack_core/repositories/supplements.py
# Supplement Repository
# =============================================================================

from __future__ import annotations
from typing import List

from lifetrack_core.domain.entities import Supplement
from lifetrack_core.domain.patches import SupplementPatch
from lifetrack_core.domain.query import Query
from lifetrack_core.offline.syncing_repository import SyncingRepository


class SupplementRepository(SyncingRepository[Supplement]):
    """Supplements with daily dose, stock and taken flag."""

    ENTITY = Supplement

    def get_supplements(self) -> List[Supplement]:
        return self.read(Query().order("name")).data or []

    def update_all_supplements_taken(self, taken: bool) -> int:
        """
        Mark every supplement as taken (or not taken).

        Returns:
            Number of supplements updated
        """
        patch = SupplementPatch(is_taken=taken)
        updated = 0
        for supplement in self.get_supplements():
            if self.update(supplement.id, patch):
                updated += 1
        self.logger.info(f"Marked {updated} supplements as {'taken' if taken else 'not taken'}")
        return updated
