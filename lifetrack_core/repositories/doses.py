# =============================================================================
# lifetrack_core/repositories/doses.py
# Dose Repository
# =============================================================================

from __future__ import annotations
from typing import List, Optional, Union

from lifetrack_core.domain.entities import Dose
from lifetrack_core.domain.ids import EntityId
from lifetrack_core.domain.query import Query
from lifetrack_core.offline.syncing_repository import SyncingRepository
from lifetrack_core.services.base_service import ServiceResult


class DoseRepository(SyncingRepository[Dose]):
    """Per-day dose counts for each supplement."""

    ENTITY = Dose

    def add_dose(self, dose: Dose) -> ServiceResult:
        return self.create(dose)

    def get_doses_by_date(self, date: str) -> List[Dose]:
        query = Query().where("date", date).order("supplementId")
        return self.read(query).data or []

    def get_dose_by_id(self, dose_id: Union[str, EntityId]) -> Optional[Dose]:
        return self.get(dose_id).data

    def get_doses_taken(self, supplement_id: str, date: str) -> int:
        """Total doses of one supplement recorded for a day."""
        query = Query().where("supplementId", supplement_id).where("date", date)
        return sum(dose.doses_taken for dose in self.read(query).data or [])
