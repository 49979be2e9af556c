# =============================================================================
# lifetrack_core/repositories/medical_studies.py
# Medical Study Repository
# =============================================================================

from __future__ import annotations
from typing import List, Optional, Union

from lifetrack_core.domain.entities import MedicalStudy
from lifetrack_core.domain.ids import EntityId
from lifetrack_core.domain.query import Query
from lifetrack_core.offline.syncing_repository import SyncingRepository
from lifetrack_core.services.base_service import ServiceResult


class MedicalStudyRepository(SyncingRepository[MedicalStudy]):
    """Curated study links shown in the study finder."""

    ENTITY = MedicalStudy

    def get_all_studies(self) -> List[MedicalStudy]:
        return self.read(Query().order("title")).data or []

    def add_study(self, study: MedicalStudy) -> ServiceResult:
        return self.create(study)

    def get_study_by_id(self, study_id: Union[str, EntityId]) -> Optional[MedicalStudy]:
        return self.get(study_id).data
