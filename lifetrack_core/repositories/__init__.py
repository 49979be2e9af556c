# =============================================================================
# lifetrack_core/repositories/__init__.py
# Entity repositories built on SyncingRepository
# =============================================================================

from lifetrack_core.repositories.water_intake import WaterIntakeRepository
from lifetrack_core.repositories.sleep import SleepRepository
from lifetrack_core.repositories.nutrition import NutritionRepository
from lifetrack_core.repositories.supplements import SupplementRepository
from lifetrack_core.repositories.doses import DoseRepository
from lifetrack_core.repositories.barcodes import BarcodeRepository
from lifetrack_core.repositories.users import UserRepository
from lifetrack_core.repositories.medical_studies import MedicalStudyRepository

REPOSITORY_TYPES = [
    WaterIntakeRepository,
    SleepRepository,
    NutritionRepository,
    SupplementRepository,
    DoseRepository,
    BarcodeRepository,
    UserRepository,
    MedicalStudyRepository,
]

__all__ = [
    "WaterIntakeRepository",
    "SleepRepository",
    "NutritionRepository",
    "SupplementRepository",
    "DoseRepository",
    "BarcodeRepository",
    "UserRepository",
    "MedicalStudyRepository",
    "REPOSITORY_TYPES",
]
