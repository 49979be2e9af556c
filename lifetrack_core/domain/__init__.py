# =============================================================================
# lifetrack_core/domain/__init__.py
# Entity records, tagged ids, field patches and queries
# =============================================================================

from lifetrack_core.domain.ids import (
    LOCAL_ID_PREFIX,
    EntityId,
    LocalId,
    RemoteId,
    parse_id,
    coerce_id,
)

from lifetrack_core.domain.entities import (
    Entity,
    ContainerType,
    MealType,
    WaterIntake,
    SleepEntry,
    NutritionEntry,
    Supplement,
    Dose,
    SupplementBarcode,
    User,
    MedicalStudy,
    ENTITY_TYPES,
)

from lifetrack_core.domain.patches import (
    FieldPatch,
    WaterIntakePatch,
    SleepEntryPatch,
    NutritionEntryPatch,
    SupplementPatch,
    DosePatch,
    SupplementBarcodePatch,
    UserPatch,
    MedicalStudyPatch,
    patch_type_for,
    patch_from_mapping,
)

from lifetrack_core.domain.query import (
    Query,
    FieldRange,
    Ordering,
)

__all__ = [
    # Ids
    "LOCAL_ID_PREFIX",
    "EntityId",
    "LocalId",
    "RemoteId",
    "parse_id",
    "coerce_id",
    # Entities
    "Entity",
    "ContainerType",
    "MealType",
    "WaterIntake",
    "SleepEntry",
    "NutritionEntry",
    "Supplement",
    "Dose",
    "SupplementBarcode",
    "User",
    "MedicalStudy",
    "ENTITY_TYPES",
    # Patches
    "FieldPatch",
    "WaterIntakePatch",
    "SleepEntryPatch",
    "NutritionEntryPatch",
    "SupplementPatch",
    "DosePatch",
    "SupplementBarcodePatch",
    "UserPatch",
    "MedicalStudyPatch",
    "patch_type_for",
    "patch_from_mapping",
    # Queries
    "Query",
    "FieldRange",
    "Ordering",
]
