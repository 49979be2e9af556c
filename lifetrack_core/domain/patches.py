# =============================================================================
# lifetrack_core/domain/patches.py
# Typed Field Patches per Entity Type
# =============================================================================
"""
Partial updates are expressed as one patch class per entity type, listing
only the fields that may change after creation. Values are validated when the
patch is built, so a bad update never reaches the local cache or the outbox.

Usage:
    patch = WaterIntakePatch(amount=300)
    updated = patch.apply(entry)

    # From an untyped mapping (wire form or UI form), camelCase or snake_case
    patch = patch_from_mapping(WaterIntake, {"containerType": "Mug"})
"""

from __future__ import annotations
import dataclasses
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type

from lifetrack_core.domain.entities import (
    ContainerType,
    Dose,
    Entity,
    MealType,
    MedicalStudy,
    NutritionEntry,
    SleepEntry,
    Supplement,
    SupplementBarcode,
    User,
    WaterIntake,
    to_camel,
)
from lifetrack_core.errors import DataValidationError
from lifetrack_core.utils.dates import parse_date


@dataclass(frozen=True)
class FieldPatch:
    """Base class; subclasses declare Optional fields defaulting to None."""

    ENTITY: ClassVar[Type[Entity]] = Entity
    FIELD_TYPES: ClassVar[Dict[str, Tuple[type, ...]]] = {}

    def __post_init__(self):
        for name, value in self.fields().items():
            allowed = self.FIELD_TYPES[name]
            # bool is an int subclass; only accept it where declared
            if isinstance(value, bool) and bool not in allowed:
                raise DataValidationError(
                    f"Invalid value for {name}",
                    field=name,
                    expected=_type_names(allowed),
                    actual="bool",
                )
            if not isinstance(value, allowed):
                raise DataValidationError(
                    f"Invalid value for {name}",
                    field=name,
                    expected=_type_names(allowed),
                    actual=type(value).__name__,
                )
        self.validate()

    def validate(self) -> None:
        """Hook for range checks beyond types."""

    def fields(self) -> Dict[str, Any]:
        """Set fields only, by attribute name."""
        return {
            f.name: getattr(self, f.name)
            for f in dataclasses.fields(self)
            if getattr(self, f.name) is not None
        }

    @property
    def is_empty(self) -> bool:
        return not self.fields()

    def to_dict(self) -> Dict[str, Any]:
        """Set fields in wire (camelCase) form."""
        return {to_camel(name): value for name, value in self.fields().items()}

    def apply(self, entity: Entity) -> Entity:
        if not isinstance(entity, self.ENTITY):
            raise DataValidationError(
                f"{type(self).__name__} cannot patch {type(entity).__name__}",
                expected=self.ENTITY.__name__,
                actual=type(entity).__name__,
            )
        return dataclasses.replace(entity, **self.fields())

    def merge(self, later: FieldPatch) -> FieldPatch:
        """Combine with a later patch of the same type; later values win."""
        if type(later) is not type(self):
            raise DataValidationError(
                "Cannot merge patches of different entity types",
                expected=type(self).__name__,
                actual=type(later).__name__,
            )
        return dataclasses.replace(self, **later.fields())


def _type_names(types: Tuple[type, ...]) -> str:
    return " | ".join(t.__name__ for t in types)


def _check_date(value: Optional[str]) -> None:
    if value is not None and parse_date(value) is None:
        raise DataValidationError(
            "Date must use YYYY-MM-DD", field="date", expected="YYYY-MM-DD", actual=value
        )


def _check_non_negative(patch: FieldPatch, *names: str) -> None:
    for name in names:
        value = getattr(patch, name)
        if value is not None and value < 0:
            raise DataValidationError(
                f"{name} must not be negative", field=name, actual=str(value)
            )


INT = (int,)
NUMBER = (int, float)
STR = (str,)
BOOL = (bool,)


@dataclass(frozen=True)
class WaterIntakePatch(FieldPatch):
    ENTITY: ClassVar[Type[Entity]] = WaterIntake
    FIELD_TYPES: ClassVar[Dict[str, Tuple[type, ...]]] = {
        "amount": INT,
        "time": INT,
        "container_type": STR,
        "date": STR,
    }

    amount: Optional[int] = None
    time: Optional[int] = None
    container_type: Optional[str] = None
    date: Optional[str] = None

    def validate(self) -> None:
        _check_non_negative(self, "amount", "time")
        _check_date(self.date)
        if self.container_type is not None and self.container_type not in ContainerType.ALL:
            raise DataValidationError(
                "Unknown container type",
                field="container_type",
                expected=", ".join(ContainerType.ALL),
                actual=self.container_type,
            )


@dataclass(frozen=True)
class SleepEntryPatch(FieldPatch):
    ENTITY: ClassVar[Type[Entity]] = SleepEntry
    FIELD_TYPES: ClassVar[Dict[str, Tuple[type, ...]]] = {
        "sleep_time": INT,
        "wake_time": INT,
        "duration": INT,
        "quality": INT,
        "notes": STR,
        "deep_sleep_minutes": INT,
        "rem_sleep_minutes": INT,
        "interruptions": INT,
    }

    sleep_time: Optional[int] = None
    wake_time: Optional[int] = None
    duration: Optional[int] = None
    quality: Optional[int] = None
    notes: Optional[str] = None
    deep_sleep_minutes: Optional[int] = None
    rem_sleep_minutes: Optional[int] = None
    interruptions: Optional[int] = None

    def validate(self) -> None:
        _check_non_negative(
            self, "duration", "deep_sleep_minutes", "rem_sleep_minutes", "interruptions"
        )
        if self.quality is not None and not (
            SleepEntry.MIN_QUALITY <= self.quality <= SleepEntry.MAX_QUALITY
        ):
            raise DataValidationError(
                "Sleep quality out of range",
                field="quality",
                expected=f"{SleepEntry.MIN_QUALITY}-{SleepEntry.MAX_QUALITY}",
                actual=str(self.quality),
            )


@dataclass(frozen=True)
class NutritionEntryPatch(FieldPatch):
    ENTITY: ClassVar[Type[Entity]] = NutritionEntry
    FIELD_TYPES: ClassVar[Dict[str, Tuple[type, ...]]] = {
        "food_name": STR,
        "calories": INT,
        "proteins": NUMBER,
        "carbs": NUMBER,
        "fats": NUMBER,
        "serving_size": NUMBER,
        "meal_type": STR,
    }

    food_name: Optional[str] = None
    calories: Optional[int] = None
    proteins: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None
    serving_size: Optional[float] = None
    meal_type: Optional[str] = None

    def validate(self) -> None:
        _check_non_negative(self, "calories", "proteins", "carbs", "fats", "serving_size")
        if self.meal_type is not None and self.meal_type not in MealType.ALL:
            raise DataValidationError(
                "Unknown meal type",
                field="meal_type",
                expected=", ".join(MealType.ALL),
                actual=self.meal_type,
            )


@dataclass(frozen=True)
class SupplementPatch(FieldPatch):
    ENTITY: ClassVar[Type[Entity]] = Supplement
    FIELD_TYPES: ClassVar[Dict[str, Tuple[type, ...]]] = {
        "name": STR,
        "daily_dose": INT,
        "remaining_quantity": INT,
        "measure_unit": STR,
        "is_taken": BOOL,
    }

    name: Optional[str] = None
    daily_dose: Optional[int] = None
    remaining_quantity: Optional[int] = None
    measure_unit: Optional[str] = None
    is_taken: Optional[bool] = None

    def validate(self) -> None:
        _check_non_negative(self, "daily_dose", "remaining_quantity")


@dataclass(frozen=True)
class DosePatch(FieldPatch):
    ENTITY: ClassVar[Type[Entity]] = Dose
    FIELD_TYPES: ClassVar[Dict[str, Tuple[type, ...]]] = {
        "supplement_id": STR,
        "date": STR,
        "doses_taken": INT,
    }

    supplement_id: Optional[str] = None
    date: Optional[str] = None
    doses_taken: Optional[int] = None

    def validate(self) -> None:
        _check_non_negative(self, "doses_taken")
        _check_date(self.date)


@dataclass(frozen=True)
class SupplementBarcodePatch(FieldPatch):
    """The barcode itself is the lookup key and never changes."""

    ENTITY: ClassVar[Type[Entity]] = SupplementBarcode
    FIELD_TYPES: ClassVar[Dict[str, Tuple[type, ...]]] = {
        "name": STR,
        "manufacturer": STR,
        "serving_size": INT,
        "measure_unit": STR,
        "daily_dose": INT,
        "image_url": STR,
        "description": STR,
    }

    name: Optional[str] = None
    manufacturer: Optional[str] = None
    serving_size: Optional[int] = None
    measure_unit: Optional[str] = None
    daily_dose: Optional[int] = None
    image_url: Optional[str] = None
    description: Optional[str] = None

    def validate(self) -> None:
        _check_non_negative(self, "serving_size", "daily_dose")


@dataclass(frozen=True)
class UserPatch(FieldPatch):
    ENTITY: ClassVar[Type[Entity]] = User
    FIELD_TYPES: ClassVar[Dict[str, Tuple[type, ...]]] = {
        "name": STR,
        "email": STR,
        "notification_enabled": BOOL,
        "preferred_dose_time": STR,
    }

    name: Optional[str] = None
    email: Optional[str] = None
    notification_enabled: Optional[bool] = None
    preferred_dose_time: Optional[str] = None

    def validate(self) -> None:
        if self.preferred_dose_time is not None:
            hours, _, minutes = self.preferred_dose_time.partition(":")
            if not (hours.isdigit() and minutes.isdigit()
                    and int(hours) < 24 and int(minutes) < 60):
                raise DataValidationError(
                    "Dose time must use HH:MM",
                    field="preferred_dose_time",
                    expected="HH:MM",
                    actual=self.preferred_dose_time,
                )


@dataclass(frozen=True)
class MedicalStudyPatch(FieldPatch):
    ENTITY: ClassVar[Type[Entity]] = MedicalStudy
    FIELD_TYPES: ClassVar[Dict[str, Tuple[type, ...]]] = {
        "title": STR,
        "description": STR,
        "link": STR,
    }

    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None


PATCH_TYPES: Dict[Type[Entity], Type[FieldPatch]] = {
    patch_cls.ENTITY: patch_cls
    for patch_cls in (
        WaterIntakePatch,
        SleepEntryPatch,
        NutritionEntryPatch,
        SupplementPatch,
        DosePatch,
        SupplementBarcodePatch,
        UserPatch,
        MedicalStudyPatch,
    )
}


def patch_type_for(entity_cls: Type[Entity]) -> Type[FieldPatch]:
    try:
        return PATCH_TYPES[entity_cls]
    except KeyError:
        raise DataValidationError(
            f"No patch type registered for {entity_cls.__name__}"
        ) from None


def patch_from_mapping(entity_cls: Type[Entity], data: Mapping[str, Any]) -> FieldPatch:
    """
    Build a typed patch from an untyped mapping.

    Args:
        entity_cls: Entity the patch targets
        data: Field values keyed by camelCase or snake_case names

    Returns:
        Validated patch instance

    Raises:
        DataValidationError: unknown or non-updatable field, or bad value
    """
    patch_cls = patch_type_for(entity_cls)
    by_wire = {to_camel(name): name for name in patch_cls.FIELD_TYPES}
    kwargs = {}
    for key, value in data.items():
        name = key if key in patch_cls.FIELD_TYPES else by_wire.get(key)
        if name is None:
            raise DataValidationError(
                f"Field '{key}' cannot be updated on {entity_cls.__name__}",
                field=key,
                expected=", ".join(sorted(by_wire)),
            )
        kwargs[name] = value
    return patch_cls(**kwargs)
