# =============================================================================
# lifetrack_core/domain/entities.py
# Health Tracking Entity Records
# =============================================================================
"""
Entity records stored both locally and in the remote document store.

Python attributes are snake_case; the wire form (local slots and remote
documents) uses camelCase keys, e.g. ``user_id`` <-> ``userId``. Every
record carries its own id in its body, mirroring the remote document key.
"""

from __future__ import annotations
import dataclasses
import time
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Type, TypeVar

from lifetrack_core.domain.ids import EntityId, parse_id

E = TypeVar("E", bound="Entity")


def _now_millis() -> int:
    return int(time.time() * 1000)


def to_camel(name: str) -> str:
    """snake_case -> camelCase"""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass
class Entity:
    """Base class for all collection records."""

    COLLECTION: ClassVar[str] = ""

    id: Optional[EntityId] = None

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def wire_names(cls) -> Dict[str, str]:
        """Map of camelCase wire key -> attribute name."""
        return {to_camel(name): name for name in cls.field_names()}

    def to_dict(self, include_id: bool = True) -> Dict[str, Any]:
        data = {}
        for name in self.field_names():
            value = getattr(self, name)
            if name == "id":
                if not include_id:
                    continue
                value = value.serialize() if value is not None else ""
            data[to_camel(name)] = value
        return data

    @classmethod
    def from_dict(cls: Type[E], data: Dict[str, Any]) -> E:
        """Build a record from its wire form, ignoring unknown keys."""
        kwargs = {}
        for key, name in cls.wire_names().items():
            if key in data:
                kwargs[name] = data[key]
            elif name in data:
                kwargs[name] = data[name]
        kwargs["id"] = parse_id(kwargs.get("id"))
        return cls(**kwargs)

    def with_id(self: E, new_id: Optional[EntityId]) -> E:
        return dataclasses.replace(self, id=new_id)

    @property
    def is_local(self) -> bool:
        return self.id is not None and self.id.is_local


# =============================================================================
# WATER INTAKE
# =============================================================================

class ContainerType:
    """Container types with standard sizes in milliliters."""
    GLASS = "Glass"
    BOTTLE = "Bottle"
    MUG = "Mug"
    SMALL_BOTTLE = "Small Bottle"
    LARGE_BOTTLE = "Large Bottle"
    CUSTOM = "Custom"

    ALL = [GLASS, BOTTLE, MUG, SMALL_BOTTLE, LARGE_BOTTLE, CUSTOM]

    DEFAULT_SIZES = {
        GLASS: 250,
        BOTTLE: 500,
        MUG: 350,
        SMALL_BOTTLE: 330,
        LARGE_BOTTLE: 750,
    }

    @classmethod
    def default_size(cls, container_type: str) -> int:
        return cls.DEFAULT_SIZES.get(container_type, cls.DEFAULT_SIZES[cls.GLASS])


@dataclass
class WaterIntake(Entity):
    """A single drink: amount in ml, time of intake in epoch milliseconds."""

    COLLECTION: ClassVar[str] = "waterIntakes"

    user_id: str = ""
    date: str = ""  # YYYY-MM-DD
    amount: int = 0
    time: int = 0
    container_type: str = ContainerType.GLASS
    timestamp: int = field(default_factory=_now_millis)


# =============================================================================
# SLEEP
# =============================================================================

@dataclass
class SleepEntry(Entity):
    COLLECTION: ClassVar[str] = "sleepEntries"

    MIN_QUALITY: ClassVar[int] = 1
    MAX_QUALITY: ClassVar[int] = 5
    QUALITY_DESCRIPTIONS: ClassVar[Dict[int, str]] = {
        1: "Very Poor",
        2: "Poor",
        3: "Average",
        4: "Good",
        5: "Excellent",
    }

    user_id: str = ""
    date: str = ""
    sleep_time: int = 0
    wake_time: int = 0
    duration: int = 0  # minutes
    quality: int = 3
    notes: str = ""
    deep_sleep_minutes: int = 0
    rem_sleep_minutes: int = 0
    interruptions: int = 0
    timestamp: int = field(default_factory=_now_millis)


# =============================================================================
# NUTRITION
# =============================================================================

class MealType:
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"
    OTHER = "Other"

    ALL = [BREAKFAST, LUNCH, DINNER, SNACK, OTHER]


@dataclass
class NutritionEntry(Entity):
    COLLECTION: ClassVar[str] = "nutritionEntries"

    user_id: str = ""
    date: str = ""
    food_name: str = ""
    calories: int = 0
    proteins: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    serving_size: float = 0.0
    meal_type: str = MealType.OTHER
    timestamp: int = field(default_factory=_now_millis)


# =============================================================================
# SUPPLEMENTS, DOSES, BARCODES, USERS, STUDIES
# =============================================================================

@dataclass
class Supplement(Entity):
    COLLECTION: ClassVar[str] = "supplements"

    name: str = ""
    daily_dose: int = 0
    remaining_quantity: int = 0
    measure_unit: str = "pill"
    is_taken: bool = False


@dataclass
class Dose(Entity):
    """Doses of one supplement taken on one day."""

    COLLECTION: ClassVar[str] = "doses"

    supplement_id: str = ""
    date: str = ""  # YYYY-MM-DD
    doses_taken: int = 0


@dataclass
class SupplementBarcode(Entity):
    """
    Product information looked up from a scanned supplement barcode.

    ``exists`` is filled in at lookup time when the user's supplement list
    already holds a supplement with the same name.
    """

    COLLECTION: ClassVar[str] = "supplementBarcodes"

    PLACEHOLDER_NAME: ClassVar[str] = "Unknown Supplement"
    DEFAULT_STOCK: ClassVar[int] = 30  # a month's supply

    barcode: str = ""
    name: str = ""
    manufacturer: str = ""
    serving_size: int = 1
    measure_unit: str = "pill"
    daily_dose: int = 1
    image_url: str = ""
    description: str = ""
    exists: bool = False

    @classmethod
    def placeholder(cls, barcode: str) -> SupplementBarcode:
        """Stand-in returned when nothing is known about a barcode."""
        return cls(
            barcode=barcode,
            name=cls.PLACEHOLDER_NAME,
            manufacturer="Unknown",
            description=f"Supplement scanned from barcode: {barcode}",
        )

    def to_supplement(self) -> Supplement:
        return Supplement(
            name=self.name,
            daily_dose=self.daily_dose,
            remaining_quantity=self.DEFAULT_STOCK,
            measure_unit=self.measure_unit,
            is_taken=False,
        )


@dataclass
class User(Entity):
    COLLECTION: ClassVar[str] = "users"

    name: str = ""
    email: str = ""
    notification_enabled: bool = True
    preferred_dose_time: str = "08:00"  # HH:MM


@dataclass
class MedicalStudy(Entity):
    COLLECTION: ClassVar[str] = "medicalStudies"

    title: str = ""
    description: str = ""
    link: str = ""


ENTITY_TYPES: Dict[str, Type[Entity]] = {
    cls.COLLECTION: cls
    for cls in (
        WaterIntake,
        SleepEntry,
        NutritionEntry,
        Supplement,
        Dose,
        SupplementBarcode,
        User,
        MedicalStudy,
    )
}
