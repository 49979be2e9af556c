# =============================================================================
# tests/unit/test_domain.py
# Unit Tests for Ids, Entities, Field Patches and Queries
# =============================================================================

import pytest


class TestEntityIds:
    """Test tagged id parsing and serialization"""

    def test_local_id_serializes_with_prefix(self):
        from lifetrack_core.domain import LocalId

        local_id = LocalId("abc")
        assert local_id.serialize() == "local_abc"
        assert local_id.is_local

    def test_minted_ids_are_unique(self):
        from lifetrack_core.domain import LocalId

        assert LocalId.mint() != LocalId.mint()

    def test_parse_distinguishes_local_and_remote(self):
        from lifetrack_core.domain import LocalId, RemoteId, parse_id

        assert parse_id("local_abc") == LocalId("abc")
        assert parse_id("abc") == RemoteId("abc")
        assert parse_id("") is None
        assert parse_id(None) is None

    def test_local_and_remote_with_same_value_differ(self):
        from lifetrack_core.domain import LocalId, RemoteId

        assert LocalId("x") != RemoteId("x")

    def test_coerce_accepts_typed_or_serialized(self):
        from lifetrack_core.domain import RemoteId, coerce_id

        assert coerce_id(RemoteId("r1")) == RemoteId("r1")
        assert coerce_id("r1") == RemoteId("r1")


class TestEntities:
    """Test wire conversion of entity records"""

    def test_to_dict_uses_camel_case(self):
        from lifetrack_core.domain import RemoteId, WaterIntake

        entry = WaterIntake(id=RemoteId("r1"), user_id="u1", date="2024-06-01", amount=250, time=5)
        data = entry.to_dict()

        assert data["id"] == "r1"
        assert data["userId"] == "u1"
        assert data["containerType"] == "Glass"
        assert "user_id" not in data

    def test_to_dict_without_id(self):
        from lifetrack_core.domain import WaterIntake

        assert "id" not in WaterIntake(amount=1).to_dict(include_id=False)

    def test_from_dict_ignores_unknown_keys(self):
        from lifetrack_core.domain import LocalId, WaterIntake

        entry = WaterIntake.from_dict({
            "id": "local_abc",
            "userId": "u1",
            "amount": 300,
            "created_at": "2024-06-01T10:00:00",
        })

        assert entry.id == LocalId("abc")
        assert entry.user_id == "u1"
        assert entry.amount == 300
        assert entry.is_local

    def test_container_default_sizes(self):
        from lifetrack_core.domain import ContainerType

        assert ContainerType.default_size("Bottle") == 500
        assert ContainerType.default_size("Large Bottle") == 750
        assert ContainerType.default_size("Custom") == 250

    def test_entity_registry(self):
        from lifetrack_core.domain import ENTITY_TYPES, SleepEntry

        assert ENTITY_TYPES["sleepEntries"] is SleepEntry
        assert len(ENTITY_TYPES) == 8
        assert "supplementBarcodes" in ENTITY_TYPES

    def test_barcode_placeholder(self):
        from lifetrack_core.domain import SupplementBarcode

        placeholder = SupplementBarcode.placeholder("0123")

        assert placeholder.name == "Unknown Supplement"
        assert placeholder.description == "Supplement scanned from barcode: 0123"
        assert placeholder.id is None

    def test_barcode_to_supplement(self):
        from lifetrack_core.domain import SupplementBarcode

        supplement = SupplementBarcode(barcode="1", name="Zinc", daily_dose=2, measure_unit="mg").to_supplement()

        assert supplement.name == "Zinc"
        assert supplement.daily_dose == 2
        assert supplement.remaining_quantity == 30
        assert supplement.is_taken is False


class TestFieldPatches:
    """Test typed patch validation and application"""

    def test_apply_returns_new_record(self):
        from lifetrack_core.domain import WaterIntake, WaterIntakePatch

        entry = WaterIntake(amount=250)
        updated = WaterIntakePatch(amount=400).apply(entry)

        assert updated.amount == 400
        assert entry.amount == 250

    def test_wrong_type_rejected(self):
        from lifetrack_core.domain import WaterIntakePatch
        from lifetrack_core.errors import DataValidationError

        with pytest.raises(DataValidationError) as exc_info:
            WaterIntakePatch(amount="lots")
        assert exc_info.value.details["field"] == "amount"

    def test_bool_not_accepted_as_int(self):
        from lifetrack_core.domain import WaterIntakePatch
        from lifetrack_core.errors import DataValidationError

        with pytest.raises(DataValidationError):
            WaterIntakePatch(amount=True)

    def test_range_checks(self):
        from lifetrack_core.domain import SleepEntryPatch, UserPatch, WaterIntakePatch
        from lifetrack_core.errors import DataValidationError

        with pytest.raises(DataValidationError):
            SleepEntryPatch(quality=6)
        with pytest.raises(DataValidationError):
            WaterIntakePatch(amount=-5)
        with pytest.raises(DataValidationError):
            WaterIntakePatch(date="01/06/2024")
        with pytest.raises(DataValidationError):
            UserPatch(preferred_dose_time="25:00")

    def test_dose_and_barcode_patches(self):
        from lifetrack_core.domain import DosePatch, SupplementBarcode, patch_from_mapping
        from lifetrack_core.errors import DataValidationError

        assert DosePatch(doses_taken=2).to_dict() == {"dosesTaken": 2}
        with pytest.raises(DataValidationError):
            DosePatch(doses_taken=-1)
        with pytest.raises(DataValidationError):
            DosePatch(date="2024/06/01")
        with pytest.raises(DataValidationError) as exc_info:
            patch_from_mapping(SupplementBarcode, {"barcode": "999"})
        assert exc_info.value.details["field"] == "barcode"

    def test_patch_rejects_other_entity(self):
        from lifetrack_core.domain import SleepEntryPatch, WaterIntake
        from lifetrack_core.errors import DataValidationError

        with pytest.raises(DataValidationError):
            SleepEntryPatch(quality=3).apply(WaterIntake())

    def test_to_dict_only_set_fields(self):
        from lifetrack_core.domain import WaterIntakePatch

        assert WaterIntakePatch(container_type="Mug").to_dict() == {"containerType": "Mug"}

    def test_merge_later_wins(self):
        from lifetrack_core.domain import WaterIntakePatch

        merged = WaterIntakePatch(amount=100, time=1).merge(WaterIntakePatch(amount=200))
        assert merged.amount == 200
        assert merged.time == 1

    def test_patch_from_mapping_accepts_both_casings(self):
        from lifetrack_core.domain import SupplementPatch, Supplement, patch_from_mapping

        patch = patch_from_mapping(Supplement, {"isTaken": True, "daily_dose": 2})
        assert isinstance(patch, SupplementPatch)
        assert patch.is_taken is True
        assert patch.daily_dose == 2

    def test_patch_from_mapping_rejects_unknown_field(self):
        from lifetrack_core.domain import WaterIntake, patch_from_mapping
        from lifetrack_core.errors import DataValidationError

        with pytest.raises(DataValidationError):
            patch_from_mapping(WaterIntake, {"userId": "someone-else"})


class TestQuery:
    """Test local query evaluation"""

    @pytest.fixture
    def records(self):
        return [
            {"id": "a", "userId": "u1", "date": "2024-06-02", "time": 30},
            {"id": "b", "userId": "u1", "date": "2024-06-01", "time": 20},
            {"id": "c", "userId": "u2", "date": "2024-06-01", "time": 10},
            {"id": "d", "userId": "u1", "date": "2024-06-01", "time": 5},
            {"id": "e", "userId": "u1", "date": "2024-06-09", "time": 1},
        ]

    def test_equality_and_ordering(self, records):
        from lifetrack_core.domain import Query

        query = Query().where("userId", "u1").where("date", "2024-06-01").order("time")
        assert [r["id"] for r in query.apply(records)] == ["d", "b"]

    def test_inclusive_range_multi_key_order(self, records):
        from lifetrack_core.domain import Query

        query = (
            Query()
            .where("userId", "u1")
            .between("date", "2024-06-01", "2024-06-02")
            .order("date")
            .order("time")
        )
        assert [r["id"] for r in query.apply(records)] == ["d", "b", "a"]

    def test_descending_and_limit(self, records):
        from lifetrack_core.domain import Query

        query = Query().order("time", descending=True).take(2)
        assert [r["id"] for r in query.apply(records)] == ["a", "b"]

    def test_missing_values_sort_last(self):
        from lifetrack_core.domain import Query

        rows = [{"id": "x"}, {"id": "y", "time": 2}, {"id": "z", "time": 1}]
        assert [r["id"] for r in Query().order("time").apply(rows)] == ["z", "y", "x"]

    def test_range_excludes_missing_field(self):
        from lifetrack_core.domain import Query

        assert Query().between("date", "2024-01-01").apply([{"id": "x"}]) == []
