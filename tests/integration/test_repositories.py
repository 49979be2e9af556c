# =============================================================================
# tests/integration/test_repositories.py
# Integration Tests for the entity repositories' query helpers
# =============================================================================

from datetime import date

import pytest


TODAY = date(2024, 6, 10)


@pytest.fixture
def make_repo(remote, local_store, policy):
    """Build any repository type on the shared stores"""
    created = []

    def _make(repository_cls):
        repo = repository_cls(remote, local_store, policy, remote_timeout=2.0)
        created.append(repo)
        return repo

    yield _make
    for repo in created:
        repo.close()


class TestWaterIntakeRepository:
    """Water helpers online and offline"""

    def test_add_defaults_amount_from_container(self, water_repo):
        from lifetrack_core.domain import ContainerType

        result = water_repo.add_water_intake("u1", "2024-06-10", ContainerType.BOTTLE, time=5)

        assert result
        assert result.data.amount == 500
        assert result.data.time == 5

    def test_explicit_amount_and_default_time(self, water_repo):
        result = water_repo.add_water_intake("u1", "2024-06-10", amount=123)

        assert result.data.amount == 123
        assert result.data.time == result.data.timestamp

    def test_by_date_ordered_by_time(self, water_repo):
        water_repo.add_water_intake("u1", "2024-06-10", amount=100, time=30)
        water_repo.add_water_intake("u1", "2024-06-10", amount=200, time=10)
        water_repo.add_water_intake("u1", "2024-06-09", amount=300, time=20)
        water_repo.add_water_intake("u2", "2024-06-10", amount=400, time=0)

        entries = water_repo.get_water_intakes_by_date("u1", "2024-06-10")
        assert [e.amount for e in entries] == [200, 100]
        assert water_repo.get_total_water_intake_for_date("u1", "2024-06-10") == 300

    def test_same_answers_offline(self, water_repo, policy):
        water_repo.add_water_intake("u1", "2024-06-10", amount=100, time=30)
        water_repo.add_water_intake("u1", "2024-06-10", amount=200, time=10)
        online = [e.amount for e in water_repo.get_water_intakes_by_date("u1", "2024-06-10")]

        policy.set_network_available(False)
        offline = [e.amount for e in water_repo.get_water_intakes_by_date("u1", "2024-06-10")]

        assert online == offline == [200, 100]

    def test_recent_and_weekly_totals(self, water_repo):
        water_repo.add_water_intake("u1", "2024-06-02", amount=999, time=1)
        water_repo.add_water_intake("u1", "2024-06-03", amount=250, time=1)
        water_repo.add_water_intake("u1", "2024-06-10", amount=500, time=2)
        water_repo.add_water_intake("u1", "2024-06-10", amount=250, time=1)

        recent = water_repo.get_recent_water_intakes("u1", today=TODAY)
        assert [(e.date, e.time) for e in recent] == [
            ("2024-06-03", 1), ("2024-06-10", 1), ("2024-06-10", 2),
        ]
        assert water_repo.get_weekly_water_intake_totals("u1", today=TODAY) == {
            "2024-06-03": 250,
            "2024-06-10": 750,
        }

    def test_empty_day(self, water_repo):
        assert water_repo.get_water_intakes_by_date("u1", "2024-01-01") == []
        assert water_repo.get_total_water_intake_for_date("u1", "2024-01-01") == 0


class TestSleepRepository:
    """Sleep helpers and averages"""

    @pytest.fixture
    def sleep_repo(self, make_repo):
        from lifetrack_core.repositories import SleepRepository

        repo = make_repo(SleepRepository)
        for day, quality, duration, sleep_time in [
            ("2024-06-08", 4, 480, 200),
            ("2024-06-09", 2, 360, 100),
            ("2024-06-10", 3, 420, 300),
            ("2024-05-01", 5, 600, 0),
        ]:
            repo.create(self._entry(day, quality, duration, sleep_time))
        return repo

    @staticmethod
    def _entry(day, quality, duration, sleep_time):
        from lifetrack_core.domain import SleepEntry

        return SleepEntry(
            user_id="u1", date=day, quality=quality, duration=duration, sleep_time=sleep_time
        )

    def test_in_range_ordered_by_date(self, sleep_repo):
        entries = sleep_repo.get_sleep_entries_in_range("u1", "2024-06-01", "2024-06-30")
        assert [e.date for e in entries] == ["2024-06-08", "2024-06-09", "2024-06-10"]

    def test_recent(self, sleep_repo):
        assert len(sleep_repo.get_recent_sleep_entries("u1", today=TODAY)) == 3

    def test_averages(self, sleep_repo):
        assert sleep_repo.get_average_sleep_quality("u1", 7, today=TODAY) == pytest.approx(3.0)
        assert sleep_repo.get_average_sleep_duration("u1", 7, today=TODAY) == pytest.approx(420.0)

    def test_averages_empty(self, sleep_repo):
        assert sleep_repo.get_average_sleep_quality("nobody", 7, today=TODAY) == 0.0

    def test_by_date(self, sleep_repo):
        entries = sleep_repo.get_sleep_entries_by_date("u1", "2024-06-09")
        assert [e.quality for e in entries] == [2]


class TestNutritionRepository:
    """Food log helpers"""

    def test_daily_totals(self, make_repo):
        from lifetrack_core.domain import MealType, NutritionEntry
        from lifetrack_core.repositories import NutritionRepository

        repo = make_repo(NutritionRepository)
        repo.create(NutritionEntry(
            user_id="u1", date="2024-06-10", food_name="Oats", calories=300,
            proteins=10.0, carbs=50.0, fats=5.0, meal_type=MealType.BREAKFAST, timestamp=1,
        ))
        repo.create(NutritionEntry(
            user_id="u1", date="2024-06-10", food_name="Salad", calories=150,
            proteins=4.0, carbs=12.0, fats=9.0, meal_type=MealType.LUNCH, timestamp=2,
        ))

        entries = repo.get_nutrition_entries_by_date("u1", "2024-06-10")
        assert [e.food_name for e in entries] == ["Oats", "Salad"]

        totals = repo.get_daily_nutrition_totals("u1", "2024-06-10")
        assert totals["calories"] == 450
        assert totals["fats"] == pytest.approx(14.0)

        in_range = repo.get_nutrition_entries_in_range("u1", "2024-06-01", "2024-06-30")
        assert len(in_range) == 2


class TestSupplementRepository:
    """Supplements list and bulk taken flag"""

    def test_mark_all_taken(self, make_repo):
        from lifetrack_core.domain import Supplement
        from lifetrack_core.repositories import SupplementRepository

        repo = make_repo(SupplementRepository)
        repo.create(Supplement(name="Vitamin D", daily_dose=1, remaining_quantity=30))
        repo.create(Supplement(name="Iron", daily_dose=1, remaining_quantity=10))

        assert [s.name for s in repo.get_supplements()] == ["Iron", "Vitamin D"]
        assert repo.update_all_supplements_taken(True) == 2
        assert all(s.is_taken for s in repo.get_supplements())

    def test_mark_taken_offline_queues_updates(self, make_repo, policy):
        from lifetrack_core.domain import Supplement
        from lifetrack_core.repositories import SupplementRepository

        repo = make_repo(SupplementRepository)
        repo.create(Supplement(name="Zinc"))
        policy.set_network_available(False)

        assert repo.update_all_supplements_taken(True) == 1
        assert repo.pending_count == 1


class TestDoseRepository:
    """Dose counts per supplement and day"""

    def test_by_date_and_by_id(self, make_repo):
        from lifetrack_core.domain import Dose
        from lifetrack_core.repositories import DoseRepository

        repo = make_repo(DoseRepository)
        first = repo.add_dose(Dose(supplement_id="s2", date="2024-06-10", doses_taken=1)).data
        repo.add_dose(Dose(supplement_id="s1", date="2024-06-10", doses_taken=2))
        repo.add_dose(Dose(supplement_id="s1", date="2024-06-09", doses_taken=1))

        assert [d.supplement_id for d in repo.get_doses_by_date("2024-06-10")] == ["s1", "s2"]
        assert repo.get_dose_by_id(first.id).doses_taken == 1
        assert repo.get_dose_by_id("missing") is None
        assert repo.get_doses_taken("s1", "2024-06-10") == 2

    def test_offline_dose_syncs_later(self, make_repo, policy, remote):
        from lifetrack_core.domain import Dose, DosePatch
        from lifetrack_core.repositories import DoseRepository

        repo = make_repo(DoseRepository)
        policy.set_network_available(False)
        dose = repo.add_dose(Dose(supplement_id="s1", date="2024-06-10")).data
        repo.update(dose.id, DosePatch(doses_taken=3))

        assert dose.is_local
        assert repo.get_doses_by_date("2024-06-10")[0].doses_taken == 3

        policy.set_network_available(True)
        assert repo.sync_pending() == 1
        assert remote.documents("doses")[0]["dosesTaken"] == 3


class TestBarcodeRepository:
    """Barcode lookups keyed by the scanned value"""

    def test_unknown_barcode_gives_placeholder(self, make_repo):
        from lifetrack_core.repositories import BarcodeRepository

        repo = make_repo(BarcodeRepository)
        found = repo.lookup_barcode("5000000")

        assert found.barcode == "5000000"
        assert found.name == "Unknown Supplement"
        assert found.id is None
        assert repo.get_all_barcodes() == []

    def test_save_updates_existing_barcode(self, make_repo, remote):
        from lifetrack_core.domain import SupplementBarcode
        from lifetrack_core.repositories import BarcodeRepository

        repo = make_repo(BarcodeRepository)
        assert repo.save_barcode_info(SupplementBarcode(barcode="111", name="Omega 3"))
        assert repo.save_barcode_info(
            SupplementBarcode(barcode="111", name="Omega 3", manufacturer="Acme", daily_dose=2)
        )

        stored = remote.documents("supplementBarcodes")
        assert len(stored) == 1
        assert stored[0]["manufacturer"] == "Acme"
        assert repo.lookup_barcode("111").daily_dose == 2

    def test_exists_flag_follows_supplements(self, make_repo):
        from lifetrack_core.domain import Supplement, SupplementBarcode
        from lifetrack_core.repositories import BarcodeRepository, SupplementRepository

        supplements = make_repo(SupplementRepository)
        repo = make_repo(BarcodeRepository)
        repo.save_barcode_info(SupplementBarcode(barcode="222", name="Vitamin C", exists=True))

        assert repo.lookup_barcode("222").exists is False
        repo.set_supplement_repository(supplements)
        assert repo.lookup_barcode("222").exists is False

        supplements.create(Supplement(name="Vitamin C"))
        assert repo.lookup_barcode("222").exists is True

    def test_list_and_delete(self, make_repo):
        from lifetrack_core.domain import SupplementBarcode
        from lifetrack_core.repositories import BarcodeRepository

        repo = make_repo(BarcodeRepository)
        repo.save_barcode_info(SupplementBarcode(barcode="b2", name="Zinc"))
        repo.save_barcode_info(SupplementBarcode(barcode="b1", name="Iron"))

        assert [b.barcode for b in repo.get_all_barcodes()] == ["b1", "b2"]
        assert repo.delete_barcode("b1") is True
        assert repo.delete_barcode("b1") is False
        assert [b.barcode for b in repo.get_all_barcodes()] == ["b2"]

    def test_barcode_required(self, make_repo):
        from lifetrack_core.domain import SupplementBarcode
        from lifetrack_core.repositories import BarcodeRepository

        result = make_repo(BarcodeRepository).save_barcode_info(SupplementBarcode(name="Iron"))

        assert not result
        assert result.error_code == "DATA_001"


class TestUserRepository:
    """User profile helpers"""

    def test_add_get_update(self, make_repo):
        from lifetrack_core.domain import User
        from lifetrack_core.repositories import UserRepository

        repo = make_repo(UserRepository)
        user = repo.add_user(User(name="Sam", email="sam@example.com")).data

        assert repo.get_user(user.id).email == "sam@example.com"

        result = repo.update_user(user.id, {"notificationEnabled": False, "preferredDoseTime": "21:30"})
        assert result
        assert repo.get_user(user.id).notification_enabled is False

    def test_invalid_dose_time(self, make_repo):
        from lifetrack_core.domain import User
        from lifetrack_core.repositories import UserRepository

        repo = make_repo(UserRepository)
        user = repo.add_user(User(name="Sam")).data

        assert repo.update_user(user.id, {"preferredDoseTime": "25:00"}).error_code == "DATA_001"


class TestMedicalStudyRepository:
    """Study finder helpers"""

    def test_studies(self, make_repo):
        from lifetrack_core.domain import MedicalStudy
        from lifetrack_core.repositories import MedicalStudyRepository

        repo = make_repo(MedicalStudyRepository)
        added = repo.add_study(MedicalStudy(title="Sleep and memory", link="https://example.org/1"))
        repo.add_study(MedicalStudy(title="Hydration", link="https://example.org/2"))

        assert [s.title for s in repo.get_all_studies()] == ["Hydration", "Sleep and memory"]
        assert repo.get_study_by_id(added.data.id).link == "https://example.org/1"
        assert repo.get_study_by_id("unknown") is None
