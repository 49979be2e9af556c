# =============================================================================
# tests/unit/test_aggregates.py
# Unit Tests for record aggregates
# =============================================================================

import pytest


@pytest.fixture
def intakes(make_intake):
    return [
        make_intake(amount=250, date="2024-06-02"),
        make_intake(amount=500, date="2024-06-01"),
        make_intake(amount=330, date="2024-06-02"),
    ]


class TestRecordsFrame:
    """Test DataFrame construction"""

    def test_columns_and_ids(self, make_intake):
        from lifetrack_core.analytics.aggregates import records_frame
        from lifetrack_core.domain import LocalId

        df = records_frame([make_intake(id=LocalId("abc"))])

        assert df.loc[0, "id"] == "local_abc"
        assert df.loc[0, "user_id"] == "u1"
        assert "container_type" in df.columns

    def test_empty(self):
        from lifetrack_core.analytics.aggregates import records_frame

        assert records_frame([]).empty


class TestTotals:
    """Test sums and daily grouping"""

    def test_total(self, intakes):
        from lifetrack_core.analytics.aggregates import total

        assert total(intakes, "amount") == 1080
        assert total([], "amount") == 0

    def test_daily_totals_sorted_by_date(self, intakes):
        from lifetrack_core.analytics.aggregates import daily_totals

        totals = daily_totals(intakes)
        assert totals == {"2024-06-01": 500, "2024-06-02": 580}
        assert list(totals) == ["2024-06-01", "2024-06-02"]
        assert all(type(value) is int for value in totals.values())

    def test_daily_totals_empty(self):
        from lifetrack_core.analytics.aggregates import daily_totals

        assert daily_totals([]) == {}


class TestAverages:
    """Test means over sleep records"""

    def test_average_quality(self):
        from lifetrack_core.analytics.aggregates import average
        from lifetrack_core.domain import SleepEntry

        entries = [SleepEntry(quality=4), SleepEntry(quality=2), SleepEntry(quality=3)]
        assert average(entries, "quality") == pytest.approx(3.0)

    def test_average_empty(self):
        from lifetrack_core.analytics.aggregates import average

        assert average([], "duration") == 0.0


class TestNutritionTotals:
    """Test calorie and macro totals"""

    def test_totals(self):
        from lifetrack_core.analytics.aggregates import nutrition_totals
        from lifetrack_core.domain import NutritionEntry

        entries = [
            NutritionEntry(food_name="Oats", calories=300, proteins=10, carbs=50.5, fats=5),
            NutritionEntry(food_name="Egg", calories=80, proteins=6.5, carbs=0, fats=5.5),
        ]
        totals = nutrition_totals(entries)

        assert totals["calories"] == 380
        assert totals["proteins"] == pytest.approx(16.5)
        assert totals["carbs"] == pytest.approx(50.5)
        assert totals["fats"] == pytest.approx(10.5)

    def test_empty(self):
        from lifetrack_core.analytics.aggregates import nutrition_totals

        assert nutrition_totals([]) == {"calories": 0.0, "proteins": 0.0, "carbs": 0.0, "fats": 0.0}
