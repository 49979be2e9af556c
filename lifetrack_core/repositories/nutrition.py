# =============================================================================
# lifetrack_core/repositories/nutrition.py
# Nutrition Entry Repository
# =============================================================================

from __future__ import annotations
from typing import Dict, List

from lifetrack_core.analytics.aggregates import nutrition_totals
from lifetrack_core.domain.entities import NutritionEntry
from lifetrack_core.domain.query import Query
from lifetrack_core.offline.syncing_repository import SyncingRepository


class NutritionRepository(SyncingRepository[NutritionEntry]):
    """Food log entries with calories and macronutrients."""

    ENTITY = NutritionEntry

    def get_nutrition_entries_by_date(self, user_id: str, date: str) -> List[NutritionEntry]:
        query = Query().where("userId", user_id).where("date", date).order("timestamp")
        return self.read(query).data or []

    def get_nutrition_entries_in_range(
        self, user_id: str, start_date: str, end_date: str
    ) -> List[NutritionEntry]:
        query = (
            Query()
            .where("userId", user_id)
            .between("date", start_date, end_date)
            .order("date")
            .order("timestamp")
        )
        return self.read(query).data or []

    def get_daily_nutrition_totals(self, user_id: str, date: str) -> Dict[str, float]:
        """Calories, proteins, carbs and fats summed over one day."""
        return nutrition_totals(self.get_nutrition_entries_by_date(user_id, date))
