# =============================================================================
# lifetrack_core/repositories/water_intake.py
# Water Intake Repository
# =============================================================================
"""
Offline-first access to water intake entries.

Reads replay pending changes first when online, then fall back to the local
cache (same filters, same ordering) when the remote store is unreachable.
"""

from __future__ import annotations
import datetime
from typing import Dict, List, Optional

from lifetrack_core.analytics.aggregates import daily_totals, total
from lifetrack_core.domain.entities import ContainerType, WaterIntake
from lifetrack_core.domain.query import Query
from lifetrack_core.offline.syncing_repository import SyncingRepository
from lifetrack_core.services.base_service import ServiceResult
from lifetrack_core.utils.dates import recent_range

RECENT_DAYS = 7


class WaterIntakeRepository(SyncingRepository[WaterIntake]):
    """Water intake entries, one document per drink."""

    ENTITY = WaterIntake

    def add_water_intake(
        self,
        user_id: str,
        date: str,
        container_type: str = ContainerType.GLASS,
        amount: Optional[int] = None,
        time: Optional[int] = None,
    ) -> ServiceResult:
        """
        Log a drink, defaulting the amount from the container size.

        Args:
            user_id: Owner
            date: YYYY-MM-DD
            container_type: One of ContainerType.ALL
            amount: Milliliters (defaults to the container's standard size)
            time: Epoch milliseconds of the drink (defaults to now)
        """
        entry = WaterIntake(
            user_id=user_id,
            date=date,
            amount=amount if amount is not None else ContainerType.default_size(container_type),
            container_type=container_type,
        )
        entry.time = time if time is not None else entry.timestamp
        return self.create(entry)

    def get_water_intakes_by_date(self, user_id: str, date: str) -> List[WaterIntake]:
        """Entries for one day, earliest first."""
        query = Query().where("userId", user_id).where("date", date).order("time")
        return self.read(query).data or []

    def get_water_intakes_in_range(
        self, user_id: str, start_date: str, end_date: str
    ) -> List[WaterIntake]:
        """Entries between two dates (inclusive), by date then time."""
        query = (
            Query()
            .where("userId", user_id)
            .between("date", start_date, end_date)
            .order("date")
            .order("time")
        )
        return self.read(query).data or []

    def get_total_water_intake_for_date(self, user_id: str, date: str) -> int:
        return int(total(self.get_water_intakes_by_date(user_id, date), "amount"))

    def get_recent_water_intakes(
        self, user_id: str, today: Optional[datetime.date] = None
    ) -> List[WaterIntake]:
        """Entries for the last week."""
        start, end = recent_range(RECENT_DAYS, today)
        return self.get_water_intakes_in_range(user_id, start, end)

    def get_weekly_water_intake_totals(
        self, user_id: str, today: Optional[datetime.date] = None
    ) -> Dict[str, int]:
        """Milliliters per day for the last week (days without entries omitted)."""
        return daily_totals(self.get_recent_water_intakes(user_id, today), "amount")
