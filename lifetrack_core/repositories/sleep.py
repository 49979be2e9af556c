# =============================================================================
# lifetrack_core/repositories/sleep.py
# Sleep Entry Repository
# =============================================================================

from __future__ import annotations
import datetime
from typing import List, Optional

from lifetrack_core.analytics.aggregates import average
from lifetrack_core.domain.entities import SleepEntry
from lifetrack_core.domain.query import Query
from lifetrack_core.offline.syncing_repository import SyncingRepository
from lifetrack_core.utils.dates import recent_range

RECENT_DAYS = 7


class SleepRepository(SyncingRepository[SleepEntry]):
    """Nightly sleep entries with quality (1-5) and duration in minutes."""

    ENTITY = SleepEntry

    def get_sleep_entries_by_date(self, user_id: str, date: str) -> List[SleepEntry]:
        query = Query().where("userId", user_id).where("date", date).order("sleepTime")
        return self.read(query).data or []

    def get_sleep_entries_in_range(
        self, user_id: str, start_date: str, end_date: str
    ) -> List[SleepEntry]:
        query = (
            Query()
            .where("userId", user_id)
            .between("date", start_date, end_date)
            .order("date")
        )
        return self.read(query).data or []

    def get_recent_sleep_entries(
        self, user_id: str, today: Optional[datetime.date] = None
    ) -> List[SleepEntry]:
        start, end = recent_range(RECENT_DAYS, today)
        return self.get_sleep_entries_in_range(user_id, start, end)

    def get_average_sleep_quality(
        self, user_id: str, days: int, today: Optional[datetime.date] = None
    ) -> float:
        """
        Average quality over the last ``days`` days.

        Returns:
            Mean quality, 0.0 when there are no entries
        """
        start, end = recent_range(days, today)
        return average(self.get_sleep_entries_in_range(user_id, start, end), "quality")

    def get_average_sleep_duration(
        self, user_id: str, days: int, today: Optional[datetime.date] = None
    ) -> float:
        """Average duration in minutes over the last ``days`` days (0.0 when empty)."""
        start, end = recent_range(days, today)
        return average(self.get_sleep_entries_in_range(user_id, start, end), "duration")
