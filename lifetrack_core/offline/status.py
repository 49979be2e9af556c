# =============================================================================
# lifetrack_core/offline/status.py
# Sync status indicator derived from query results
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from lifetrack_core.domain.entities import Entity


@dataclass(frozen=True)
class SyncStatusSummary:
    """What the UI needs to show the "operating offline" indicator."""
    operating_offline: bool
    local_only_count: int
    pending_count: int
    allows_remote: bool

    @property
    def label(self) -> str:
        if not self.allows_remote:
            return "Offline"
        if self.operating_offline or self.pending_count:
            return "Sync pending"
        return "Synced"


def summarize_sync_status(
    records: Iterable[Entity],
    pending_count: int = 0,
    allows_remote: bool = True,
) -> SyncStatusSummary:
    """
    Summarize sync state for a result list.

    A result containing any record that still carries a local id means the
    user is looking at data the remote store has not confirmed.
    """
    local_only = sum(1 for record in records if record.is_local)
    return SyncStatusSummary(
        operating_offline=local_only > 0 or not allows_remote,
        local_only_count=local_only,
        pending_count=pending_count,
        allows_remote=allows_remote,
    )
