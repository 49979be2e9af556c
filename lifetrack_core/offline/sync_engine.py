# =============================================================================
# lifetrack_core/offline/sync_engine.py
# Automatic Synchronization Engine
# =============================================================================
"""
SyncEngine - replays every repository's outbox when connectivity returns.

Features:
- Repository registry (one outbox per collection)
- Sync on the offline -> online transition
- Optional background sync thread
- Sync status tracking and callbacks
"""

from __future__ import annotations
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import logging

from lifetrack_core.errors import error_boundary
from lifetrack_core.offline.connectivity import ConnectivityPolicy, ConnectivityState
from lifetrack_core.offline.syncing_repository import SyncingRepository

logger = logging.getLogger(__name__)


@dataclass
class SyncState:
    """Current sync state."""
    is_syncing: bool = False
    last_sync: Optional[datetime] = None
    last_sync_success: Optional[datetime] = None
    failed_count: int = 0
    total_synced: int = 0


class SyncEngine:
    """
    Coordinates outbox replay across repositories.

    Usage:
        engine = SyncEngine(policy)
        engine.register(water_repo)
        engine.start()      # background sync
        engine.sync_all()   # immediate sync
    """

    SYNC_INTERVAL = 30  # Seconds between background sync attempts

    def __init__(self, policy: ConnectivityPolicy, sync_interval: Optional[float] = None):
        self.policy = policy
        self.sync_interval = sync_interval or self.SYNC_INTERVAL
        self._repositories: Dict[str, SyncingRepository] = {}
        self._state = SyncState()
        self._lock = threading.Lock()
        self._sync_thread: Optional[threading.Thread] = None
        self._stop_sync = threading.Event()
        self._callbacks: List[Callable[[SyncState], None]] = []
        self._was_online = policy.state.allows_remote

        policy.register_listener(self._on_connectivity_change)

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def repositories(self) -> Dict[str, SyncingRepository]:
        return dict(self._repositories)

    @property
    def pending_count(self) -> int:
        return sum(repo.pending_count for repo in self._repositories.values())

    def register(self, repository: SyncingRepository) -> None:
        """Add a repository; its collection name is the registry key."""
        self._repositories[repository.collection] = repository
        logger.debug(f"Registered repository for {repository.collection}")

    # =========================================================================
    # SYNC
    # =========================================================================

    def sync_all(self) -> Dict[str, int]:
        """
        Replay every registered outbox.

        Returns:
            Dict of collection -> operations replayed
        """
        if not self.policy.allows_remote:
            logger.debug("Cannot sync: offline")
            return {}

        if not self._lock.acquire(blocking=False):
            logger.debug("Sync already in progress")
            return {}

        results: Dict[str, int] = {}
        failed = 0
        try:
            self._state.is_syncing = True
            self._state.last_sync = datetime.now()
            self._notify_callbacks()

            for collection, repository in self._repositories.items():
                try:
                    results[collection] = repository.sync_pending()
                    failed += repository.last_sync_report.failed
                except Exception as e:
                    logger.error(f"Sync of {collection} failed: {e}", exc_info=True)
                    results[collection] = 0
                    failed += 1

            self._state.total_synced += sum(results.values())
            self._state.failed_count = failed
            if failed == 0:
                self._state.last_sync_success = datetime.now()
        finally:
            self._state.is_syncing = False
            self._lock.release()
            self._notify_callbacks()

        replayed = sum(results.values())
        if replayed or failed:
            logger.info(f"Sync complete: {replayed} replayed, {failed} failed")
        return results

    def _on_connectivity_change(self, state: ConnectivityState) -> None:
        online = state.allows_remote
        came_online = online and not self._was_online
        self._was_online = online
        if came_online:
            logger.info("Connection restored, triggering sync")
            self.sync_all()

    # =========================================================================
    # BACKGROUND LOOP
    # =========================================================================

    def start(self) -> None:
        """Start background sync thread."""
        if self._sync_thread is not None and self._sync_thread.is_alive():
            return

        self._stop_sync.clear()
        self._sync_thread = threading.Thread(
            target=self._sync_loop,
            daemon=True,
            name="SyncEngine",
        )
        self._sync_thread.start()
        logger.info("Sync engine started")

    def stop(self) -> None:
        """Stop background sync thread."""
        self._stop_sync.set()
        if self._sync_thread:
            self._sync_thread.join(timeout=10)
        logger.info("Sync engine stopped")

    def _sync_loop(self) -> None:
        while not self._stop_sync.is_set():
            if self._stop_sync.wait(timeout=self.sync_interval):
                break
            self._tick()

    @error_boundary(default_return={}, error_message="Background sync failed")
    def _tick(self) -> Dict[str, int]:
        return self.sync_all()

    # =========================================================================
    # CALLBACKS / STATUS
    # =========================================================================

    def register_callback(self, callback: Callable[[SyncState], None]) -> None:
        """Register a callback for sync state changes."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister_callback(self, callback: Callable[[SyncState], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify_callbacks(self) -> None:
        for callback in self._callbacks:
            try:
                callback(self._state)
            except Exception as e:
                logger.error(f"Error in sync callback: {e}")

    def get_status_display(self) -> Dict[str, Any]:
        """Get sync status for UI display."""
        return {
            "is_syncing": self._state.is_syncing,
            "last_sync": self._state.last_sync.isoformat() if self._state.last_sync else None,
            "last_success": (
                self._state.last_sync_success.isoformat()
                if self._state.last_sync_success else None
            ),
            "pending_count": self.pending_count,
            "pending_by_collection": {
                collection: repo.pending_count
                for collection, repo in self._repositories.items()
            },
            "failed_count": self._state.failed_count,
            "total_synced": self._state.total_synced,
        }
