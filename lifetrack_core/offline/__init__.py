# =============================================================================
# lifetrack_core/offline/__init__.py
# Offline-First Sync Layer for LifeTrack
# =============================================================================
"""
Offline-First Sync Layer

Every repository write lands in the local store first; the remote store is
tried when connectivity allows, and anything unconfirmed is replayed later.

Architecture:
------------
    Entity repositories (water, sleep, ...)
                 │
                 ▼
    ┌──────────────────────────┐      ┌────────────────────┐
    │    SyncingRepository     │◄─────│ ConnectivityPolicy │
    └──────────────────────────┘      │ (manual + network) │
       │          │          │        └────────────────────┘
       ▼          ▼          ▼                  ▲
  LocalStore  OutboxQueue  RemoteStore          │
   (SQLite)   (pending_*)  (Supabase)      SyncEngine
                                        (replay on reconnect)

Usage:
------
from lifetrack_core.offline import (
    ConnectivityPolicy, InMemoryRemoteStore, LocalStore, SyncingRepository,
)

store = LocalStore("local_data/lifetrack.db")
policy = ConnectivityPolicy(store)
repo = SyncingRepository(InMemoryRemoteStore(), store, policy, entity_type=WaterIntake)

result = repo.create(WaterIntake(user_id="u1", date="2024-06-01", amount=250))
print(repo.pending_count)
"""

from lifetrack_core.offline.local_store import LocalStore

from lifetrack_core.offline.remote_store import (
    RemoteStore,
    InMemoryRemoteStore,
)

from lifetrack_core.offline.outbox import (
    OperationKind,
    PendingOperation,
    OutboxQueue,
)

from lifetrack_core.offline.connectivity import (
    ConnectivityPolicy,
    ConnectivityState,
    tcp_probe,
)

from lifetrack_core.offline.syncing_repository import (
    SyncingRepository,
    SyncReport,
)

from lifetrack_core.offline.sync_engine import (
    SyncEngine,
    SyncState,
)

from lifetrack_core.offline.status import (
    SyncStatusSummary,
    summarize_sync_status,
)

__all__ = [
    # Storage
    "LocalStore",
    "RemoteStore",
    "InMemoryRemoteStore",
    # Outbox
    "OperationKind",
    "PendingOperation",
    "OutboxQueue",
    # Connectivity
    "ConnectivityPolicy",
    "ConnectivityState",
    "tcp_probe",
    # Repository
    "SyncingRepository",
    "SyncReport",
    # Sync Engine
    "SyncEngine",
    "SyncState",
    # Status
    "SyncStatusSummary",
    "summarize_sync_status",
]
