# =============================================================================
# lifetrack_core/config/factory.py
# Explicit construction of stores, policy, repositories and sync engine
# =============================================================================

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from lifetrack_core.config.settings import Settings
from lifetrack_core.offline.connectivity import ConnectivityPolicy
from lifetrack_core.offline.local_store import LocalStore
from lifetrack_core.offline.remote_store import InMemoryRemoteStore, RemoteStore
from lifetrack_core.offline.sync_engine import SyncEngine
from lifetrack_core.offline.syncing_repository import SyncingRepository
from lifetrack_core.repositories import (
    BarcodeRepository,
    DoseRepository,
    MedicalStudyRepository,
    NutritionRepository,
    SleepRepository,
    SupplementRepository,
    UserRepository,
    WaterIntakeRepository,
)

logger = logging.getLogger(__name__)


def build_remote_store(settings: Settings) -> RemoteStore:
    """
    Pick the remote store for the configured environment.

    Returns:
        SupabaseRemoteStore when credentials are configured, otherwise an
        InMemoryRemoteStore (demo mode; data lives as long as the process)
    """
    if settings.has_supabase_credentials:
        from lifetrack_core.data.supabase_store import SupabaseRemoteStore, create_supabase_client

        client = create_supabase_client(settings.supabase_url, settings.supabase_key)
        logger.info("Using Supabase remote store")
        return SupabaseRemoteStore(client)

    logger.warning("Supabase credentials not configured; using in-memory remote store")
    return InMemoryRemoteStore()


@dataclass
class Repositories:
    """Everything the app needs, wired together once."""
    store: LocalStore
    remote: RemoteStore
    policy: ConnectivityPolicy
    engine: SyncEngine
    water: WaterIntakeRepository
    sleep: SleepRepository
    nutrition: NutritionRepository
    supplements: SupplementRepository
    doses: DoseRepository
    barcodes: BarcodeRepository
    users: UserRepository
    studies: MedicalStudyRepository

    def all(self) -> Dict[str, SyncingRepository]:
        return self.engine.repositories

    def close(self) -> None:
        self.engine.stop()
        self.policy.stop_monitoring()
        for repository in self.all().values():
            repository.close()
        self.store.close()


def build_repositories(
    settings: Settings,
    remote: Optional[RemoteStore] = None,
    store: Optional[LocalStore] = None,
    policy: Optional[ConnectivityPolicy] = None,
) -> Repositories:
    """
    Construct all repositories sharing one LocalStore and ConnectivityPolicy.

    Args:
        settings: Loaded settings
        remote: Remote store override (defaults to build_remote_store)
        store: Local store override
        policy: Connectivity policy override

    Returns:
        Repositories bundle with every repository registered in the engine
    """
    if store is None:
        store = LocalStore(settings.db_path)
    if remote is None:
        remote = build_remote_store(settings)
    if policy is None:
        policy = ConnectivityPolicy(store, supabase_url=settings.supabase_url)
    engine = SyncEngine(policy, sync_interval=settings.sync_interval)

    def make(repository_cls):
        repository = repository_cls(
            remote, store, policy, remote_timeout=settings.remote_timeout
        )
        engine.register(repository)
        return repository

    supplements = make(SupplementRepository)
    barcodes = make(BarcodeRepository)
    barcodes.set_supplement_repository(supplements)

    return Repositories(
        store=store,
        remote=remote,
        policy=policy,
        engine=engine,
        water=make(WaterIntakeRepository),
        sleep=make(SleepRepository),
        nutrition=make(NutritionRepository),
        supplements=supplements,
        doses=make(DoseRepository),
        barcodes=barcodes,
        users=make(UserRepository),
        studies=make(MedicalStudyRepository),
    )
