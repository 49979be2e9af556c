# =============================================================================
# lifetrack_core/offline/syncing_repository.py
# Offline-First Repository (local cache + outbox + remote replay)
# =============================================================================
"""
SyncingRepository - offline-first CRUD for one entity type.

Every mutation lands in the local cache first. The remote store is then
tried when the ConnectivityPolicy allows it; anything the remote store does
not confirm is queued in the outbox and replayed by ``sync_pending``.

Record states:
- LocalOnly:   LocalId, a pending Add exists
- PendingSync: pending operations exist for the id
- Synced:      RemoteId, no pending operations

Usage:
    repo = SyncingRepository(remote, local_store, policy, entity_type=WaterIntake)
    result = repo.create(WaterIntake(user_id="u1", date="2024-06-01", amount=250))
    if result:
        entry = result.data
        print(result.metadata["synced"])
"""

from __future__ import annotations
import dataclasses
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from lifetrack_core.domain.entities import Entity
from lifetrack_core.domain.ids import EntityId, LocalId, RemoteId, coerce_id, parse_id
from lifetrack_core.domain.patches import FieldPatch, patch_from_mapping
from lifetrack_core.domain.query import Query
from lifetrack_core.errors import (
    DataValidationError,
    NotFoundLocally,
    RemoteNotFound,
    RemoteStoreError,
    RemoteTimeout,
)
from lifetrack_core.offline.connectivity import ConnectivityPolicy
from lifetrack_core.offline.local_store import LocalStore
from lifetrack_core.offline.outbox import OperationKind, OutboxQueue, PendingOperation
from lifetrack_core.offline.remote_store import RemoteStore
from lifetrack_core.services.base_service import BaseService, ServiceResult

E = TypeVar("E", bound=Entity)

CACHE_SLOT_PREFIX = "local_"
DEFAULT_REMOTE_TIMEOUT = 5.0


@dataclass
class SyncReport:
    """Outcome of the last outbox replay."""
    replayed: int = 0
    failed: int = 0
    conflicts: int = 0
    remaining: int = 0

    def to_dict(self) -> Dict[str, int]:
        return dataclasses.asdict(self)


class SyncingRepository(BaseService, Generic[E]):
    """
    Offline-first repository over one remote collection.

    Subclasses set ``ENTITY`` and add query helpers; the class can also be
    used directly by passing ``entity_type``.
    """

    ENTITY: Optional[Type[Entity]] = None

    def __init__(
        self,
        remote: RemoteStore,
        local_store: LocalStore,
        policy: ConnectivityPolicy,
        entity_type: Optional[Type[E]] = None,
        remote_timeout: float = DEFAULT_REMOTE_TIMEOUT,
    ):
        """
        Args:
            remote: Remote collection store
            local_store: Device-local slot store
            policy: Connectivity gate shared by all repositories
            entity_type: Entity class (defaults to the subclass ENTITY)
            remote_timeout: Seconds before a remote call is abandoned
        """
        super().__init__()
        self.entity_type: Type[E] = entity_type or self.ENTITY
        if self.entity_type is None:
            raise DataValidationError("SyncingRepository needs an entity type")

        self.remote = remote
        self.local_store = local_store
        self.policy = policy
        self.remote_timeout = remote_timeout

        self.collection = self.entity_type.COLLECTION
        self.cache_slot = f"{CACHE_SLOT_PREFIX}{self.collection}"
        self.outbox = OutboxQueue(local_store, self.collection)
        self.last_sync_report = SyncReport()

        self._lock = threading.RLock()
        self._executor = ThreadPoolExecutor(
            max_workers=4, thread_name_prefix=f"remote-{self.collection}"
        )
        # Local ids already replaced by server ids during this session
        self._resolved: Dict[LocalId, RemoteId] = {}

    # =========================================================================
    # STATUS
    # =========================================================================

    @property
    def pending_count(self) -> int:
        return len(self.outbox)

    @property
    def has_unsynced_changes(self) -> bool:
        return self.pending_count > 0

    def close(self) -> None:
        """Release the remote call workers."""
        self._executor.shutdown(wait=False)

    # =========================================================================
    # PUBLIC OPERATIONS
    # =========================================================================

    def create(self, record: E) -> ServiceResult:
        """
        Store a new record locally, then try the remote store.

        Returns:
            ServiceResult with the stored record (server id when synced);
            metadata["synced"] tells whether the remote add succeeded
        """
        return self.safe_execute(f"Creating {self.collection} record", self._create, record)

    def get(self, entity_id: Union[str, EntityId]) -> ServiceResult:
        """Look up one record; data is None when unknown."""
        return self.safe_execute(f"Loading {self.collection} record", self._get, entity_id)

    def read(self, query: Optional[Query] = None) -> ServiceResult:
        """
        Query records, preferring fresh remote data.

        Returns:
            ServiceResult with a list of records; metadata["source"] is
            "remote" or "local"
        """
        return self.safe_execute(f"Reading {self.collection}", self._read, query or Query())

    def update(
        self,
        entity_id: Union[str, EntityId],
        patch: Union[FieldPatch, Mapping[str, Any]],
    ) -> ServiceResult:
        """
        Apply a field patch locally, then remotely or via the outbox.

        Args:
            entity_id: Target id (typed or serialized)
            patch: Typed patch, or a mapping converted with patch_from_mapping

        Returns:
            ServiceResult with the updated record, or a LOCAL_001 failure when
            the id is not in the local cache
        """
        return self.safe_execute(
            f"Updating {self.collection} record", self._update, entity_id, patch
        )

    def delete(self, entity_id: Union[str, EntityId]) -> ServiceResult:
        """Remove a record locally, then remotely or via the outbox."""
        return self.safe_execute(f"Deleting {self.collection} record", self._delete, entity_id)

    def sync_pending(self) -> int:
        """
        Replay the outbox against the remote store.

        Returns:
            Number of operations replayed (0 when offline or nothing pending)
        """
        with self._lock:
            return self._sync_pending()

    # =========================================================================
    # OPERATION BODIES
    # =========================================================================

    def _create(self, record: E) -> ServiceResult:
        if not isinstance(record, self.entity_type):
            raise DataValidationError(
                f"Expected a {self.entity_type.__name__} record",
                expected=self.entity_type.__name__,
                actual=type(record).__name__,
            )
        if record.id is not None and not record.id.is_local:
            raise DataValidationError(
                "Record already has a server id; use update instead",
                field="id",
                actual=str(record.id),
            )

        with self._lock:
            if record.id is None:
                record = record.with_id(LocalId.mint())

            records = self._load_cache()
            self._upsert(records, record.to_dict())
            self._save_cache(records)

            if self.policy.allows_remote:
                try:
                    remote_id = self._call_remote(
                        self.remote.add, self.collection, record.to_dict(include_id=False)
                    )
                except RemoteStoreError as e:
                    self.logger.warning(f"Remote add failed, queued for sync: {e}")
                else:
                    synced = record.with_id(RemoteId(str(remote_id)))
                    self._reconcile_id(record.id, synced.id)
                    return ServiceResult.ok(synced, metadata={"synced": True})

            self.outbox.enqueue(PendingOperation.add(record.id, record.to_dict()))
            return ServiceResult.ok(record, metadata={"synced": False})

    def _get(self, entity_id: Union[str, EntityId]) -> ServiceResult:
        entity_id = self._require_id(entity_id)

        with self._lock:
            records = self._load_cache()
            index = self._find(records, entity_id)
            if index is not None:
                return ServiceResult.ok(self._decode(records[index]), metadata={"source": "local"})

            if isinstance(entity_id, RemoteId) and self.policy.allows_remote:
                if OperationKind.DELETE in self.outbox.targets().get(entity_id, []):
                    return ServiceResult.ok(None, metadata={"source": "local"})
                try:
                    document = self._call_remote(self.remote.get, self.collection, entity_id.value)
                except RemoteStoreError as e:
                    self.logger.warning(f"Remote get failed for {entity_id}: {e}")
                    return ServiceResult.ok(None, metadata={"source": "local"})

                if document is not None:
                    raw = self._normalize_remote(document, entity_id)
                    if raw is not None:
                        records.append(raw)
                        self._save_cache(records)
                        return ServiceResult.ok(self._decode(raw), metadata={"source": "remote"})

            return ServiceResult.ok(None, metadata={"source": "local"})

    def _read(self, query: Query) -> ServiceResult:
        with self._lock:
            if self.policy.allows_remote:
                self._sync_pending()
                try:
                    documents = self._call_remote(self.remote.query, self.collection, query)
                except RemoteStoreError as e:
                    self.logger.warning(f"Remote query failed, using local cache: {e}")
                else:
                    records = self._merge_remote(documents)
                    return ServiceResult.ok(
                        self._decode_all(query.apply(records)),
                        metadata={"source": "remote", "pending": self.pending_count},
                    )

            records = query.apply(self._load_cache())
            return ServiceResult.ok(
                self._decode_all(records),
                metadata={"source": "local", "pending": self.pending_count},
            )

    def _update(self, entity_id, patch) -> ServiceResult:
        if isinstance(patch, Mapping):
            patch = patch_from_mapping(self.entity_type, patch)
        if patch.ENTITY is not self.entity_type:
            raise DataValidationError(
                f"{type(patch).__name__} cannot update {self.collection}",
                expected=self.entity_type.__name__,
                actual=patch.ENTITY.__name__,
            )
        entity_id = self._require_id(entity_id)

        with self._lock:
            records = self._load_cache()
            index = self._find(records, entity_id)
            current = self._decode(records[index]) if index is not None else None
            if current is None:
                raise NotFoundLocally(
                    f"No local {self.collection} record with id {entity_id}",
                    collection=self.collection,
                    entity_id=str(entity_id),
                )

            updated = patch.apply(current)
            records[index] = updated.to_dict()
            self._save_cache(records)

            if updated.id.is_local:
                self._fold_into_add(updated)
                return ServiceResult.ok(updated, metadata={"synced": False})

            # Queued operations for this id must replay before any live call
            already_pending = updated.id in self.outbox.targets()
            if self.policy.allows_remote and not already_pending:
                try:
                    self._call_remote(
                        self.remote.update, self.collection, updated.id.value, patch.to_dict()
                    )
                    return ServiceResult.ok(updated, metadata={"synced": True})
                except RemoteNotFound as e:
                    self.logger.warning(f"Update conflict, remote record missing: {e}")
                except RemoteStoreError as e:
                    self.logger.warning(f"Remote update failed, queued for sync: {e}")

            self.outbox.enqueue(PendingOperation.update(updated.id, patch.to_dict()))
            return ServiceResult.ok(updated, metadata={"synced": False})

    def _delete(self, entity_id) -> ServiceResult:
        entity_id = self._require_id(entity_id)

        with self._lock:
            records = self._load_cache()
            index = self._find(records, entity_id)
            if index is None:
                raise NotFoundLocally(
                    f"No local {self.collection} record with id {entity_id}",
                    collection=self.collection,
                    entity_id=str(entity_id),
                )
            removed = self._decode(records.pop(index))
            self._save_cache(records)

            if entity_id.is_local:
                # Never reached the remote store: drop its Add and any follow-ups
                dropped = self.outbox.discard(entity_id)
                self.logger.debug(f"Collapsed {dropped} pending operations for {entity_id}")
                return ServiceResult.ok(removed, metadata={"synced": True})

            self.outbox.discard(entity_id, kinds=[OperationKind.UPDATE])
            if self.policy.allows_remote:
                try:
                    self._call_remote(self.remote.delete, self.collection, entity_id.value)
                    return ServiceResult.ok(removed, metadata={"synced": True})
                except RemoteNotFound:
                    return ServiceResult.ok(removed, metadata={"synced": True})
                except RemoteStoreError as e:
                    self.logger.warning(f"Remote delete failed, queued for sync: {e}")

            self.outbox.enqueue(PendingOperation.delete(entity_id))
            return ServiceResult.ok(removed, metadata={"synced": False})

    # =========================================================================
    # REPLAY
    # =========================================================================

    def _sync_pending(self) -> int:
        if not self.policy.allows_remote:
            return 0

        operations = self.outbox.drain()
        if not operations:
            self.last_sync_report = SyncReport()
            return 0

        completed: List[str] = []
        conflicts: List[str] = []
        failed = 0
        # Ids whose earlier operation failed this pass; later ones must wait
        blocked = set()

        with self.log_operation(f"Replaying {len(operations)} pending {self.collection} operations"):
            try:
                for operation in operations:
                    if operation.entity_id in blocked:
                        continue
                    try:
                        self._replay(operation)
                        completed.append(operation.op_id)
                    except RemoteNotFound as e:
                        self.logger.warning(
                            f"Dropping {operation.kind.value} for {operation.entity_id}: "
                            f"remote record is gone ({e.message})"
                        )
                        conflicts.append(operation.op_id)
                    except RemoteStoreError as e:
                        failed += 1
                        blocked.add(operation.entity_id)
                        self.outbox.record_failure(operation.op_id, e.message)
                        self.logger.warning(
                            f"Replay of {operation.kind.value} for {operation.entity_id} failed: {e}"
                        )
                    except Exception as e:
                        failed += 1
                        blocked.add(operation.entity_id)
                        self.outbox.record_failure(operation.op_id, f"{type(e).__name__}: {e}")
                        self.logger.error(
                            f"Unexpected error replaying {operation.kind.value} "
                            f"for {operation.entity_id}: {e}",
                            exc_info=True,
                        )
            finally:
                # Adds already reconciled must leave the outbox even if the pass aborts
                self.outbox.remove_completed(completed + conflicts)

        self.last_sync_report = SyncReport(
            replayed=len(completed),
            failed=failed,
            conflicts=len(conflicts),
            remaining=self.pending_count,
        )
        self.logger.info(
            f"Sync of {self.collection}: {len(completed)} replayed, "
            f"{failed} failed, {len(conflicts)} conflicts"
        )
        return len(completed)

    def _replay(self, operation: PendingOperation) -> None:
        entity_id = operation.entity_id

        if operation.kind is OperationKind.ADD:
            body = {k: v for k, v in (operation.record or {}).items() if k != "id"}
            remote_id = self._call_remote(self.remote.add, self.collection, body)
            self._reconcile_id(entity_id, RemoteId(str(remote_id)))

        elif operation.kind is OperationKind.UPDATE:
            self._call_remote(
                self.remote.update, self.collection, entity_id.value, operation.patch or {}
            )

        elif operation.kind is OperationKind.DELETE:
            try:
                self._call_remote(self.remote.delete, self.collection, entity_id.value)
            except RemoteNotFound:
                self.logger.debug(f"{entity_id} already deleted remotely")

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _call_remote(self, func: Callable[..., Any], *args) -> Any:
        """Run a remote call, abandoning it after ``remote_timeout`` seconds."""
        future = self._executor.submit(func, *args)
        try:
            return future.result(timeout=self.remote_timeout)
        except FutureTimeout:
            future.cancel()
            raise RemoteTimeout(
                f"Remote call exceeded {self.remote_timeout}s", collection=self.collection
            ) from None

    def _require_id(self, entity_id: Union[str, EntityId, None]) -> EntityId:
        parsed = coerce_id(entity_id)
        if parsed is None:
            raise DataValidationError("An id is required", field="id")
        if isinstance(parsed, LocalId) and parsed in self._resolved:
            return self._resolved[parsed]
        return parsed

    def _load_cache(self) -> List[Dict[str, Any]]:
        return self.local_store.read_all(self.cache_slot)

    def _save_cache(self, records: List[Dict[str, Any]]) -> None:
        self.local_store.write_all(self.cache_slot, records)

    @staticmethod
    def _find(records: List[Dict[str, Any]], entity_id: EntityId) -> Optional[int]:
        for index, raw in enumerate(records):
            if parse_id(raw.get("id")) == entity_id:
                return index
        return None

    def _upsert(self, records: List[Dict[str, Any]], raw: Dict[str, Any]) -> None:
        index = self._find(records, parse_id(raw.get("id")))
        if index is None:
            records.append(raw)
        else:
            records[index] = raw

    def _decode(self, raw: Dict[str, Any]) -> Optional[E]:
        try:
            return self.entity_type.from_dict(raw)
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Skipping undecodable {self.collection} record: {e}")
            return None

    def _decode_all(self, records: List[Dict[str, Any]]) -> List[E]:
        decoded = (self._decode(raw) for raw in records)
        return [entity for entity in decoded if entity is not None]

    def _normalize_remote(
        self, document: Dict[str, Any], entity_id: Optional[EntityId] = None
    ) -> Optional[Dict[str, Any]]:
        """Remote document -> cache record keyed by its RemoteId."""
        raw_id = document.get("id") or (entity_id.value if entity_id else None)
        if not raw_id:
            self.logger.warning(f"Ignoring {self.collection} document without id")
            return None
        entity = self._decode(dict(document, id=""))
        if entity is None:
            return None
        return entity.with_id(RemoteId(str(raw_id))).to_dict()

    def _merge_remote(self, documents: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Upsert remote documents into the cache.

        Ids with pending operations keep their local version; ids with a
        pending Delete stay out of the cache.
        """
        records = self._load_cache()
        pending = self.outbox.targets()

        for document in documents:
            raw = self._normalize_remote(document)
            if raw is None:
                continue
            if parse_id(raw["id"]) in pending:
                continue
            self._upsert(records, raw)

        self._save_cache(records)
        return records

    def _reconcile_id(self, local_id: EntityId, remote_id: RemoteId) -> None:
        """Swap a local id for the server id in the cache."""
        records = self._load_cache()
        index = self._find(records, local_id)
        if index is not None:
            records[index] = dict(records[index], id=remote_id.serialize())
            self._save_cache(records)
        if isinstance(local_id, LocalId):
            self._resolved[local_id] = remote_id
        self.logger.debug(f"{self.collection}: {local_id} is now {remote_id}")

    def _fold_into_add(self, updated: E) -> None:
        """Rewrite the pending Add of a never-synced record."""
        add = self.outbox.find_add(updated.id)
        if add is None:
            self.outbox.enqueue(PendingOperation.add(updated.id, updated.to_dict()))
        else:
            self.outbox.replace(dataclasses.replace(add, record=updated.to_dict()))
