# =============================================================================
# lifetrack_core/offline/outbox.py
# Persistent Outbox of Pending Remote Mutations
# =============================================================================
"""
OutboxQueue - ordered list of mutations not yet confirmed by the remote store.

The queue lives in a LocalStore slot ("pending_<collection>") and is re-read
on every call, so what is on disk is always the source of truth. Replay order
is insertion order.
"""

from __future__ import annotations
import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional
import logging

from lifetrack_core.domain.ids import EntityId, parse_id
from lifetrack_core.offline.local_store import LocalStore

logger = logging.getLogger(__name__)

PENDING_SLOT_PREFIX = "pending_"


class OperationKind(Enum):
    """Kinds of pending mutation."""
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class PendingOperation:
    """
    A mutation waiting for replay.

    ``record`` (ADD) and ``patch`` (UPDATE) are kept in wire form.
    ``attempts``/``last_error`` are bookkeeping for failed replays.
    """
    kind: OperationKind
    entity_id: EntityId
    record: Optional[Dict[str, Any]] = None
    patch: Optional[Dict[str, Any]] = None
    op_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: int = field(default_factory=lambda: int(time.time() * 1000))
    attempts: int = 0
    last_error: Optional[str] = None

    @classmethod
    def add(cls, entity_id: EntityId, record: Dict[str, Any]) -> PendingOperation:
        return cls(OperationKind.ADD, entity_id, record=dict(record))

    @classmethod
    def update(cls, entity_id: EntityId, patch: Dict[str, Any]) -> PendingOperation:
        return cls(OperationKind.UPDATE, entity_id, patch=dict(patch))

    @classmethod
    def delete(cls, entity_id: EntityId) -> PendingOperation:
        return cls(OperationKind.DELETE, entity_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "opId": self.op_id,
            "type": self.kind.value,
            "entityId": self.entity_id.serialize(),
            "record": self.record,
            "patch": self.patch,
            "createdAt": self.created_at,
            "attempts": self.attempts,
            "lastError": self.last_error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PendingOperation:
        entity_id = parse_id(data.get("entityId"))
        if entity_id is None:
            raise ValueError("pending operation without entity id")
        return cls(
            kind=OperationKind(data["type"]),
            entity_id=entity_id,
            record=data.get("record"),
            patch=data.get("patch"),
            op_id=data.get("opId") or uuid.uuid4().hex,
            created_at=int(data.get("createdAt") or 0),
            attempts=int(data.get("attempts") or 0),
            last_error=data.get("lastError"),
        )


class OutboxQueue:
    """Persistent FIFO of PendingOperation for one collection."""

    def __init__(self, store: LocalStore, collection: str):
        self.store = store
        self.collection = collection
        self.slot = f"{PENDING_SLOT_PREFIX}{collection}"

    def _load(self) -> List[PendingOperation]:
        operations = []
        for raw in self.store.read_all(self.slot):
            try:
                operations.append(PendingOperation.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Dropping unreadable pending operation in {self.slot}: {e}")
        return operations

    def _save(self, operations: List[PendingOperation]) -> None:
        self.store.write_all(self.slot, [op.to_dict() for op in operations])

    def __len__(self) -> int:
        return len(self._load())

    def enqueue(self, operation: PendingOperation) -> None:
        operations = self._load()
        operations.append(operation)
        self._save(operations)
        logger.debug(
            f"Queued {operation.kind.value} for {self.collection}/{operation.entity_id} "
            f"({len(operations)} pending)"
        )

    def drain(self) -> List[PendingOperation]:
        """Snapshot of the queue in replay order; nothing is removed."""
        return self._load()

    def remove_completed(self, op_ids: Iterable[str]) -> int:
        done = set(op_ids)
        if not done:
            return 0
        operations = self._load()
        remaining = [op for op in operations if op.op_id not in done]
        self._save(remaining)
        return len(operations) - len(remaining)

    def find_add(self, entity_id: EntityId) -> Optional[PendingOperation]:
        for op in self._load():
            if op.kind is OperationKind.ADD and op.entity_id == entity_id:
                return op
        return None

    def replace(self, operation: PendingOperation) -> bool:
        """Swap an operation in place, keeping its queue position."""
        operations = self._load()
        for index, op in enumerate(operations):
            if op.op_id == operation.op_id:
                operations[index] = operation
                self._save(operations)
                return True
        return False

    def discard(self, entity_id: EntityId, kinds: Optional[Iterable[OperationKind]] = None) -> int:
        """
        Drop operations targeting an id.

        Args:
            entity_id: Target id
            kinds: Restrict to these kinds (default: all)

        Returns:
            Number of operations dropped
        """
        kinds = set(kinds) if kinds is not None else set(OperationKind)
        operations = self._load()
        remaining = [
            op for op in operations
            if not (op.entity_id == entity_id and op.kind in kinds)
        ]
        if len(remaining) != len(operations):
            self._save(remaining)
        return len(operations) - len(remaining)

    def record_failure(self, op_id: str, error: str) -> None:
        operations = self._load()
        for index, op in enumerate(operations):
            if op.op_id == op_id:
                operations[index] = replace(op, attempts=op.attempts + 1, last_error=error)
                self._save(operations)
                return

    def targets(self) -> Dict[EntityId, List[OperationKind]]:
        """Pending operation kinds per entity id."""
        result: Dict[EntityId, List[OperationKind]] = {}
        for op in self._load():
            result.setdefault(op.entity_id, []).append(op.kind)
        return result

    def clear(self) -> None:
        self.store.clear(self.slot)
