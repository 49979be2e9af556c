# =============================================================================
# lifetrack_core/offline/remote_store.py
# Remote Collection Store Interface
# =============================================================================
"""
RemoteStore - abstract interface to the networked document store.

Every operation raises RemoteUnavailable (or its RemoteTimeout subclass) on
network/service errors and RemoteNotFound when addressing a missing id.
Repositories treat both as soft failures.

Implementations:
- SupabaseRemoteStore (lifetrack_core.data.supabase_store): production
- InMemoryRemoteStore: tests and demo mode without credentials
"""

from __future__ import annotations
import copy
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple
import logging

from lifetrack_core.domain.query import Query
from lifetrack_core.errors import RemoteNotFound, RemoteUnavailable

logger = logging.getLogger(__name__)


class RemoteStore(ABC):
    """Abstract base class for remote collection stores"""

    @abstractmethod
    def add(self, collection: str, data: Dict[str, Any]) -> str:
        """
        Create a document and return its server-assigned id.

        The id is mirrored into the document body under "id".
        """

    @abstractmethod
    def get(self, collection: str, entity_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one document, or None when absent."""

    @abstractmethod
    def query(self, collection: str, query: Query) -> List[Dict[str, Any]]:
        """Fetch documents matching the query, in query order."""

    @abstractmethod
    def update(self, collection: str, entity_id: str, patch: Dict[str, Any]) -> None:
        """Apply a field patch; raises RemoteNotFound for a missing id."""

    @abstractmethod
    def delete(self, collection: str, entity_id: str) -> None:
        """Delete a document; raises RemoteNotFound for a missing id."""


class InMemoryRemoteStore(RemoteStore):
    """
    Process-local remote store with switchable availability.

    Used as the remote in tests and as a stand-in when no Supabase
    credentials are configured. Records every call in ``calls`` so callers
    can assert on remote traffic.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self.available = True
        self.calls: List[Tuple[str, str]] = []
        # Per-operation failure injection: {"add": 1} fails the next add
        self._failures: Dict[str, int] = {}

    def fail_next(self, operation: str, times: int = 1) -> None:
        self._failures[operation] = self._failures.get(operation, 0) + times

    def _enter(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        if not self.available:
            raise RemoteUnavailable("Remote store unreachable", collection=collection)
        if self._failures.get(operation, 0) > 0:
            self._failures[operation] -= 1
            raise RemoteUnavailable(f"Injected {operation} failure", collection=collection)

    def _docs(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        self._enter("add", collection)
        with self._lock:
            new_id = uuid.uuid4().hex[:20]
            document = copy.deepcopy(data)
            document["id"] = new_id
            self._docs(collection)[new_id] = document
        return new_id

    def get(self, collection: str, entity_id: str) -> Optional[Dict[str, Any]]:
        self._enter("get", collection)
        with self._lock:
            document = self._docs(collection).get(entity_id)
            return copy.deepcopy(document) if document is not None else None

    def query(self, collection: str, query: Query) -> List[Dict[str, Any]]:
        self._enter("query", collection)
        with self._lock:
            return copy.deepcopy(query.apply(self._docs(collection).values()))

    def update(self, collection: str, entity_id: str, patch: Dict[str, Any]) -> None:
        self._enter("update", collection)
        with self._lock:
            document = self._docs(collection).get(entity_id)
            if document is None:
                raise RemoteNotFound("No such document", collection=collection, entity_id=entity_id)
            document.update(copy.deepcopy(patch))

    def delete(self, collection: str, entity_id: str) -> None:
        self._enter("delete", collection)
        with self._lock:
            if self._docs(collection).pop(entity_id, None) is None:
                raise RemoteNotFound("No such document", collection=collection, entity_id=entity_id)

    def documents(self, collection: str) -> List[Dict[str, Any]]:
        """Snapshot of a collection, for inspection."""
        with self._lock:
            return copy.deepcopy(list(self._docs(collection).values()))
