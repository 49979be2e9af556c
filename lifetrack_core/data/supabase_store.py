# =============================================================================
# lifetrack_core/data/supabase_store.py
# Supabase-backed RemoteStore
# Translates collection operations to PostgREST calls
# =============================================================================

from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from lifetrack_core.domain.query import Query
from lifetrack_core.errors import (
    ConfigurationError,
    RemoteNotFound,
    RemoteTimeout,
    RemoteUnavailable,
)
from lifetrack_core.offline.remote_store import RemoteStore

logger = logging.getLogger(__name__)


def create_supabase_client(url: Optional[str], key: Optional[str]) -> Client:
    """
    Initialize and return a Supabase client.

    Args:
        url: Project URL, e.g. https://your-project.supabase.co
        key: anon or service-role key

    Returns:
        Supabase client instance

    Raises:
        ConfigurationError: credentials missing or rejected by the client
    """
    if not url or not key:
        raise ConfigurationError(
            "Supabase credentials not configured",
            config_key="SUPABASE_URL/SUPABASE_KEY",
        )

    try:
        return create_client(url, key)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize Supabase client: {e}",
            config_key="SUPABASE_URL",
        ) from e


class SupabaseRemoteStore(RemoteStore):
    """
    RemoteStore over Supabase tables, one table per collection.

    Tables use a generated ``id`` primary key, so the server id is part of
    every row (the row body mirrors its own key).
    """

    BATCH_SIZE = 1000  # PostgREST default row limit

    def __init__(self, client: Client):
        """
        Args:
            client: Supabase client, constructed by the caller
        """
        self.client = client

    def _execute(self, collection: str, request, entity_id: Optional[str] = None):
        """Run a PostgREST request, mapping transport errors to store errors."""
        try:
            return request.execute()
        except httpx.TimeoutException as e:
            raise RemoteTimeout(
                f"Supabase request timed out: {e}", collection=collection, entity_id=entity_id
            ) from e
        except (httpx.HTTPError, APIError) as e:
            raise RemoteUnavailable(
                f"Supabase request failed: {e}", collection=collection, entity_id=entity_id
            ) from e

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        row = {k: v for k, v in data.items() if k != "id"}
        response = self._execute(collection, self.client.table(collection).insert(row))
        if not response.data:
            raise RemoteUnavailable("Insert returned no row", collection=collection)
        new_id = str(response.data[0]["id"])
        logger.debug(f"Inserted {collection}/{new_id}")
        return new_id

    def get(self, collection: str, entity_id: str) -> Optional[Dict[str, Any]]:
        response = self._execute(
            collection,
            self.client.table(collection).select("*").eq("id", entity_id).limit(1),
            entity_id,
        )
        return response.data[0] if response.data else None

    def query(self, collection: str, query: Query) -> List[Dict[str, Any]]:
        """
        Fetch ALL matching rows (handles the Supabase 1000 row limit).

        Uses range pagination until a short batch is returned.
        """
        all_data: List[Dict[str, Any]] = []
        offset = 0

        while True:
            request = self.client.table(collection).select("*")
            for field, value in query.equals:
                request = request.eq(field, value)
            for field_range in query.ranges:
                if field_range.lower is not None:
                    request = request.gte(field_range.field, field_range.lower)
                if field_range.upper is not None:
                    request = request.lte(field_range.field, field_range.upper)
            for ordering in query.order_by:
                request = request.order(ordering.field, desc=ordering.descending)

            batch_size = self.BATCH_SIZE
            if query.limit is not None:
                batch_size = min(batch_size, query.limit - len(all_data))
                if batch_size <= 0:
                    break

            response = self._execute(
                collection, request.range(offset, offset + batch_size - 1)
            )
            if not response.data:
                break
            all_data.extend(response.data)
            if len(response.data) < batch_size:
                break
            offset += batch_size

        return all_data

    def update(self, collection: str, entity_id: str, patch: Dict[str, Any]) -> None:
        response = self._execute(
            collection,
            self.client.table(collection).update(patch).eq("id", entity_id),
            entity_id,
        )
        if not response.data:
            raise RemoteNotFound("No such row", collection=collection, entity_id=entity_id)

    def delete(self, collection: str, entity_id: str) -> None:
        response = self._execute(
            collection,
            self.client.table(collection).delete().eq("id", entity_id),
            entity_id,
        )
        if not response.data:
            raise RemoteNotFound("No such row", collection=collection, entity_id=entity_id)
