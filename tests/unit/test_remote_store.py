# =============================================================================
# tests/unit/test_remote_store.py
# Unit Tests for InMemoryRemoteStore and SupabaseRemoteStore
# =============================================================================

from unittest.mock import MagicMock

import httpx
import pytest


class TestInMemoryRemoteStore:
    """Test the process-local remote store"""

    def test_add_assigns_id_and_mirrors_it(self, remote):
        new_id = remote.add("waterIntakes", {"amount": 250})

        document = remote.get("waterIntakes", new_id)
        assert document == {"amount": 250, "id": new_id}

    def test_returned_documents_are_copies(self, remote):
        new_id = remote.add("waterIntakes", {"amount": 250})
        remote.get("waterIntakes", new_id)["amount"] = 1

        assert remote.get("waterIntakes", new_id)["amount"] == 250

    def test_query(self, remote):
        from lifetrack_core.domain import Query

        remote.add("waterIntakes", {"userId": "u1", "time": 2})
        remote.add("waterIntakes", {"userId": "u1", "time": 1})
        remote.add("waterIntakes", {"userId": "u2", "time": 0})

        rows = remote.query("waterIntakes", Query().where("userId", "u1").order("time"))
        assert [r["time"] for r in rows] == [1, 2]

    def test_missing_id_raises_not_found(self, remote):
        from lifetrack_core.errors import RemoteNotFound

        with pytest.raises(RemoteNotFound):
            remote.update("waterIntakes", "nope", {"amount": 1})
        with pytest.raises(RemoteNotFound):
            remote.delete("waterIntakes", "nope")

    def test_unavailable(self, remote):
        from lifetrack_core.errors import RemoteUnavailable

        remote.available = False
        with pytest.raises(RemoteUnavailable):
            remote.add("waterIntakes", {})
        assert remote.calls == [("add", "waterIntakes")]

    def test_fail_next(self, remote):
        from lifetrack_core.errors import RemoteUnavailable

        remote.fail_next("add")
        with pytest.raises(RemoteUnavailable):
            remote.add("waterIntakes", {})
        assert remote.add("waterIntakes", {})


class FakeRequest:
    """Chainable stand-in for a PostgREST request builder."""

    def __init__(self, table, responses):
        self.table = table
        self.responses = responses
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        return MagicMock(data=self.responses.pop(0))


class FakeClient:
    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def table(self, name):
        request = FakeRequest(name, self.responses)
        self.requests.append(request)
        return request


class TestSupabaseRemoteStore:
    """Test PostgREST translation with a fake client"""

    def test_add_strips_id_and_returns_server_id(self):
        from lifetrack_core.data.supabase_store import SupabaseRemoteStore

        client = FakeClient([[{"id": 42, "amount": 250}]])
        store = SupabaseRemoteStore(client)

        assert store.add("waterIntakes", {"id": "local_x", "amount": 250}) == "42"
        name, args, _ = client.requests[0].calls[0]
        assert name == "insert"
        assert args[0] == {"amount": 250}

    def test_get_missing_returns_none(self):
        from lifetrack_core.data.supabase_store import SupabaseRemoteStore

        store = SupabaseRemoteStore(FakeClient([[]]))
        assert store.get("waterIntakes", "r1") is None

    def test_query_translates_filters(self):
        from lifetrack_core.data.supabase_store import SupabaseRemoteStore
        from lifetrack_core.domain import Query

        client = FakeClient([[{"id": 1}, {"id": 2}]])
        store = SupabaseRemoteStore(client)
        query = Query().where("userId", "u1").between("date", "2024-06-01", "2024-06-07").order("time")

        assert len(store.query("waterIntakes", query)) == 2
        names = [call[0] for call in client.requests[0].calls]
        assert names == ["select", "eq", "gte", "lte", "order", "range"]

    def test_query_paginates(self):
        from lifetrack_core.data.supabase_store import SupabaseRemoteStore
        from lifetrack_core.domain import Query

        store = SupabaseRemoteStore(FakeClient([[{"id": 1}, {"id": 2}], [{"id": 3}]]))
        store.BATCH_SIZE = 2

        assert [row["id"] for row in store.query("waterIntakes", Query())] == [1, 2, 3]

    def test_update_missing_row_raises_not_found(self):
        from lifetrack_core.data.supabase_store import SupabaseRemoteStore
        from lifetrack_core.errors import RemoteNotFound

        store = SupabaseRemoteStore(FakeClient([[]]))
        with pytest.raises(RemoteNotFound):
            store.update("waterIntakes", "r1", {"amount": 1})

    def test_timeout_maps_to_remote_timeout(self, mock_supabase):
        from lifetrack_core.data.supabase_store import SupabaseRemoteStore
        from lifetrack_core.errors import RemoteTimeout

        mock_supabase.table.return_value.delete.return_value.eq.return_value.execute.side_effect = (
            httpx.ReadTimeout("timed out")
        )
        with pytest.raises(RemoteTimeout):
            SupabaseRemoteStore(mock_supabase).delete("waterIntakes", "r1")

    def test_transport_error_maps_to_unavailable(self, mock_supabase):
        from lifetrack_core.data.supabase_store import SupabaseRemoteStore
        from lifetrack_core.errors import RemoteTimeout, RemoteUnavailable

        mock_supabase.table.return_value.insert.return_value.execute.side_effect = (
            httpx.ConnectError("no route")
        )
        with pytest.raises(RemoteUnavailable) as exc_info:
            SupabaseRemoteStore(mock_supabase).add("waterIntakes", {"amount": 1})
        assert not isinstance(exc_info.value, RemoteTimeout)

    def test_missing_credentials(self):
        from lifetrack_core.data.supabase_store import create_supabase_client
        from lifetrack_core.errors import ConfigurationError

        with pytest.raises(ConfigurationError):
            create_supabase_client(None, "key")
