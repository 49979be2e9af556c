# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import pytest
from unittest.mock import MagicMock


# =============================================================================
# NETWORK STUB
# =============================================================================

class NetworkSwitch:
    """Probe stand-in: returns whatever ``up`` is set to."""

    def __init__(self, up: bool = True):
        self.up = up
        self.checks = 0

    def __call__(self) -> bool:
        self.checks += 1
        return self.up


# =============================================================================
# STORE / POLICY FIXTURES
# =============================================================================

@pytest.fixture
def local_store(tmp_path):
    """LocalStore backed by a temporary SQLite file"""
    from lifetrack_core.offline import LocalStore

    store = LocalStore(tmp_path / "lifetrack_test.db")
    yield store
    store.close()


@pytest.fixture
def remote():
    """In-memory remote store, available by default"""
    from lifetrack_core.offline import InMemoryRemoteStore

    return InMemoryRemoteStore()


@pytest.fixture
def network():
    return NetworkSwitch(up=True)


@pytest.fixture
def policy(local_store, network):
    """ConnectivityPolicy using the stub probe (online until told otherwise)"""
    from lifetrack_core.offline import ConnectivityPolicy

    return ConnectivityPolicy(local_store, probe=network)


@pytest.fixture
def water_repo(remote, local_store, policy):
    from lifetrack_core.repositories import WaterIntakeRepository

    repo = WaterIntakeRepository(remote, local_store, policy, remote_timeout=2.0)
    yield repo
    repo.close()


@pytest.fixture
def make_intake():
    """Factory for WaterIntake records"""
    from lifetrack_core.domain import WaterIntake

    def _make(amount=250, date="2024-06-01", time=1000, user_id="u1", **kwargs):
        return WaterIntake(user_id=user_id, date=date, amount=amount, time=time, **kwargs)

    return _make


# =============================================================================
# MOCK FIXTURES
# =============================================================================

@pytest.fixture
def mock_supabase():
    """Mock Supabase client"""
    mock_client = MagicMock()
    mock_client.table.return_value.select.return_value.execute.return_value.data = []
    mock_client.table.return_value.insert.return_value.execute.return_value = MagicMock()
    return mock_client

