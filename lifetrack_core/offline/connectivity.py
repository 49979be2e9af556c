# =============================================================================
# lifetrack_core/offline/connectivity.py
# Connectivity Policy: manual offline flag + network detection
# =============================================================================
"""
ConnectivityPolicy - device-wide gate consulted before every remote attempt.

Remote calls are allowed only when the user has not switched to offline mode
AND the network probe reports connectivity. The manual flag survives restarts
(stored in the LocalStore settings table).

Features:
- Pluggable network probe (TCP connect to public DNS / the Supabase host)
- Periodic health checks on a background thread
- Listener callbacks on every state change
"""

from __future__ import annotations
import socket
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple
from urllib.parse import urlparse
import logging

from lifetrack_core.offline.local_store import LocalStore

logger = logging.getLogger(__name__)

DEFAULT_PROBE_HOSTS: List[Tuple[str, int]] = [
    ("8.8.8.8", 53),          # Google DNS
    ("1.1.1.1", 53),          # Cloudflare DNS
    ("208.67.222.222", 53),   # OpenDNS
]


def tcp_probe(hosts: Iterable[Tuple[str, int]], timeout: float = 5.0) -> bool:
    """
    Check connectivity by opening a TCP connection to any of the hosts.

    Returns:
        True as soon as one host accepts the connection
    """
    for host, port in hosts:
        try:
            with socket.create_connection((host, port), timeout=timeout):
                return True
        except OSError:
            continue
    return False


@dataclass
class ConnectivityState:
    """Snapshot handed to listeners."""
    manual_offline: bool = False
    network_available: bool = False
    last_check: Optional[datetime] = None
    last_online: Optional[datetime] = None
    consecutive_failures: int = 0

    @property
    def allows_remote(self) -> bool:
        return self.network_available and not self.manual_offline


class ConnectivityPolicy:
    """
    Usage:
        policy = ConnectivityPolicy(store, supabase_url=settings.supabase_url)
        if policy.allows_remote:
            # talk to the remote store
        else:
            # local fallback
    """

    MANUAL_OFFLINE_SETTING = "offline_mode_enabled"

    CHECK_INTERVAL_ONLINE = 30      # Seconds between checks when online
    CHECK_INTERVAL_OFFLINE = 10     # Seconds between checks when offline
    CONNECTION_TIMEOUT = 5          # Timeout for connection tests

    def __init__(
        self,
        store: Optional[LocalStore] = None,
        probe: Optional[Callable[[], bool]] = None,
        supabase_url: Optional[str] = None,
    ):
        """
        Args:
            store: Where the manual offline flag is persisted (None: memory only)
            probe: Returns True when the network is reachable
            supabase_url: Remote host to include in the default probe
        """
        self._store = store
        self._probe = probe or self._default_probe(supabase_url)
        self._lock = threading.RLock()
        self._listeners: List[Callable[[ConnectivityState], None]] = []
        self._monitor_thread: Optional[threading.Thread] = None
        self._stop_monitoring = threading.Event()
        self._checked = False

        manual = bool(store.get_setting(self.MANUAL_OFFLINE_SETTING, False)) if store else False
        self._state = ConnectivityState(manual_offline=manual)

    def _default_probe(self, supabase_url: Optional[str]) -> Callable[[], bool]:
        hosts = list(DEFAULT_PROBE_HOSTS)
        if supabase_url:
            parsed = urlparse(supabase_url)
            if parsed.hostname:
                hosts.insert(0, (parsed.hostname, parsed.port or 443))
        return lambda: tcp_probe(hosts, timeout=self.CONNECTION_TIMEOUT)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def state(self) -> ConnectivityState:
        if not self._checked:
            self.check_network()
        return self._state

    @property
    def manual_offline(self) -> bool:
        return self._state.manual_offline

    @property
    def network_available(self) -> bool:
        return self.state.network_available

    @property
    def allows_remote(self) -> bool:
        """True when remote calls may be attempted."""
        if self._state.manual_offline:
            return False
        return self.state.allows_remote

    def set_manual_offline(self, enabled: bool) -> None:
        """Switch offline mode on or off and persist the choice."""
        with self._lock:
            changed = self._state.manual_offline != enabled
            self._state.manual_offline = enabled
            if self._store is not None:
                self._store.set_setting(self.MANUAL_OFFLINE_SETTING, enabled)
        logger.info(f"Offline mode {'enabled' if enabled else 'disabled'}")
        if changed:
            self._notify_listeners()

    def set_network_available(self, available: bool) -> None:
        """Record a probe result (from check_network or an external monitor)."""
        with self._lock:
            self._checked = True
            now = datetime.now()
            self._state.last_check = now
            changed = self._state.network_available != available
            self._state.network_available = available
            if available:
                self._state.last_online = now
                self._state.consecutive_failures = 0
            else:
                self._state.consecutive_failures += 1
        if changed:
            logger.info(f"Network {'available' if available else 'unavailable'}")
            self._notify_listeners()

    def check_network(self) -> bool:
        """
        Run the probe and update state.

        Returns:
            Whether the network is reachable
        """
        try:
            available = bool(self._probe())
        except Exception as e:
            logger.warning(f"Network probe failed: {e}")
            available = False
        self.set_network_available(available)
        return available

    # =========================================================================
    # MONITORING
    # =========================================================================

    def start_monitoring(self) -> None:
        """Start background connection monitoring."""
        if self._monitor_thread is not None and self._monitor_thread.is_alive():
            return

        self._stop_monitoring.clear()
        self._monitor_thread = threading.Thread(
            target=self._monitoring_loop,
            daemon=True,
            name="ConnectivityMonitor",
        )
        self._monitor_thread.start()
        logger.debug("Connectivity monitoring started")

    def stop_monitoring(self) -> None:
        self._stop_monitoring.set()
        if self._monitor_thread:
            self._monitor_thread.join(timeout=5)
        logger.debug("Connectivity monitoring stopped")

    def _monitoring_loop(self) -> None:
        while not self._stop_monitoring.is_set():
            interval = (
                self.CHECK_INTERVAL_ONLINE
                if self._state.network_available
                else self.CHECK_INTERVAL_OFFLINE
            )
            if self._stop_monitoring.wait(timeout=interval):
                break
            self.check_network()

    # =========================================================================
    # LISTENERS
    # =========================================================================

    def register_listener(self, listener: Callable[[ConnectivityState], None]) -> None:
        """
        Register a callback for connectivity changes.

        Args:
            listener: Called with the current ConnectivityState
        """
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unregister_listener(self, listener: Callable[[ConnectivityState], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.error(f"Error in connectivity listener: {e}")

    def get_status_display(self) -> dict:
        """Get status information for UI display."""
        state = self._state
        if state.manual_offline:
            status = "offline (manual)"
        elif state.network_available:
            status = "online"
        else:
            status = "offline"
        return {
            "status": status,
            "allows_remote": state.allows_remote,
            "manual_offline": state.manual_offline,
            "network": state.network_available,
            "last_check": state.last_check.isoformat() if state.last_check else None,
            "last_online": state.last_online.isoformat() if state.last_online else None,
            "failures": state.consecutive_failures,
        }
