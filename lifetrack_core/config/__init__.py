# =============================================================================
# lifetrack_core/config/__init__.py
# Settings and application wiring
# =============================================================================

from .settings import Settings, load_settings
from .factory import Repositories, build_remote_store, build_repositories

__all__ = [
    "Settings",
    "load_settings",
    "Repositories",
    "build_remote_store",
    "build_repositories",
]
