# =============================================================================
# lifetrack_core/errors/__init__.py
# Centralized Error Handling for LifeTrack
# =============================================================================

from .exceptions import (
    LifeTrackError,
    DataValidationError,
    NotFoundLocally,
    SerializationError,
    RemoteStoreError,
    RemoteUnavailable,
    RemoteTimeout,
    RemoteNotFound,
    ConfigurationError,
)

from .handlers import (
    handle_error,
    error_boundary,
)

__all__ = [
    # Exceptions
    "LifeTrackError",
    "DataValidationError",
    "NotFoundLocally",
    "SerializationError",
    "RemoteStoreError",
    "RemoteUnavailable",
    "RemoteTimeout",
    "RemoteNotFound",
    "ConfigurationError",
    # Handlers
    "handle_error",
    "error_boundary",
]
