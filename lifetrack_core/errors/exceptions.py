# =============================================================================
# lifetrack_core/errors/exceptions.py
# Custom Exception Hierarchy for LifeTrack
# =============================================================================

from typing import Optional, Dict, Any


class LifeTrackError(Exception):
    """
    Base exception for all LifeTrack errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "LOCAL_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "LT_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# DATA LAYER EXCEPTIONS
# =============================================================================

class DataValidationError(LifeTrackError):
    """Raised when a record or field patch fails validation"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if expected:
            details["expected"] = expected
        if actual:
            details["actual"] = actual

        super().__init__(
            message=message,
            code="DATA_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# LOCAL STORAGE EXCEPTIONS
# =============================================================================

class NotFoundLocally(LifeTrackError):
    """Raised when a mutation addresses an id absent from the local cache"""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        entity_id: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if collection:
            details["collection"] = collection
        if entity_id:
            details["entity_id"] = entity_id

        super().__init__(
            message=message,
            code="LOCAL_001",
            details=details,
            **kwargs,
        )


class SerializationError(LifeTrackError):
    """Raised when a local slot holds data that cannot be decoded"""

    def __init__(
        self,
        message: str,
        slot: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if slot:
            details["slot"] = slot

        super().__init__(
            message=message,
            code="LOCAL_002",
            details=details,
            **kwargs,
        )


# =============================================================================
# REMOTE STORE EXCEPTIONS
# =============================================================================

class RemoteStoreError(LifeTrackError):
    """Base class for failures talking to the remote collection store"""

    default_code = "REMOTE_000"

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        entity_id: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if collection:
            details["collection"] = collection
        if entity_id:
            details["entity_id"] = entity_id

        super().__init__(
            message=message,
            code=kwargs.pop("code", self.default_code),
            details=details,
            **kwargs,
        )


class RemoteUnavailable(RemoteStoreError):
    """Network or service failure; callers fall back to the local path"""

    default_code = "REMOTE_001"


class RemoteTimeout(RemoteUnavailable):
    """A remote call exceeded the caller-supplied timeout"""

    default_code = "REMOTE_002"


class RemoteNotFound(RemoteStoreError):
    """The remote store has no document with the addressed id"""

    default_code = "REMOTE_003"


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(LifeTrackError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
