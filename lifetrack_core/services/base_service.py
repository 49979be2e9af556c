# =============================================================================
# lifetrack_core/services/base_service.py
# Repository Base: ServiceResult and safe_execute
# =============================================================================
"""
Every repository operation returns a ServiceResult instead of raising, so
Streamlit pages can branch on truthiness and show ``error`` directly.
"""

from __future__ import annotations
from abc import ABC
from typing import Optional, Dict, Any, Callable
from dataclasses import dataclass

from lifetrack_core.logging import get_logger, LogContext
from lifetrack_core.errors import handle_error, LifeTrackError


@dataclass
class ServiceResult:
    """
    Outcome of a repository operation.

    ``data`` holds the record or list of records. ``metadata`` carries flags
    such as ``synced`` (False when the change is waiting in the outbox).
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, data: Any = None, metadata: Dict[str, Any] = None) -> ServiceResult:
        """Create a successful result"""
        return cls(success=True, data=data, metadata=metadata or {})

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "UNKNOWN",
        metadata: Dict[str, Any] = None,
        data: Any = None,
    ) -> ServiceResult:
        """Create a failed result"""
        return cls(
            success=False,
            data=data,
            error=error,
            error_code=error_code,
            metadata=metadata or {},
        )

    @classmethod
    def from_exception(cls, e: Exception) -> ServiceResult:
        """Create a failed result from an exception"""
        if isinstance(e, LifeTrackError):
            return cls(
                success=False,
                error=e.message,
                error_code=e.code,
                metadata=dict(e.details),
            )
        return cls(
            success=False,
            error=str(e),
            error_code="EXCEPTION",
            metadata={},
        )


class BaseService(ABC):
    """
    Base for SyncingRepository: a per-class logger plus safe_execute, which
    turns LifeTrackError and unexpected exceptions into failed results.

    Usage:
        class SyncingRepository(BaseService, Generic[E]):
            def create(self, record: E) -> ServiceResult:
                return self.safe_execute(
                    f"Creating {self.collection} record", self._create, record
                )
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str) -> LogContext:
        """
        Time an operation under this repository's logger.

        Usage:
            with self.log_operation(f"Replaying {len(operations)} pending doses operations"):
                for operation in operations:
                    self._replay(operation)
        """
        return LogContext(self.logger, operation)

    def safe_execute(
        self,
        operation: str,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> ServiceResult:
        """
        Execute a function with error handling and logging.

        A function that already returns a ServiceResult is passed through
        unchanged; any other return value is wrapped in ServiceResult.ok.

        Args:
            operation: Description of the operation
            func: Function to execute
            *args, **kwargs: Arguments to pass to func

        Returns:
            ServiceResult with success/failure status
        """
        try:
            result = func(*args, **kwargs)
        except LifeTrackError as e:
            handle_error(e, user_message=f"{operation} failed: {e.message}")
            return ServiceResult.from_exception(e)
        except Exception as e:
            self.logger.error(f"{operation} failed: {e}", exc_info=True)
            return ServiceResult.fail(str(e))

        if isinstance(result, ServiceResult):
            return result
        return ServiceResult.ok(result)
