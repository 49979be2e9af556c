# =============================================================================
# lifetrack_core/errors/handlers.py
# Error Handling Utilities for LifeTrack
# =============================================================================

from __future__ import annotations
import functools
import traceback
from typing import Any, Callable, Dict, Optional, TypeVar

from lifetrack_core.logging import get_logger
from .exceptions import LifeTrackError

logger = get_logger(__name__)

T = TypeVar("T")


def handle_error(
    error: Exception,
    log_error: bool = True,
    user_message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Centralized error handling function.

    Args:
        error: The exception to handle
        log_error: Whether to log the error
        user_message: Custom message (uses error message if None)

    Returns:
        Dict describing the error, suitable for a status display
    """
    if isinstance(error, LifeTrackError):
        message = user_message or error.message
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}
        recoverable = True

    if log_error:
        # Hard failures carry a stack trace; expected domain errors do not
        logger.error(
            f"[{code}] {message}",
            extra={"details": details},
            exc_info=not isinstance(error, LifeTrackError),
        )

    return {
        "code": code,
        "message": message,
        "details": details,
        "recoverable": recoverable,
    }


def error_boundary(
    default_return: Any = None,
    error_message: Optional[str] = None,
    log: bool = True,
):
    """
    Decorator to wrap functions with error handling.

    Args:
        default_return: Value to return if function fails
        error_message: Custom message logged instead of the exception text
        log: Whether to log errors

    Usage:
        @error_boundary(default_return={}, error_message="Background sync failed")
        def tick() -> Dict[str, int]:
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if log:
                    logger.error(
                        f"{error_message or 'Error'} in {func.__name__}: {e}",
                        exc_info=True,
                    )
                return default_return

        return wrapper

    return decorator
