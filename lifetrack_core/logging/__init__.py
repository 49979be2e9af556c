# =============================================================================
# lifetrack_core/logging/__init__.py
# Centralized Logging Configuration
# =============================================================================
"""
Logging for lifetrack_core.

``setup_logging`` is called once when the Streamlit app starts. Modules log
through ``logging.getLogger(__name__)``, so every record sits under the
``lifetrack_core`` namespace. Repositories wrap each outbox replay pass in a
``LogContext``, which logs when the pass starts and how long it took.
"""

from .config import setup_logging, get_logger, LogContext, NOISY_LOGGERS

__all__ = ["setup_logging", "get_logger", "LogContext", "NOISY_LOGGERS"]
