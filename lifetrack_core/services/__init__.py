# =============================================================================
# lifetrack_core/services/__init__.py
# Service Layer for LifeTrack
# =============================================================================
"""
Service Layer for LifeTrack

Every repository is a service: public operations return a ServiceResult
instead of raising, so callers can tell "empty because absent" apart from
"empty because a soft error was absorbed".

Usage Example:
-------------
    result = water_repository.create(WaterIntake(user_id="u1", amount=250))
    if result:
        print(result.data.id, result.metadata["synced"])
    else:
        print(result.error_code, result.error)
"""

from .base_service import BaseService, ServiceResult

__all__ = [
    "BaseService",
    "ServiceResult",
]
