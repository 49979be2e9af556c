# =============================================================================
# lifetrack_core/repositories/users.py
# User Profile Repository
# =============================================================================

from __future__ import annotations
from typing import Any, Mapping, Optional, Union

from lifetrack_core.domain.entities import User
from lifetrack_core.domain.ids import EntityId
from lifetrack_core.domain.patches import UserPatch
from lifetrack_core.offline.syncing_repository import SyncingRepository
from lifetrack_core.services.base_service import ServiceResult


class UserRepository(SyncingRepository[User]):
    """User profiles and notification preferences."""

    ENTITY = User

    def add_user(self, user: User) -> ServiceResult:
        return self.create(user)

    def get_user(self, user_id: Union[str, EntityId]) -> Optional[User]:
        return self.get(user_id).data

    def update_user(
        self,
        user_id: Union[str, EntityId],
        updated_data: Union[UserPatch, Mapping[str, Any]],
    ) -> ServiceResult:
        """
        Update profile fields.

        Args:
            user_id: Target user
            updated_data: UserPatch or a mapping such as {"notificationEnabled": False}
        """
        return self.update(user_id, updated_data)
