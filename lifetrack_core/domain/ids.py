# =============================================================================
# lifetrack_core/domain/ids.py
# Tagged Entity Identifiers (device-minted vs server-assigned)
# =============================================================================
"""
Entity ids are either minted on the device (LocalId) or assigned by the
remote store (RemoteId). Code branches on the type, never on the string; the
``local_`` prefix only exists in the serialized form kept in the local store.
"""

from __future__ import annotations
import uuid
from dataclasses import dataclass
from typing import Optional, Union

LOCAL_ID_PREFIX = "local_"


@dataclass(frozen=True)
class EntityId:
    """Base identifier. Equality includes the concrete type."""
    value: str

    @property
    def is_local(self) -> bool:
        return False

    def serialize(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.serialize()


@dataclass(frozen=True)
class LocalId(EntityId):
    """Placeholder id for a record the remote store has not confirmed yet."""

    @classmethod
    def mint(cls) -> LocalId:
        return cls(uuid.uuid4().hex)

    @property
    def is_local(self) -> bool:
        return True

    def serialize(self) -> str:
        return f"{LOCAL_ID_PREFIX}{self.value}"


@dataclass(frozen=True)
class RemoteId(EntityId):
    """Server-assigned id, identical to the remote document key."""


def parse_id(raw: Optional[str]) -> Optional[EntityId]:
    """
    Parse a serialized id.

    Args:
        raw: Serialized id as stored locally or returned remotely

    Returns:
        LocalId, RemoteId, or None for an empty value
    """
    if raw is None:
        return None
    raw = str(raw)
    if not raw:
        return None
    if raw.startswith(LOCAL_ID_PREFIX):
        return LocalId(raw[len(LOCAL_ID_PREFIX):])
    return RemoteId(raw)


def coerce_id(value: Union[str, EntityId, None]) -> Optional[EntityId]:
    """Accept either a typed id or its serialized form."""
    if isinstance(value, EntityId):
        return value
    return parse_id(value)
