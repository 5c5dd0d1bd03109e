"""
Marketplace roles and the authenticated actor context.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UserRole(Enum):
    """Roles a marketplace account can hold."""

    TENANT = "tenant"
    LANDLORD = "landlord"
    AGENT = "agent"
    ADMIN = "admin"


# Legacy role names still found on older profile rows
ROLE_ALIASES: dict[str, UserRole] = {
    "super_admin": UserRole.ADMIN,
}


def normalize_role(value: object) -> Optional[UserRole]:
    """Coerce a raw role value to a UserRole, or None when unrecognised."""
    if isinstance(value, UserRole):
        return value
    if not isinstance(value, str):
        return None
    normalised = value.strip().lower()
    if normalised in ROLE_ALIASES:
        return ROLE_ALIASES[normalised]
    for role in UserRole:
        if role.value == normalised:
            return role
    return None


@dataclass(frozen=True)
class ActorContext:
    """The authenticated caller: an id plus a role."""

    id: str
    role: Optional[UserRole] = None

    @classmethod
    def from_raw(cls, actor_id: object, role: object) -> "ActorContext":
        """Build a context from untrusted values (headers, query params)."""
        clean_id = actor_id.strip() if isinstance(actor_id, str) else ""
        return cls(id=clean_id, role=normalize_role(role))

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_authenticated(self) -> bool:
        return bool(self.id) and self.role is not None

    def owns(self, owner_id: Optional[str]) -> bool:
        """True when this actor is the owner of a resource."""
        return bool(self.id) and self.id == (owner_id or "")
