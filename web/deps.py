"""
Shared route dependencies: actor context, repository, clock and denial mapping.

Authentication happens upstream; the caller's id and role arrive as the
X-Actor-Id and X-Actor-Role headers.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends, Header, HTTPException

from core.repository import MarketplaceRepository, get_marketplace_repository
from core.results import TransitionDenied, TransitionResult, denial_http_status
from core.roles import ActorContext, UserRole
from utils.config import Config

logger = logging.getLogger(__name__)


def get_config() -> Config:
    return Config.load()


def get_repository() -> MarketplaceRepository:
    return get_marketplace_repository()


def get_now() -> datetime:
    """Current naive UTC time; overridden in tests."""
    return datetime.utcnow()


def get_actor(
    x_actor_id: Optional[str] = Header(default=None),
    x_actor_role: Optional[str] = Header(default=None),
) -> ActorContext:
    return ActorContext.from_raw(x_actor_id, x_actor_role)


def require_actor(actor: ActorContext = Depends(get_actor)) -> ActorContext:
    """
    Dependency that requires an identified caller.

    Raises HTTPException(401) when the id or role header is missing.
    """
    if not actor.is_authenticated:
        raise HTTPException(status_code=401, detail="Authentication required")
    return actor


def require_admin(actor: ActorContext = Depends(require_actor)) -> ActorContext:
    """
    Dependency that requires an admin caller.

    Raises HTTPException(403) otherwise.
    """
    if not actor.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return actor


def require_tenant(actor: ActorContext = Depends(require_actor)) -> ActorContext:
    """Dependency that requires a tenant caller; 403 for every other role."""
    if actor.role != UserRole.TENANT:
        raise HTTPException(status_code=403, detail="Only tenants can do this")
    return actor


def raise_for_denial(result: TransitionResult, context: str = "") -> None:
    """Translate a TransitionDenied into the matching HTTPException."""
    if isinstance(result, TransitionDenied):
        status_code = denial_http_status(result.code)
        logger.info("Denied %s: %s (%s)", context or "transition", result.code, result.message)
        raise HTTPException(status_code=status_code, detail=result.to_dict())
