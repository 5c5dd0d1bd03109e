"""
Listing Routes - Owner Lifecycle Actions

Routes:
- POST /api/properties/{id}/submit    - Submit a draft for review
- POST /api/properties/{id}/resubmit  - Resubmit after requested changes
- POST /api/properties/{id}/status    - Pause or reactivate a listing
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from core.listings import (
    PAUSED_STATUSES,
    ListingStatus,
    compute_expiry_at,
    map_status_label,
    normalize_property_status,
    resolve_pause_transition,
    resolve_reactivate_transition,
    resolve_resubmit,
    resolve_submit_transition,
)
from core.repository import MarketplaceRepository
from core.roles import ActorContext
from utils.config import Config
from web.deps import get_config, get_now, get_repository, raise_for_denial, require_actor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/properties", tags=["listings"])


class StatusChangeRequest(BaseModel):
    status: str
    paused_reason: Optional[str] = None


def _load_listing(repo: MarketplaceRepository, property_id: str) -> dict[str, Any]:
    listing = repo.get_listing(property_id)
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")
    return listing


def _listing_response(listing: dict[str, Any], changed: bool = True) -> dict[str, Any]:
    return {
        "ok": True,
        "id": listing["id"],
        "status": listing.get("status"),
        "status_label": map_status_label(listing.get("status")),
        "changed": changed,
    }


@router.post("/{property_id}/submit")
def submit_listing(
    property_id: str,
    actor: ActorContext = Depends(require_actor),
    repo: MarketplaceRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    """Submit a listing for admin review. Re-submitting a pending listing is a no-op."""
    listing = _load_listing(repo, property_id)
    if not (actor.is_admin or actor.owns(listing.get("owner_id"))):
        raise HTTPException(status_code=403, detail="Only the owner can submit this listing")

    result = resolve_submit_transition(listing.get("status"))
    raise_for_denial(result, "submit")
    if not result.changed:
        return _listing_response(listing, changed=False)

    updated = repo.update_listing(property_id, status=result.status, submitted_at=now, updated_at=now)
    logger.info("Listing %s submitted by %s", property_id, actor.id)
    return _listing_response(updated)


@router.post("/{property_id}/resubmit")
def resubmit_listing(
    property_id: str,
    actor: ActorContext = Depends(require_actor),
    repo: MarketplaceRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    listing = _load_listing(repo, property_id)
    result = resolve_resubmit(listing.get("status"), actor, listing.get("owner_id"))
    raise_for_denial(result, "resubmit")

    updated = repo.update_listing(property_id, status=result.status, submitted_at=now, updated_at=now)
    logger.info("Listing %s resubmitted by %s", property_id, actor.id)
    return _listing_response(updated)


@router.post("/{property_id}/status")
def change_listing_status(
    property_id: str,
    body: StatusChangeRequest,
    actor: ActorContext = Depends(require_actor),
    repo: MarketplaceRepository = Depends(get_repository),
    config: Config = Depends(get_config),
    now: datetime = Depends(get_now),
):
    """
    Pause a live listing or bring a paused one back.

    Body status is a paused status (with a reason) or 'live'.
    """
    listing = _load_listing(repo, property_id)
    if not (actor.is_admin or actor.owns(listing.get("owner_id"))):
        raise HTTPException(status_code=403, detail="Only the owner can change this listing")

    requested = normalize_property_status(body.status)
    if requested == ListingStatus.LIVE:
        result = resolve_reactivate_transition(listing.get("status"), actor, listing.get("is_approved"))
        raise_for_denial(result, "reactivate")
        updated = repo.update_listing(
            property_id,
            status=result.status,
            paused_at=None,
            paused_reason=None,
            expires_at=compute_expiry_at(now, config.listing_expiry_days),
            updated_at=now,
        )
    elif requested in PAUSED_STATUSES:
        result = resolve_pause_transition(listing.get("status"), body.status, body.paused_reason)
        raise_for_denial(result, "pause")
        updated = repo.update_listing(
            property_id,
            status=result.status,
            paused_at=now,
            paused_reason=(body.paused_reason or "").strip(),
            updated_at=now,
        )
    else:
        raise HTTPException(status_code=400, detail=f"Invalid status: {body.status}")

    logger.info("Listing %s moved to %s by %s", property_id, updated["status"], actor.id)
    return _listing_response(updated)
