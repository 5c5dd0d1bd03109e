"""
Viewing Routes - Tenant Requests and Host Responses

Routes:
- POST  /api/viewings/request      - Tenant requests a viewing
- PATCH /api/viewings/respond      - Host approves, proposes or declines
- GET   /api/viewings/{id}         - Request detail with tenant reliability
- POST  /api/viewings/{id}/no-show - Host reports a no-show
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from core.listings import ListingStatus, normalize_property_status
from core.repository import MarketplaceRepository
from core.results import INVALID_STATUS_TRANSITION, TransitionDenied
from core.roles import ActorContext
from core.viewings import (
    MAX_PREFERRED_TIMES,
    ViewingStatus,
    can_request_viewing,
    find_invalid_times,
    resolve_no_show_report,
    resolve_viewing_response,
    summarize_tenant_reliability,
)
from utils.config import Config
from utils.dates import parse_instant
from web.deps import (
    get_config,
    get_now,
    get_repository,
    raise_for_denial,
    require_actor,
    require_tenant,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/viewings", tags=["viewings"])


class ViewingRequestBody(BaseModel):
    property_id: str
    preferred_times: list[str] = Field(..., min_length=1, max_length=MAX_PREFERRED_TIMES)
    message: Optional[str] = None


class ViewingResponseBody(BaseModel):
    viewing_id: str
    action: str
    approved_time: Optional[str] = None
    proposed_times: Optional[list[str]] = None
    decline_reason_code: Optional[str] = None
    host_message: Optional[str] = None


def _viewing_response(viewing: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": viewing["id"],
        "property_id": viewing.get("property_id"),
        "tenant_id": viewing.get("tenant_id"),
        "status": viewing.get("status"),
        "preferred_times": viewing.get("preferred_times") or [],
        "approved_time": (
            viewing["approved_time"].isoformat()
            if isinstance(viewing.get("approved_time"), datetime)
            else None
        ),
        "proposed_times": viewing.get("proposed_times") or [],
        "decline_reason_code": viewing.get("decline_reason_code"),
    }


def _load_viewing_with_owner(
    repo: MarketplaceRepository,
    viewing_id: str,
) -> tuple[dict[str, Any], Optional[str]]:
    viewing = repo.get_viewing(viewing_id)
    if not viewing:
        raise HTTPException(status_code=404, detail="Viewing request not found")
    listing = repo.get_listing(str(viewing.get("property_id") or "")) or {}
    return viewing, listing.get("owner_id")


@router.post("/request", status_code=201)
def request_viewing(
    body: ViewingRequestBody,
    actor: ActorContext = Depends(require_tenant),
    repo: MarketplaceRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    listing = repo.get_listing(body.property_id)
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")
    if actor.owns(listing.get("owner_id")):
        raise HTTPException(status_code=403, detail="You cannot request a viewing of your own listing")
    if normalize_property_status(listing.get("status")) != ListingStatus.LIVE:
        raise_for_denial(
            TransitionDenied(code=INVALID_STATUS_TRANSITION, message="Listing is not accepting viewings."),
            "viewing request",
        )

    times = [t.strip() for t in body.preferred_times if t.strip()]
    if not times:
        raise HTTPException(status_code=400, detail="At least one preferred time is required")
    invalid = find_invalid_times(times)
    if invalid:
        raise HTTPException(status_code=400, detail=f"Preferred times must be ISO date-times: {', '.join(invalid)}")

    existing = repo.list_viewings(property_id=body.property_id, tenant_id=actor.id)
    if not can_request_viewing(v.get("status") for v in existing):
        raise_for_denial(
            TransitionDenied(code="ALREADY_REQUESTED", message="You already have an open viewing request."),
            "viewing request",
        )

    viewing = repo.add_viewing(
        {
            "id": str(uuid.uuid4()),
            "property_id": body.property_id,
            "tenant_id": actor.id,
            "status": ViewingStatus.REQUESTED.value,
            "preferred_times": times,
            "message": (body.message or "").strip() or None,
            "created_at": now,
        }
    )
    logger.info("Viewing %s requested for listing %s by %s", viewing["id"], body.property_id, actor.id)
    return {"ok": True, "viewing": _viewing_response(viewing)}


@router.patch("/respond")
def respond_to_viewing(
    body: ViewingResponseBody,
    actor: ActorContext = Depends(require_actor),
    repo: MarketplaceRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    viewing, owner_id = _load_viewing_with_owner(repo, body.viewing_id)

    result = resolve_viewing_response(
        viewing.get("status"),
        body.action,
        actor,
        owner_id,
        preferred_times=viewing.get("preferred_times"),
        approved_time=body.approved_time,
        proposed_times=body.proposed_times,
        decline_reason_code=body.decline_reason_code,
    )
    raise_for_denial(result, "viewing response")

    fields: dict[str, Any] = {
        "status": result.status,
        "responded_at": now,
        "host_message": (body.host_message or "").strip() or None,
    }
    if result.status == ViewingStatus.APPROVED.value:
        fields["approved_time"] = parse_instant(body.approved_time)
    elif result.status == ViewingStatus.PROPOSED.value:
        fields["proposed_times"] = [t.strip() for t in body.proposed_times or [] if t.strip()]
    else:
        fields["decline_reason_code"] = (body.decline_reason_code or "").strip()

    updated = repo.update_viewing(body.viewing_id, **fields)
    logger.info("Viewing %s moved to %s by %s", body.viewing_id, result.status, actor.id)
    return {"ok": True, "viewing": _viewing_response(updated)}


@router.get("/{viewing_id}")
def get_viewing(
    viewing_id: str,
    actor: ActorContext = Depends(require_actor),
    repo: MarketplaceRepository = Depends(get_repository),
    config: Config = Depends(get_config),
    now: datetime = Depends(get_now),
):
    """Hosts see the tenant's reliability badge; tenants see their own request."""
    viewing, owner_id = _load_viewing_with_owner(repo, viewing_id)
    is_host = actor.is_admin or actor.owns(owner_id)
    if not (is_host or actor.owns(viewing.get("tenant_id"))):
        raise HTTPException(status_code=403, detail="Forbidden")

    response: dict[str, Any] = {"viewing": _viewing_response(viewing)}
    if is_host:
        history = repo.list_viewings(tenant_id=viewing.get("tenant_id"))
        reliability = summarize_tenant_reliability(history, now, config.reliability_window_days)
        response["tenant_reliability"] = dict(reliability.to_dict(), detail=reliability.describe())
    return response


@router.post("/{viewing_id}/no-show")
def report_no_show(
    viewing_id: str,
    actor: ActorContext = Depends(require_actor),
    repo: MarketplaceRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    viewing, owner_id = _load_viewing_with_owner(repo, viewing_id)
    result = resolve_no_show_report(viewing.get("status"), actor, owner_id)
    raise_for_denial(result, "no-show report")

    updated = repo.update_viewing(viewing_id, status=result.status, no_show_reported_at=now)
    logger.info("Viewing %s reported as no-show by %s", viewing_id, actor.id)
    return {"ok": True, "viewing": _viewing_response(updated)}
