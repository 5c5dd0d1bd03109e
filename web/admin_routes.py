"""
Admin Routes - Review Desk and Shortlet Payouts

All routes require an admin caller. Non-admins receive 403 Forbidden.

Routes:
- GET  /api/admin/review                          - Review queue for a view
- POST /api/admin/review/{id}/decision            - Approve / reject / request changes
- GET  /api/admin/shortlet/payouts                - Payout table
- POST /api/admin/shortlet/payouts/{id}/mark-paid - Settle a payout
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from core.listings import (
    ListingStatus,
    compute_expiry_at,
    map_status_label,
    resolve_admin_review_decision,
)
from core.repository import MarketplaceRepository
from core.results import (
    INVALID_STATUS,
    INVALID_STATUS_TRANSITION,
    TransitionDenied,
)
from core.review import (
    build_review_queue,
    build_selected_url,
    normalize_review_density,
    pick_next_id,
)
from core.roles import ActorContext
from core.shortlets import (
    MarkPaidAction,
    PayoutStatus,
    filter_payouts,
    is_booking_eligible_for_payout,
    resolve_mark_paid_transition,
)
from utils.config import Config
from utils.formatting import format_currency
from web.deps import get_config, get_now, get_repository, raise_for_denial, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

REVIEW_PATH = "/admin/review"


class ReviewDecisionRequest(BaseModel):
    action: str
    view: Optional[str] = None
    note: Optional[str] = None


class MarkPaidRequest(BaseModel):
    paid_ref: Optional[str] = None
    note: Optional[str] = None


# =============================================================================
# Review Desk
# =============================================================================


def _review_row(row: dict[str, Any]) -> dict[str, Any]:
    submitted = row.get("submitted_at")
    return {
        "id": row["id"],
        "title": row.get("title"),
        "owner_id": row.get("owner_id"),
        "status": row.get("status"),
        "status_label": map_status_label(row.get("status")),
        "submitted_at": submitted.isoformat() if isinstance(submitted, datetime) else None,
    }


@router.get("/review")
def review_queue(
    view: Optional[str] = Query(None),
    id: Optional[str] = Query(None),
    density: Optional[str] = Query(None),
    admin: ActorContext = Depends(require_admin),
    repo: MarketplaceRepository = Depends(get_repository),
):
    """
    Listings under a review view, oldest submission first.

    The selected id falls back to the first row when the requested one is
    not in the view.
    """
    queue = build_review_queue(repo.list_listings(), view)
    selected = id if id in queue.ids else (queue.ids[0] if queue.ids else None)
    return {
        "view": queue.view.value,
        "density": normalize_review_density(density).value,
        "count": len(queue.rows),
        "selected_id": selected,
        "rows": [_review_row(row) for row in queue.rows],
    }


@router.post("/review/{property_id}/decision")
def review_decision(
    property_id: str,
    body: ReviewDecisionRequest,
    admin: ActorContext = Depends(require_admin),
    repo: MarketplaceRepository = Depends(get_repository),
    config: Config = Depends(get_config),
    now: datetime = Depends(get_now),
):
    listing = repo.get_listing(property_id)
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")

    result = resolve_admin_review_decision(listing.get("status"), body.action)
    raise_for_denial(result, "review decision")

    # Selection moves to the neighbour of the row leaving the queue
    queue = build_review_queue(repo.list_listings(), body.view)
    next_id = pick_next_id(queue.ids, property_id)

    fields: dict[str, Any] = {
        "status": result.status,
        "reviewed_at": now,
        "reviewed_by": admin.id,
        "review_note": (body.note or "").strip() or None,
        "updated_at": now,
    }
    if result.status == ListingStatus.LIVE.value:
        fields["is_approved"] = True
        fields["expires_at"] = compute_expiry_at(now, config.listing_expiry_days)

    updated = repo.update_listing(property_id, **fields)
    logger.info("Admin %s set listing %s to %s", admin.id, property_id, result.status)

    return {
        "ok": True,
        "id": property_id,
        "status": updated["status"],
        "status_label": map_status_label(updated["status"]),
        "next_id": next_id,
        "next_url": build_selected_url(REVIEW_PATH, next_id, {"view": queue.view.value}),
    }


# =============================================================================
# Shortlet Payouts
# =============================================================================


def _with_booking(repo: MarketplaceRepository, payout: dict[str, Any]) -> dict[str, Any]:
    booking = repo.get_booking(str(payout.get("booking_id") or "")) or {}
    row = dict(payout)
    row["booking_status"] = booking.get("status")
    row["check_in"] = booking.get("check_in")
    row["check_out"] = booking.get("check_out")
    return row


def _payout_response(row: dict[str, Any]) -> dict[str, Any]:
    paid_at = row.get("paid_at")
    amount = row.get("amount_minor") or 0
    currency = row.get("currency") or "NGN"
    return {
        "id": row["id"],
        "booking_id": row.get("booking_id"),
        "host_user_id": row.get("host_user_id"),
        "amount_minor": amount,
        "currency": currency,
        "amount_display": format_currency(amount, currency),
        "status": row.get("status"),
        "paid_at": paid_at.isoformat() if isinstance(paid_at, datetime) else None,
        "paid_ref": row.get("paid_ref"),
        "booking_status": row.get("booking_status"),
        "check_out": row.get("check_out"),
    }


@router.get("/shortlet/payouts")
def list_payouts(
    status: Optional[str] = Query(None),
    admin: ActorContext = Depends(require_admin),
    repo: MarketplaceRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    """Payouts joined with their booking; eligible rows only once payable."""
    rows = [_with_booking(repo, payout) for payout in repo.list_payouts()]
    visible = filter_payouts(rows, status, now)
    return {
        "count": len(visible),
        "payouts": [_payout_response(row) for row in visible],
    }


@router.post("/shortlet/payouts/{payout_id}/mark-paid")
def mark_payout_paid(
    payout_id: str,
    body: MarkPaidRequest,
    admin: ActorContext = Depends(require_admin),
    repo: MarketplaceRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    payout = repo.get_payout(payout_id)
    if not payout:
        raise HTTPException(status_code=404, detail="Payout not found")

    action = resolve_mark_paid_transition(payout.get("status"))
    if action == MarkPaidAction.ALREADY_PAID:
        raise_for_denial(TransitionDenied(code="ALREADY_PAID", message="Payout is already paid."))
    if action == MarkPaidAction.BLOCKED:
        raise_for_denial(TransitionDenied(code=INVALID_STATUS, message="Payout cannot be marked paid."))

    row = _with_booking(repo, payout)
    if not is_booking_eligible_for_payout(row["booking_status"], row["check_out"], now):
        raise_for_denial(
            TransitionDenied(
                code=INVALID_STATUS_TRANSITION,
                message="Booking is not yet eligible for payout.",
            ),
            "mark paid",
        )

    updated = repo.update_payout(
        payout_id,
        status=PayoutStatus.PAID.value,
        paid_at=now,
        paid_ref=(body.paid_ref or "").strip() or None,
        note=(body.note or "").strip() or None,
        updated_at=now,
    )
    logger.info("Admin %s marked payout %s paid", admin.id, payout_id)
    return {"ok": True, "payout": _payout_response(_with_booking(repo, updated))}
