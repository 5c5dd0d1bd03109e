"""
Shortlet Booking Routes

Routes:
- GET  /api/shortlet/bookings/inbox               - Host bookings inbox
- POST /api/shortlet/bookings/{id}/respond        - Host accepts or declines
- POST /api/shortlet/bookings/{id}/cancel         - Guest cancels
- GET  /api/shortlet/bookings/{id}/return-status  - Payment return page poll
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from core.repository import MarketplaceRepository
from core.results import INVALID_STATUS_TRANSITION, TransitionDenied
from core.roles import ActorContext
from core.shortlets import (
    HostInboxFilter,
    ShortletBookingStatus,
    can_cancel_booking,
    count_awaiting_approval,
    filter_host_inbox,
    format_respond_by_countdown,
    is_response_window_open,
    parse_host_inbox_filter,
    require_host_manage,
    resolve_host_booking_response,
    resolve_polling_action,
    resolve_respond_by,
    resolve_return_ui_state,
    resolve_timeout_message,
)
from utils.config import Config
from utils.formatting import format_currency
from web.deps import get_config, get_now, get_repository, raise_for_denial, require_actor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/shortlet/bookings", tags=["shortlets"])


class HostResponseBody(BaseModel):
    action: str
    note: Optional[str] = None


def _load_booking(repo: MarketplaceRepository, booking_id: str) -> dict[str, Any]:
    booking = repo.get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


def _has_delegation(booking: dict[str, Any], actor: ActorContext) -> bool:
    return actor.id in (booking.get("delegate_agent_ids") or [])


def _booking_response(booking: dict[str, Any]) -> dict[str, Any]:
    amount = booking.get("total_amount_minor") or 0
    currency = booking.get("currency") or "NGN"
    respond_by = resolve_respond_by(booking)
    return {
        "id": booking["id"],
        "property_id": booking.get("property_id"),
        "guest_user_id": booking.get("guest_user_id"),
        "host_user_id": booking.get("host_user_id"),
        "status": booking.get("status"),
        "check_in": booking.get("check_in"),
        "check_out": booking.get("check_out"),
        "total_display": format_currency(amount, currency),
        "respond_by": respond_by.isoformat() if respond_by else None,
    }


@router.get("/inbox")
def host_inbox(
    filter: Optional[str] = Query(None),
    actor: ActorContext = Depends(require_actor),
    repo: MarketplaceRepository = Depends(get_repository),
    config: Config = Depends(get_config),
    now: datetime = Depends(get_now),
):
    """
    A host's bookings under one inbox tab.

    Unknown or missing filters open the awaiting-approval tab. Admins see
    every host's bookings.
    """
    inbox_filter = parse_host_inbox_filter(filter) or HostInboxFilter.AWAITING_APPROVAL
    rows = repo.list_bookings() if actor.is_admin else repo.list_bookings(host_user_id=actor.id)
    visible = filter_host_inbox(rows, inbox_filter, now)

    bookings = []
    for row in visible:
        item = _booking_response(row)
        if inbox_filter == HostInboxFilter.AWAITING_APPROVAL:
            item["countdown"] = format_respond_by_countdown(
                resolve_respond_by(row), now, config.shortlet_response_window_hours
            )
        bookings.append(item)

    return {
        "filter": inbox_filter.value,
        "awaiting_approval_count": count_awaiting_approval(rows, now),
        "bookings": bookings,
    }


@router.post("/{booking_id}/respond")
def respond_to_booking(
    booking_id: str,
    body: HostResponseBody,
    actor: ActorContext = Depends(require_actor),
    repo: MarketplaceRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    booking = _load_booking(repo, booking_id)
    raise_for_denial(
        require_host_manage(actor, booking.get("host_user_id"), _has_delegation(booking, actor)),
        "booking response",
    )

    result = resolve_host_booking_response(booking.get("status"), body.action)
    raise_for_denial(result, "booking response")

    if not is_response_window_open(resolve_respond_by(booking), now):
        repo.update_booking(booking_id, status=ShortletBookingStatus.EXPIRED.value, updated_at=now)
        logger.info("Booking %s expired before host response", booking_id)
        raise_for_denial(
            TransitionDenied(
                code=INVALID_STATUS_TRANSITION,
                message="The 12-hour response window has elapsed.",
            ),
            "booking response",
        )

    updated = repo.update_booking(
        booking_id,
        status=result.status,
        host_note=(body.note or "").strip() or None,
        responded_at=now,
        updated_at=now,
    )
    logger.info("Booking %s moved to %s by %s", booking_id, result.status, actor.id)
    return {"ok": True, "booking": _booking_response(updated)}


@router.post("/{booking_id}/cancel")
def cancel_booking(
    booking_id: str,
    actor: ActorContext = Depends(require_actor),
    repo: MarketplaceRepository = Depends(get_repository),
    now: datetime = Depends(get_now),
):
    booking = _load_booking(repo, booking_id)
    if not (actor.is_admin or actor.owns(booking.get("guest_user_id"))):
        raise HTTPException(status_code=403, detail="Only the guest can cancel this booking")
    if not can_cancel_booking(booking.get("status")):
        raise_for_denial(
            TransitionDenied(
                code=INVALID_STATUS_TRANSITION,
                message="Only pending or confirmed bookings can be cancelled.",
            ),
            "booking cancel",
        )

    updated = repo.update_booking(
        booking_id,
        status=ShortletBookingStatus.CANCELLED.value,
        cancelled_at=now,
        updated_at=now,
    )
    logger.info("Booking %s cancelled by %s", booking_id, actor.id)
    return {"ok": True, "booking": _booking_response(updated)}


@router.get("/{booking_id}/return-status")
def return_status(
    booking_id: str,
    elapsed_ms: int = Query(0, ge=0),
    final_fetch_done: bool = Query(False),
    actor: ActorContext = Depends(require_actor),
    repo: MarketplaceRepository = Depends(get_repository),
    config: Config = Depends(get_config),
):
    """Polled by the payment return page until the booking settles."""
    booking = _load_booking(repo, booking_id)
    if not (actor.is_admin or actor.owns(booking.get("guest_user_id"))):
        raise HTTPException(status_code=403, detail="Forbidden")

    booking_status = booking.get("status")
    payment_status = booking.get("payment_status")
    action = resolve_polling_action(
        booking_status,
        payment_status,
        elapsed_ms,
        final_fetch_done,
        timeout_ms=config.shortlet_poll_timeout_ms,
    )
    timed_out = elapsed_ms >= config.shortlet_poll_timeout_ms
    return {
        "booking_status": booking_status,
        "payment_status": payment_status,
        "ui_state": resolve_return_ui_state(booking_status, payment_status).value,
        "action": action.value,
        "timeout_message": resolve_timeout_message(booking_status, payment_status) if timed_out else None,
    }
