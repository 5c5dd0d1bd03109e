"""
Viewing Requests - Status and Host Responses

A tenant requests a viewing with one to three preferred times. The host
(listing owner) or an admin approves one of those times, proposes new
ones, or declines with a reason. Declined requests can always be
re-requested.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Final, Optional

from core.results import (
    FORBIDDEN,
    INVALID_INPUT,
    INVALID_STATUS_TRANSITION,
    MISSING_FIELD,
    TransitionAllowed,
    TransitionDenied,
    TransitionResult,
)
from core.roles import ActorContext
from utils.dates import parse_instant
from utils.formatting import clean_token


# =============================================================================
# Enums
# =============================================================================


class ViewingStatus(Enum):
    """Status of a viewing request."""

    REQUESTED = "requested"
    APPROVED = "approved"
    PROPOSED = "proposed"  # Host offered alternative times
    DECLINED = "declined"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


class ViewingAction(Enum):
    """Host responses to a viewing request."""

    APPROVE = "approve"
    PROPOSE = "propose"
    DECLINE = "decline"


# =============================================================================
# Constants
# =============================================================================

STATUS_ALIASES: Final[dict[str, ViewingStatus]] = {
    "pending": ViewingStatus.REQUESTED,
    "confirmed": ViewingStatus.APPROVED,
}

# A tenant cannot open a second request while one of these exists
OPEN_STATUSES: Final[frozenset[ViewingStatus]] = frozenset(
    {ViewingStatus.REQUESTED, ViewingStatus.APPROVED, ViewingStatus.PROPOSED}
)

# Statuses the host can still respond to
RESPONDABLE_STATUSES: Final[frozenset[ViewingStatus]] = frozenset(
    {ViewingStatus.REQUESTED, ViewingStatus.PROPOSED}
)

MAX_PREFERRED_TIMES: Final[int] = 3


# =============================================================================
# Normalisers
# =============================================================================


def normalize_viewing_status(value: object) -> Optional[ViewingStatus]:
    """Map a raw status onto ViewingStatus, or None when unrecognised."""
    if isinstance(value, ViewingStatus):
        return value
    token = clean_token(value)
    if token in STATUS_ALIASES:
        return STATUS_ALIASES[token]
    for status in ViewingStatus:
        if status.value == token:
            return status
    return None


def normalize_viewing_action(value: object) -> Optional[ViewingAction]:
    token = clean_token(value)
    for action in ViewingAction:
        if action.value == token:
            return action
    return None


# =============================================================================
# Predicates
# =============================================================================


def can_request_viewing(existing_statuses: Iterable[object]) -> bool:
    """
    True when the tenant has no open request for this listing.

    Declined, cancelled, completed and no-show requests never block a new one.
    """
    return not any(normalize_viewing_status(s) in OPEN_STATUSES for s in existing_statuses)


def _clean_times(times: Optional[Sequence[str]]) -> list[str]:
    return [t.strip() for t in (times or []) if isinstance(t, str) and t.strip()]


def find_invalid_times(times: Optional[Sequence[str]]) -> list[str]:
    """Return the entries that are not readable ISO date-times."""
    return [t for t in _clean_times(times) if parse_instant(t) is None]


def resolve_viewing_response(
    current: object,
    action: object,
    actor: ActorContext,
    owner_id: Optional[str],
    preferred_times: Optional[Sequence[str]] = None,
    approved_time: Optional[str] = None,
    proposed_times: Optional[Sequence[str]] = None,
    decline_reason_code: Optional[str] = None,
) -> TransitionResult:
    """
    Decide whether a host response is valid.

    Args:
        current: Current viewing status
        action: approve | propose | decline
        actor: The responding user
        owner_id: Owner of the listing being viewed
        preferred_times: Tenant's preferred ISO times
        approved_time: Chosen time when approving
        proposed_times: Alternative times when proposing
        decline_reason_code: Reason code when declining

    Returns:
        TransitionAllowed with the new status, or TransitionDenied
    """
    if not (actor.is_admin or actor.owns(owner_id)):
        return TransitionDenied(code=FORBIDDEN, message="Only the host can respond to this request.")

    response = normalize_viewing_action(action)
    if response is None:
        return TransitionDenied(code=INVALID_INPUT, message=f"Unknown action: {action}")

    if normalize_viewing_status(current) not in RESPONDABLE_STATUSES:
        return TransitionDenied(
            code=INVALID_STATUS_TRANSITION,
            message="This viewing request is no longer awaiting a response.",
        )

    if response == ViewingAction.APPROVE:
        chosen = (approved_time or "").strip()
        if not chosen:
            return TransitionDenied(code=MISSING_FIELD, message="approvedTime is required")
        if parse_instant(chosen) is None:
            return TransitionDenied(code=INVALID_INPUT, message="Approved time must be an ISO date-time")
        if chosen not in _clean_times(preferred_times):
            return TransitionDenied(
                code=INVALID_INPUT,
                message="Approved time must match tenant preference",
            )
        return TransitionAllowed(status=ViewingStatus.APPROVED.value)

    if response == ViewingAction.PROPOSE:
        times = _clean_times(proposed_times)
        if not times:
            return TransitionDenied(code=MISSING_FIELD, message="proposedTimes are required")
        if len(times) > MAX_PREFERRED_TIMES:
            return TransitionDenied(
                code=INVALID_INPUT,
                message=f"Propose at most {MAX_PREFERRED_TIMES} times",
            )
        if find_invalid_times(times):
            return TransitionDenied(code=INVALID_INPUT, message="Proposed times must be ISO date-times")
        return TransitionAllowed(status=ViewingStatus.PROPOSED.value)

    if not (decline_reason_code or "").strip():
        return TransitionDenied(code=MISSING_FIELD, message="declineReasonCode is required")
    return TransitionAllowed(status=ViewingStatus.DECLINED.value)


def resolve_no_show_report(
    current: object,
    actor: ActorContext,
    owner_id: Optional[str],
) -> TransitionResult:
    """Hosts can record a no-show only against an approved viewing."""
    if not (actor.is_admin or actor.owns(owner_id)):
        return TransitionDenied(code=FORBIDDEN, message="Only the host can report a no-show.")
    if normalize_viewing_status(current) != ViewingStatus.APPROVED:
        return TransitionDenied(
            code=INVALID_STATUS_TRANSITION,
            message="Only approved viewings can be marked as no-show.",
        )
    return TransitionAllowed(status=ViewingStatus.NO_SHOW.value)
