"""
Listing Transitions - Submit, Resubmit, Pause, Reactivate, Review

Each predicate takes the current status plus actor attributes and returns a
TransitionResult. Nothing here writes; the caller applies an allowed
transition to the listing row.

Transition table:
- submit:       draft | rejected | changes_requested -> pending
                pending | live -> no-op (idempotent)
- resubmit:     changes_requested -> pending (owner or admin)
- pause:        live -> paused_owner | paused_occupied (reason required)
- reactivate:   paused_* -> live (non-admins need an approved listing)
- admin review: pending -> live | rejected | changes_requested
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Optional

from core.listings.status import (
    ListingStatus,
    PAUSED_STATUSES,
    SUBMITTABLE_STATUSES,
    normalize_property_status,
)
from core.results import (
    FORBIDDEN,
    INVALID_INPUT,
    INVALID_STATUS,
    INVALID_STATUS_TRANSITION,
    MISSING_FIELD,
    NOT_APPROVED,
    TransitionAllowed,
    TransitionDenied,
    TransitionResult,
)
from core.roles import ActorContext, UserRole, normalize_role
from utils.formatting import clean_token


# =============================================================================
# Enums
# =============================================================================


class ReviewAction(Enum):
    """Decisions an admin can take on a pending listing."""

    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_CHANGES = "request_changes"


REVIEW_OUTCOMES: Final[dict[ReviewAction, ListingStatus]] = {
    ReviewAction.APPROVE: ListingStatus.LIVE,
    ReviewAction.REJECT: ListingStatus.REJECTED,
    ReviewAction.REQUEST_CHANGES: ListingStatus.CHANGES_REQUESTED,
}


def normalize_review_action(value: object) -> Optional[ReviewAction]:
    token = clean_token(value)
    for action in ReviewAction:
        if action.value == token:
            return action
    return None


# =============================================================================
# Submit / Resubmit
# =============================================================================


def resolve_submit_transition(current: object) -> TransitionResult:
    """
    Decide what submitting a listing does.

    Already pending or live listings are left alone so that repeated
    submits are harmless.
    """
    status = normalize_property_status(current)
    if status in (ListingStatus.PENDING, ListingStatus.LIVE):
        return TransitionAllowed(status=status.value, changed=False)
    if status in SUBMITTABLE_STATUSES:
        return TransitionAllowed(status=ListingStatus.PENDING.value)
    return TransitionDenied(
        code=INVALID_STATUS_TRANSITION,
        message=f"Listings in status '{current}' cannot be submitted.",
    )


def validate_resubmit_status(current: object) -> TransitionResult:
    """Resubmission is only possible from exactly 'changes_requested'."""
    if normalize_property_status(current) == ListingStatus.CHANGES_REQUESTED:
        return TransitionAllowed(status=ListingStatus.PENDING.value)
    return TransitionDenied(
        code=INVALID_STATUS,
        message="Only listings with requested changes can be resubmitted.",
    )


def is_resubmit_allowed(role: object, owner_id: Optional[str], user_id: Optional[str]) -> bool:
    """
    True iff the actor is an admin or owns the listing.

    Args:
        role: Actor role (raw or UserRole)
        owner_id: Listing owner id
        user_id: Acting user id
    """
    if normalize_role(role) == UserRole.ADMIN:
        return True
    return bool(user_id) and owner_id == user_id


def resolve_resubmit(
    current: object,
    actor: ActorContext,
    owner_id: Optional[str],
) -> TransitionResult:
    """Combine the actor check and the status check for a resubmit request."""
    if not is_resubmit_allowed(actor.role, owner_id, actor.id):
        return TransitionDenied(code=FORBIDDEN, message="Only the owner or an admin can resubmit.")
    return validate_resubmit_status(current)


# =============================================================================
# Pause / Reactivate
# =============================================================================


def resolve_pause_transition(
    current: object,
    requested: object,
    paused_reason: Optional[str],
) -> TransitionResult:
    """
    Decide whether a live listing may be paused.

    Args:
        current: Current listing status
        requested: Requested paused status ('paused', 'paused_owner', 'paused_occupied')
        paused_reason: Free-text reason; must not be blank
    """
    target = normalize_property_status(requested)
    if target not in PAUSED_STATUSES:
        return TransitionDenied(code=INVALID_INPUT, message="Requested status is not a pause status.")
    if not (paused_reason or "").strip():
        return TransitionDenied(code=MISSING_FIELD, message="Pause reason is required")
    if normalize_property_status(current) != ListingStatus.LIVE:
        return TransitionDenied(
            code=INVALID_STATUS_TRANSITION,
            message="Only live listings can be paused.",
        )
    return TransitionAllowed(status=target.value)


def resolve_reactivate_transition(
    current: object,
    actor: ActorContext,
    is_approved: Optional[bool],
) -> TransitionResult:
    """Paused listings go back live; non-admins need a previously approved listing."""
    if normalize_property_status(current) not in PAUSED_STATUSES:
        return TransitionDenied(code=INVALID_STATUS_TRANSITION, message="Listing is not paused.")
    if not actor.is_admin and is_approved is not True:
        return TransitionDenied(
            code=NOT_APPROVED,
            message="Listing must be approved before reactivating.",
        )
    return TransitionAllowed(status=ListingStatus.LIVE.value)


# =============================================================================
# Admin Review
# =============================================================================


def resolve_admin_review_decision(current: object, action: object) -> TransitionResult:
    """Map an admin decision on a pending listing to its outcome status."""
    decision = normalize_review_action(action)
    if decision is None:
        return TransitionDenied(code=INVALID_INPUT, message=f"Unknown review action: {action}")
    if normalize_property_status(current) != ListingStatus.PENDING:
        return TransitionDenied(
            code=INVALID_STATUS_TRANSITION,
            message="Only pending listings can be reviewed.",
        )
    return TransitionAllowed(status=REVIEW_OUTCOMES[decision].value)
