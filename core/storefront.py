"""
Agent Storefronts and Listing CTAs

Public agent storefronts live at /agents/<slug>. Access is resolved in a
fixed order (global switch, slug, profile lookup, per-agent switch, role)
and the first failure decides what the page shows. The CTA helper picks
the single primary button on a listing card.
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Optional

from core.listings.status import ListingStatus, normalize_property_status
from core.results import TransitionAllowed, TransitionDenied, TransitionResult
from core.roles import ActorContext, UserRole, normalize_role


# =============================================================================
# Access
# =============================================================================

GLOBAL_DISABLED: Final[str] = "GLOBAL_DISABLED"
MISSING_SLUG: Final[str] = "MISSING_SLUG"
NOT_FOUND: Final[str] = "NOT_FOUND"
AGENT_DISABLED: Final[str] = "AGENT_DISABLED"
NOT_AGENT: Final[str] = "NOT_AGENT"

ACCESS_MESSAGES: Final[dict[str, str]] = {
    GLOBAL_DISABLED: "Agent storefronts are currently turned off.",
    MISSING_SLUG: "No storefront was requested.",
    NOT_FOUND: "We couldn't find that agent.",
    AGENT_DISABLED: "This agent has paused their storefront.",
    NOT_AGENT: "This profile does not have a storefront.",
}

# Denials shown as a "temporarily unavailable" page rather than a 404
UNAVAILABLE_CODES: Final[frozenset[str]] = frozenset({GLOBAL_DISABLED, AGENT_DISABLED})


def _deny(code: str) -> TransitionDenied:
    return TransitionDenied(code=code, message=ACCESS_MESSAGES[code])


def resolve_storefront_access(
    slug: Optional[str],
    global_enabled: bool,
    agent_found: bool,
    agent_role: object = None,
    agent_enabled: Optional[bool] = True,
) -> TransitionResult:
    """
    Decide whether a storefront can be shown.

    A missing per-agent switch (None) counts as enabled.
    """
    if not global_enabled:
        return _deny(GLOBAL_DISABLED)
    if not (slug or "").strip():
        return _deny(MISSING_SLUG)
    if not agent_found:
        return _deny(NOT_FOUND)
    if agent_enabled is False:
        return _deny(AGENT_DISABLED)
    if normalize_role(agent_role) != UserRole.AGENT:
        return _deny(NOT_AGENT)
    return TransitionAllowed(changed=False)


class StorefrontViewState(Enum):
    REDIRECT = "redirect"
    UNAVAILABLE = "unavailable"
    NOT_FOUND = "not_found"
    EMPTY = "empty"
    READY = "ready"


def resolve_storefront_view_state(
    access: TransitionResult,
    listing_count: object = 0,
    redirect_slug: Optional[str] = None,
) -> StorefrontViewState:
    """
    Page state for a storefront request.

    A legacy slug that resolved to a current one always redirects.
    """
    if (redirect_slug or "").strip():
        return StorefrontViewState.REDIRECT
    if isinstance(access, TransitionDenied):
        if access.code in UNAVAILABLE_CODES:
            return StorefrontViewState.UNAVAILABLE
        return StorefrontViewState.NOT_FOUND
    count = listing_count if isinstance(listing_count, int) and not isinstance(listing_count, bool) else 0
    if count <= 0:
        return StorefrontViewState.EMPTY
    return StorefrontViewState.READY


# =============================================================================
# Listing CTA
# =============================================================================


class CtaState(Enum):
    MANAGE = "manage"
    SIGN_IN = "sign_in"
    BOOK = "book"
    REQUEST_VIEWING = "request_viewing"
    VIEWING_REQUESTED = "viewing_requested"
    UNAVAILABLE = "unavailable"


def derive_cta_state(
    listing_status: object,
    viewer: Optional[ActorContext],
    owner_id: Optional[str],
    is_shortlet: bool = False,
    has_open_viewing: bool = False,
) -> CtaState:
    """Primary call-to-action for a listing card or detail page."""
    if viewer is not None and (viewer.is_admin or viewer.owns(owner_id)):
        return CtaState.MANAGE
    if normalize_property_status(listing_status) != ListingStatus.LIVE:
        return CtaState.UNAVAILABLE
    if viewer is None or not viewer.is_authenticated:
        return CtaState.SIGN_IN
    if is_shortlet:
        return CtaState.BOOK
    if has_open_viewing:
        return CtaState.VIEWING_REQUESTED
    return CtaState.REQUEST_VIEWING
