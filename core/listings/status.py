"""
Listing Status - Closed Enum and Normalisers

Listings are created in DRAFT, move to PENDING on submit, and an admin
moves them to LIVE, REJECTED or CHANGES_REQUESTED. Owners can pause a live
listing and live listings expire after a configurable number of days.

Raw status values come from query strings and database rows. Every
normaliser here is total: unknown input yields None or a safe label.
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Optional

from utils.formatting import clean_token


# =============================================================================
# Enums
# =============================================================================


class ListingStatus(Enum):
    """Lifecycle status of a listing."""

    # Owner-side states
    DRAFT = "draft"
    PENDING = "pending"  # Submitted, awaiting admin review

    # Review outcomes
    LIVE = "live"
    REJECTED = "rejected"
    CHANGES_REQUESTED = "changes_requested"

    # Post-publication states
    PAUSED_OWNER = "paused_owner"
    PAUSED_OCCUPIED = "paused_occupied"
    EXPIRED = "expired"


# =============================================================================
# Constants
# =============================================================================

STATUS_ALIASES: Final[dict[str, ListingStatus]] = {
    "paused": ListingStatus.PAUSED_OWNER,
}

PAUSED_STATUSES: Final[frozenset[ListingStatus]] = frozenset(
    {ListingStatus.PAUSED_OWNER, ListingStatus.PAUSED_OCCUPIED}
)

# Statuses an owner may submit for review
SUBMITTABLE_STATUSES: Final[frozenset[ListingStatus]] = frozenset(
    {ListingStatus.DRAFT, ListingStatus.REJECTED, ListingStatus.CHANGES_REQUESTED}
)

STATUS_LABELS: Final[dict[ListingStatus, str]] = {
    ListingStatus.DRAFT: "Draft",
    ListingStatus.PENDING: "Pending review",
    ListingStatus.LIVE: "Live",
    ListingStatus.REJECTED: "Rejected",
    ListingStatus.CHANGES_REQUESTED: "Changes requested",
    ListingStatus.PAUSED_OWNER: "Paused (owner hold)",
    ListingStatus.PAUSED_OCCUPIED: "Paused (occupied)",
    ListingStatus.EXPIRED: "Expired",
}

UNKNOWN_STATUS_LABEL: Final[str] = "Unknown"


# =============================================================================
# Normalisers
# =============================================================================


def normalize_property_status(value: object) -> Optional[ListingStatus]:
    """
    Map a raw status value onto ListingStatus.

    Args:
        value: Raw value (string, enum member, or anything else)

    Returns:
        The matching ListingStatus, or None when unrecognised
    """
    if isinstance(value, ListingStatus):
        return value
    token = clean_token(value)
    if token in STATUS_ALIASES:
        return STATUS_ALIASES[token]
    for status in ListingStatus:
        if status.value == token:
            return status
    return None


def is_paused_status(value: object) -> bool:
    """True for any paused variant, including the legacy 'paused'."""
    return normalize_property_status(value) in PAUSED_STATUSES


def map_status_label(value: object) -> str:
    """Human-readable label for a listing status."""
    status = normalize_property_status(value)
    if status is None:
        return UNKNOWN_STATUS_LABEL
    return STATUS_LABELS[status]


def can_submit_listing(value: object) -> bool:
    """True when an owner may submit a listing in this status for review."""
    return normalize_property_status(value) in SUBMITTABLE_STATUSES
