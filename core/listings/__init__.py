"""
Listing Lifecycle

Status normalisation, owner/admin transitions and expiry for listings.
"""

from core.listings.status import (
    ListingStatus,
    PAUSED_STATUSES,
    SUBMITTABLE_STATUSES,
    STATUS_LABELS,
    normalize_property_status,
    is_paused_status,
    map_status_label,
    can_submit_listing,
)
from core.listings.transitions import (
    ReviewAction,
    normalize_review_action,
    resolve_submit_transition,
    validate_resubmit_status,
    is_resubmit_allowed,
    resolve_resubmit,
    resolve_pause_transition,
    resolve_reactivate_transition,
    resolve_admin_review_decision,
)
from core.listings.expiry import (
    DEFAULT_EXPIRY_DAYS,
    compute_expiry_at,
    is_listing_expired,
)

__all__ = [
    # Status
    "ListingStatus",
    "PAUSED_STATUSES",
    "SUBMITTABLE_STATUSES",
    "STATUS_LABELS",
    "normalize_property_status",
    "is_paused_status",
    "map_status_label",
    "can_submit_listing",
    # Transitions
    "ReviewAction",
    "normalize_review_action",
    "resolve_submit_transition",
    "validate_resubmit_status",
    "is_resubmit_allowed",
    "resolve_resubmit",
    "resolve_pause_transition",
    "resolve_reactivate_transition",
    "resolve_admin_review_decision",
    # Expiry
    "DEFAULT_EXPIRY_DAYS",
    "compute_expiry_at",
    "is_listing_expired",
]
