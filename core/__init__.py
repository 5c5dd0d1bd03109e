"""
Marketplace Lifecycle Engine - Core Business Logic

Pure, total functions over listing, viewing and shortlet booking rows:

1. Status normalisation (raw strings -> closed enums, never raising)
2. Transition predicates (allow/deny values with stable denial codes)
3. Derived display state (reliability, delivery ticks, trust badge, CTAs)
4. Admin review queue selection

Persistence lives in core.repository; HTTP lives in web/.
"""

from .results import (
    TransitionAllowed,
    TransitionDenied,
    TransitionResult,
    denial_http_status,
)
from .roles import UserRole, ActorContext, normalize_role

from .listings import (
    ListingStatus,
    normalize_property_status,
    map_status_label,
    resolve_submit_transition,
    validate_resubmit_status,
    is_resubmit_allowed,
    resolve_pause_transition,
    resolve_reactivate_transition,
    resolve_admin_review_decision,
)
from .review import (
    ReviewView,
    ReviewDensity,
    normalize_view,
    normalize_review_density,
    pick_next_id,
    build_review_queue,
)
from .viewings import (
    ViewingStatus,
    ReliabilityLabel,
    resolve_viewing_response,
    derive_reliability,
    summarize_tenant_reliability,
)
from .shortlets import (
    ShortletBookingStatus,
    ShortletPaymentStatus,
    PayoutStatus,
    normalize_shortlet_booking_status,
    resolve_realtime_booking_status_update,
    is_booking_eligible_for_payout,
    resolve_mark_paid_transition,
)
from .messaging import DeliveryState, derive_delivery_state
from .trust import VerificationStatus, compute_verification_status, public_trust_label
from .storefront import (
    StorefrontViewState,
    CtaState,
    resolve_storefront_access,
    resolve_storefront_view_state,
    derive_cta_state,
)

__all__ = [
    # Results and roles
    "TransitionAllowed",
    "TransitionDenied",
    "TransitionResult",
    "denial_http_status",
    "UserRole",
    "ActorContext",
    "normalize_role",
    # Listings
    "ListingStatus",
    "normalize_property_status",
    "map_status_label",
    "resolve_submit_transition",
    "validate_resubmit_status",
    "is_resubmit_allowed",
    "resolve_pause_transition",
    "resolve_reactivate_transition",
    "resolve_admin_review_decision",
    # Review
    "ReviewView",
    "ReviewDensity",
    "normalize_view",
    "normalize_review_density",
    "pick_next_id",
    "build_review_queue",
    # Viewings
    "ViewingStatus",
    "ReliabilityLabel",
    "resolve_viewing_response",
    "derive_reliability",
    "summarize_tenant_reliability",
    # Shortlets
    "ShortletBookingStatus",
    "ShortletPaymentStatus",
    "PayoutStatus",
    "normalize_shortlet_booking_status",
    "resolve_realtime_booking_status_update",
    "is_booking_eligible_for_payout",
    "resolve_mark_paid_transition",
    # Messaging, trust, storefront
    "DeliveryState",
    "derive_delivery_state",
    "VerificationStatus",
    "compute_verification_status",
    "public_trust_label",
    "StorefrontViewState",
    "CtaState",
    "resolve_storefront_access",
    "resolve_storefront_view_state",
    "derive_cta_state",
]
