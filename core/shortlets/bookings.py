"""
Shortlet Bookings - Status Lifecycle

Booking lifecycle:

    pending_payment --(payment succeeds)--> pending | confirmed
    pending --(host accepts)--> confirmed
    pending --(host declines / 12h window lapses)--> declined | expired
    pending | confirmed --(guest cancels)--> cancelled
    confirmed --(stay ends)--> completed

Statuses are normalised from raw strings; unknown values become None and
never propagate. The response deadline (respond_by) is enforced by the
database; the helpers here only compute and read it.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Final, Optional

from core.results import (
    FORBIDDEN,
    INVALID_INPUT,
    INVALID_STATUS_TRANSITION,
    TransitionAllowed,
    TransitionDenied,
    TransitionResult,
)
from core.roles import ActorContext, UserRole, normalize_role
from utils.formatting import clean_token


# =============================================================================
# Enums
# =============================================================================


class ShortletBookingStatus(Enum):
    """Status of a shortlet booking."""

    PENDING_PAYMENT = "pending_payment"
    PENDING = "pending"  # Paid, awaiting host response
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    COMPLETED = "completed"


class ShortletPaymentStatus(Enum):
    """Status of the payment attached to a booking."""

    INITIATED = "initiated"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"


class HostResponseAction(Enum):
    ACCEPT = "accept"
    DECLINE = "decline"


class BookingWindow(Enum):
    """Trip buckets for guest and host booking lists."""

    INCOMING = "incoming"
    UPCOMING = "upcoming"
    PAST = "past"


# =============================================================================
# Constants
# =============================================================================

DEFAULT_RESPONSE_WINDOW_HOURS: Final[int] = 12

# Everything except pending_payment is terminal from the payment-return page's view
TERMINAL_BOOKING_STATUSES: Final[frozenset[ShortletBookingStatus]] = frozenset(
    {
        ShortletBookingStatus.PENDING,
        ShortletBookingStatus.CONFIRMED,
        ShortletBookingStatus.DECLINED,
        ShortletBookingStatus.CANCELLED,
        ShortletBookingStatus.EXPIRED,
        ShortletBookingStatus.COMPLETED,
    }
)

# No further transitions once a booking reaches one of these
CLOSED_BOOKING_STATUSES: Final[frozenset[ShortletBookingStatus]] = frozenset(
    {
        ShortletBookingStatus.DECLINED,
        ShortletBookingStatus.CANCELLED,
        ShortletBookingStatus.EXPIRED,
        ShortletBookingStatus.COMPLETED,
    }
)

TERMINAL_PAYMENT_STATUSES: Final[frozenset[ShortletPaymentStatus]] = frozenset(
    {ShortletPaymentStatus.SUCCEEDED, ShortletPaymentStatus.FAILED, ShortletPaymentStatus.REFUNDED}
)

FAILURE_PAYMENT_STATUSES: Final[frozenset[ShortletPaymentStatus]] = frozenset(
    {ShortletPaymentStatus.FAILED, ShortletPaymentStatus.REFUNDED}
)

AVAILABILITY_BLOCKING_STATUSES: Final[frozenset[ShortletBookingStatus]] = frozenset(
    {
        ShortletBookingStatus.PENDING_PAYMENT,
        ShortletBookingStatus.PENDING,
        ShortletBookingStatus.CONFIRMED,
    }
)

CANCELLABLE_STATUSES: Final[frozenset[ShortletBookingStatus]] = frozenset(
    {ShortletBookingStatus.PENDING, ShortletBookingStatus.CONFIRMED}
)

HOST_RESPONSE_OUTCOMES: Final[dict[HostResponseAction, ShortletBookingStatus]] = {
    HostResponseAction.ACCEPT: ShortletBookingStatus.CONFIRMED,
    HostResponseAction.DECLINE: ShortletBookingStatus.DECLINED,
}

# Forward order used to drop stale realtime events
STATUS_RANK: Final[dict[ShortletBookingStatus, int]] = {
    ShortletBookingStatus.PENDING_PAYMENT: 0,
    ShortletBookingStatus.PENDING: 1,
    ShortletBookingStatus.CONFIRMED: 2,
    ShortletBookingStatus.DECLINED: 3,
    ShortletBookingStatus.CANCELLED: 3,
    ShortletBookingStatus.EXPIRED: 3,
    ShortletBookingStatus.COMPLETED: 3,
}

ISO_DATE_PATTERN: Final = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


# =============================================================================
# Normalisers
# =============================================================================


def normalize_shortlet_booking_status(value: object) -> Optional[ShortletBookingStatus]:
    """Map a raw booking status, or None when unrecognised."""
    if isinstance(value, ShortletBookingStatus):
        return value
    token = clean_token(value)
    for status in ShortletBookingStatus:
        if status.value == token:
            return status
    return None


def normalize_shortlet_payment_status(value: object) -> Optional[ShortletPaymentStatus]:
    """Map a raw payment status, or None when unrecognised."""
    if isinstance(value, ShortletPaymentStatus):
        return value
    token = clean_token(value)
    for status in ShortletPaymentStatus:
        if status.value == token:
            return status
    return None


def parse_booking_date(value: object) -> Optional[date]:
    """Parse a YYYY-MM-DD check-in/check-out value; anything else is None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    match = ISO_DATE_PATTERN.match(value.strip())
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


# =============================================================================
# Predicates
# =============================================================================


def is_terminal_booking_status(value: object) -> bool:
    return normalize_shortlet_booking_status(value) in TERMINAL_BOOKING_STATUSES


def is_terminal_payment_status(value: object) -> bool:
    return normalize_shortlet_payment_status(value) in TERMINAL_PAYMENT_STATUSES


def is_failure_payment_status(value: object) -> bool:
    return normalize_shortlet_payment_status(value) in FAILURE_PAYMENT_STATUSES


def blocks_availability(value: object) -> bool:
    """True when a booking in this status holds its dates."""
    return normalize_shortlet_booking_status(value) in AVAILABILITY_BLOCKING_STATUSES


def can_cancel_booking(value: object) -> bool:
    return normalize_shortlet_booking_status(value) in CANCELLABLE_STATUSES


def resolve_host_booking_response(current: object, action: object) -> TransitionResult:
    """Hosts can only accept or decline a booking that is pending."""
    token = clean_token(action)
    response = next((a for a in HostResponseAction if a.value == token), None)
    if response is None:
        return TransitionDenied(code=INVALID_INPUT, message=f"Unknown action: {action}")
    if normalize_shortlet_booking_status(current) != ShortletBookingStatus.PENDING:
        return TransitionDenied(
            code=INVALID_STATUS_TRANSITION,
            message="Only pending bookings can be accepted or declined.",
        )
    return TransitionAllowed(status=HOST_RESPONSE_OUTCOMES[response].value)


def can_host_manage_booking(
    actor: ActorContext,
    host_user_id: Optional[str],
    has_delegation: bool = False,
) -> bool:
    """Owner, admin, or an agent holding an active delegation from the host."""
    if actor.is_admin or actor.owns(host_user_id):
        return True
    return actor.role == UserRole.AGENT and has_delegation


def require_host_manage(
    actor: ActorContext,
    host_user_id: Optional[str],
    has_delegation: bool = False,
) -> TransitionResult:
    if can_host_manage_booking(actor, host_user_id, has_delegation):
        return TransitionAllowed(changed=False)
    return TransitionDenied(code=FORBIDDEN, message="Forbidden")


def can_view_tenant_bookings(role: object) -> bool:
    return normalize_role(role) == UserRole.TENANT


# =============================================================================
# Response Window
# =============================================================================


def compute_respond_by(created_at: datetime, hours: int = DEFAULT_RESPONSE_WINDOW_HOURS) -> datetime:
    """Deadline for the host to respond to a booking created at `created_at`."""
    return created_at + timedelta(hours=hours)


def is_response_window_open(respond_by: Optional[datetime], now: datetime) -> bool:
    """A missing deadline counts as open; the database is authoritative."""
    if respond_by is None:
        return True
    return now < respond_by


# =============================================================================
# Trip Buckets
# =============================================================================


def classify_booking_window(
    status: object,
    check_in: object,
    check_out: object,
    now: datetime,
) -> BookingWindow:
    """
    Bucket a booking for trip lists.

    Pending requests are incoming, confirmed stays that have not ended are
    upcoming, everything else is past.
    """
    booking_status = normalize_shortlet_booking_status(status)
    checkout = parse_booking_date(check_out) or parse_booking_date(check_in)
    ended = checkout is not None and checkout < now.date()

    if booking_status in (ShortletBookingStatus.PENDING_PAYMENT, ShortletBookingStatus.PENDING):
        return BookingWindow.PAST if ended else BookingWindow.INCOMING
    if booking_status == ShortletBookingStatus.CONFIRMED and not ended:
        return BookingWindow.UPCOMING
    return BookingWindow.PAST


# =============================================================================
# Realtime Updates
# =============================================================================


def resolve_realtime_booking_status_update(
    current: object,
    incoming: object,
) -> Optional[ShortletBookingStatus]:
    """
    Decide whether a pushed status change should replace the displayed one.

    Returns the status to display, or None to ignore the event. Events are
    ignored when the incoming status is unknown or unchanged, when it moves
    backwards (a late pending_payment after pending), or when the booking is
    already closed.
    """
    next_status = normalize_shortlet_booking_status(incoming)
    if next_status is None:
        return None

    current_status = normalize_shortlet_booking_status(current)
    if current_status is None:
        return next_status
    if next_status == current_status:
        return None
    if current_status in CLOSED_BOOKING_STATUSES:
        return None
    if STATUS_RANK[next_status] < STATUS_RANK[current_status]:
        return None
    return next_status
