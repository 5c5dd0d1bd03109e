"""
Shortlet Bookings

Booking/payment status, host inbox, payouts and payment-return polling.
"""

from core.shortlets.bookings import (
    ShortletBookingStatus,
    ShortletPaymentStatus,
    HostResponseAction,
    BookingWindow,
    DEFAULT_RESPONSE_WINDOW_HOURS,
    TERMINAL_BOOKING_STATUSES,
    CLOSED_BOOKING_STATUSES,
    normalize_shortlet_booking_status,
    normalize_shortlet_payment_status,
    parse_booking_date,
    is_terminal_booking_status,
    is_terminal_payment_status,
    is_failure_payment_status,
    blocks_availability,
    can_cancel_booking,
    resolve_host_booking_response,
    can_host_manage_booking,
    require_host_manage,
    can_view_tenant_bookings,
    compute_respond_by,
    is_response_window_open,
    classify_booking_window,
    resolve_realtime_booking_status_update,
)
from core.shortlets.inbox import (
    HostInboxFilter,
    parse_host_inbox_filter,
    resolve_respond_by,
    is_awaiting_approval,
    resolve_host_inbox_filter,
    filter_host_inbox,
    count_awaiting_approval,
    format_respond_by_countdown,
)
from core.shortlets.payouts import (
    PayoutStatus,
    MarkPaidAction,
    normalize_payout_status,
    is_booking_eligible_for_payout,
    resolve_mark_paid_transition,
    filter_payouts,
)
from core.shortlets.returns import (
    DEFAULT_POLL_TIMEOUT_MS,
    PollingStopReason,
    PollingAction,
    ReturnUiState,
    polling_stop_reason,
    should_poll,
    resolve_polling_action,
    is_finalising,
    resolve_return_ui_state,
    resolve_timeout_message,
)

__all__ = [
    # Bookings
    "ShortletBookingStatus",
    "ShortletPaymentStatus",
    "HostResponseAction",
    "BookingWindow",
    "DEFAULT_RESPONSE_WINDOW_HOURS",
    "TERMINAL_BOOKING_STATUSES",
    "CLOSED_BOOKING_STATUSES",
    "normalize_shortlet_booking_status",
    "normalize_shortlet_payment_status",
    "parse_booking_date",
    "is_terminal_booking_status",
    "is_terminal_payment_status",
    "is_failure_payment_status",
    "blocks_availability",
    "can_cancel_booking",
    "resolve_host_booking_response",
    "can_host_manage_booking",
    "require_host_manage",
    "can_view_tenant_bookings",
    "compute_respond_by",
    "is_response_window_open",
    "classify_booking_window",
    "resolve_realtime_booking_status_update",
    # Inbox
    "HostInboxFilter",
    "parse_host_inbox_filter",
    "resolve_respond_by",
    "is_awaiting_approval",
    "resolve_host_inbox_filter",
    "filter_host_inbox",
    "count_awaiting_approval",
    "format_respond_by_countdown",
    # Payouts
    "PayoutStatus",
    "MarkPaidAction",
    "normalize_payout_status",
    "is_booking_eligible_for_payout",
    "resolve_mark_paid_transition",
    "filter_payouts",
    # Return polling
    "DEFAULT_POLL_TIMEOUT_MS",
    "PollingStopReason",
    "PollingAction",
    "ReturnUiState",
    "polling_stop_reason",
    "should_poll",
    "resolve_polling_action",
    "is_finalising",
    "resolve_return_ui_state",
    "resolve_timeout_message",
]
