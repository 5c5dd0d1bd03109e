"""
Payment Return Page - Polling

After checkout the guest lands on a return page that polls the booking
until it settles. Booking status is authoritative: polling continues only
while the booking is pending_payment, and stops immediately on a failed or
refunded payment.
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Optional

from core.shortlets.bookings import (
    TERMINAL_BOOKING_STATUSES,
    ShortletBookingStatus,
    ShortletPaymentStatus,
    is_failure_payment_status,
    normalize_shortlet_booking_status,
    normalize_shortlet_payment_status,
)

DEFAULT_POLL_TIMEOUT_MS: Final[int] = 60_000

FINALISING_TIMEOUT_MESSAGE: Final[str] = (
    "Payment received. Final confirmation is taking longer than usual. "
    "This does not mean your payment failed."
)
GENERIC_TIMEOUT_MESSAGE: Final[str] = (
    "Confirmation is taking longer than usual. "
    "Recheck now or contact support if this keeps happening."
)


class PollingStopReason(Enum):
    CONTINUE = "continue"
    TERMINAL_PAYMENT = "terminal_payment"
    TIMEOUT = "timeout"
    TERMINAL_BOOKING = "terminal_booking"


class PollingAction(Enum):
    CONTINUE = "continue"
    STOP = "stop"
    FINAL_FETCH_THEN_STOP = "final_fetch_then_wait_then_stop"


class ReturnUiState(Enum):
    PROCESSING = "processing"
    FINALISING = "finalising"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    REFUNDED = "refunded"
    CLOSED = "closed"


def polling_stop_reason(
    booking_status: object,
    payment_status: object,
    elapsed_ms: int,
    timeout_ms: int = DEFAULT_POLL_TIMEOUT_MS,
) -> PollingStopReason:
    if is_failure_payment_status(payment_status):
        return PollingStopReason.TERMINAL_PAYMENT
    if elapsed_ms >= timeout_ms:
        return PollingStopReason.TIMEOUT
    status = normalize_shortlet_booking_status(booking_status)
    if status is not None and status != ShortletBookingStatus.PENDING_PAYMENT:
        return PollingStopReason.TERMINAL_BOOKING
    return PollingStopReason.CONTINUE


def should_poll(
    booking_status: object,
    payment_status: object,
    elapsed_ms: int,
    timeout_ms: int = DEFAULT_POLL_TIMEOUT_MS,
) -> bool:
    """An unknown booking status keeps polling until the timeout."""
    reason = polling_stop_reason(booking_status, payment_status, elapsed_ms, timeout_ms)
    return reason == PollingStopReason.CONTINUE


def resolve_polling_action(
    booking_status: object,
    payment_status: object,
    elapsed_ms: int,
    final_fetch_done: bool,
    timeout_ms: int = DEFAULT_POLL_TIMEOUT_MS,
) -> PollingAction:
    """On timeout, fetch once more before giving up."""
    if should_poll(booking_status, payment_status, elapsed_ms, timeout_ms):
        return PollingAction.CONTINUE
    if elapsed_ms >= timeout_ms and not final_fetch_done:
        return PollingAction.FINAL_FETCH_THEN_STOP
    return PollingAction.STOP


def is_finalising(booking_status: object, payment_status: object) -> bool:
    """Payment succeeded but the booking has not caught up yet."""
    return (
        normalize_shortlet_booking_status(booking_status) == ShortletBookingStatus.PENDING_PAYMENT
        and normalize_shortlet_payment_status(payment_status) == ShortletPaymentStatus.SUCCEEDED
    )


def resolve_return_ui_state(booking_status: object, payment_status: object) -> ReturnUiState:
    booking: Optional[ShortletBookingStatus] = normalize_shortlet_booking_status(booking_status)
    payment: Optional[ShortletPaymentStatus] = normalize_shortlet_payment_status(payment_status)

    if payment == ShortletPaymentStatus.REFUNDED:
        return ReturnUiState.REFUNDED
    if is_finalising(booking, payment):
        return ReturnUiState.FINALISING
    if booking == ShortletBookingStatus.CONFIRMED:
        return ReturnUiState.CONFIRMED
    if booking == ShortletBookingStatus.PENDING:
        return ReturnUiState.PENDING
    if booking in TERMINAL_BOOKING_STATUSES:
        return ReturnUiState.CLOSED
    if payment == ShortletPaymentStatus.FAILED:
        return ReturnUiState.FAILED
    return ReturnUiState.PROCESSING


def resolve_timeout_message(booking_status: object, payment_status: object) -> str:
    if is_finalising(booking_status, payment_status):
        return FINALISING_TIMEOUT_MESSAGE
    return GENERIC_TIMEOUT_MESSAGE
