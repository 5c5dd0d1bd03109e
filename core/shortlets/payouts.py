"""
Shortlet Host Payouts

A payout row is created as `eligible` once a booking is paid. Admins mark
it `paid` after settling with the host, but only after the stay is over.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Final, Optional

from core.shortlets.bookings import (
    ShortletBookingStatus,
    normalize_shortlet_booking_status,
    parse_booking_date,
)
from utils.formatting import clean_token


class PayoutStatus(Enum):
    ELIGIBLE = "eligible"
    PAID = "paid"


class MarkPaidAction(Enum):
    """What the mark-paid endpoint should do with a payout."""

    MARK_PAID = "mark_paid"
    ALREADY_PAID = "already_paid"
    BLOCKED = "blocked"


PAYABLE_BOOKING_STATUSES: Final[frozenset[ShortletBookingStatus]] = frozenset(
    {ShortletBookingStatus.CONFIRMED, ShortletBookingStatus.COMPLETED}
)


def normalize_payout_status(value: object) -> Optional[PayoutStatus]:
    if isinstance(value, PayoutStatus):
        return value
    token = clean_token(value)
    for status in PayoutStatus:
        if status.value == token:
            return status
    return None


def is_booking_eligible_for_payout(status: object, check_out: object, now: datetime) -> bool:
    """
    True once a confirmed stay has checked out; completed stays always are.

    The checkout date is compared against today's UTC date, so a stay
    checking out today is already payable. A confirmed stay with a
    malformed date is never eligible.
    """
    booking_status = normalize_shortlet_booking_status(status)
    if booking_status == ShortletBookingStatus.COMPLETED:
        return True
    if booking_status not in PAYABLE_BOOKING_STATUSES:
        return False
    checkout = parse_booking_date(check_out)
    if checkout is None:
        return False
    return checkout <= now.date()


def resolve_mark_paid_transition(status: object) -> MarkPaidAction:
    payout_status = normalize_payout_status(status)
    if payout_status == PayoutStatus.ELIGIBLE:
        return MarkPaidAction.MARK_PAID
    if payout_status == PayoutStatus.PAID:
        return MarkPaidAction.ALREADY_PAID
    return MarkPaidAction.BLOCKED


def filter_payouts(
    rows: Iterable[Mapping[str, Any]],
    status: object,
    now: datetime,
) -> list[Mapping[str, Any]]:
    """
    Rows for the admin payouts table.

    `status` is eligible, paid or all (anything unrecognised means all).
    Eligible rows are only listed once the underlying booking qualifies.
    """
    wanted = normalize_payout_status(status)
    result = []
    for row in rows:
        row_status = normalize_payout_status(row.get("status"))
        if wanted is not None and row_status != wanted:
            continue
        if row_status == PayoutStatus.ELIGIBLE and not is_booking_eligible_for_payout(
            row.get("booking_status"), row.get("check_out"), now
        ):
            continue
        result.append(row)
    return result
