"""
Host Bookings Inbox

Sorts a host's bookings into the inbox tabs and renders the response
countdown. Rows are plain mappings read for `status`, `check_in`,
`check_out`, `respond_by` and `expires_at`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Final, Optional

from core.shortlets.bookings import (
    DEFAULT_RESPONSE_WINDOW_HOURS,
    ShortletBookingStatus,
    normalize_shortlet_booking_status,
    parse_booking_date,
)
from utils.dates import parse_instant
from utils.formatting import clean_token


class HostInboxFilter(Enum):
    AWAITING_APPROVAL = "awaiting_approval"
    UPCOMING = "upcoming"
    PAST = "past"
    CLOSED = "closed"


FILTER_ALIASES: Final[dict[str, HostInboxFilter]] = {
    "awaiting": HostInboxFilter.AWAITING_APPROVAL,
    "pending": HostInboxFilter.AWAITING_APPROVAL,
    "cancelled": HostInboxFilter.CLOSED,
}

# Never shown to hosts; the guest has not paid yet
HIDDEN_STATUSES: Final[frozenset[ShortletBookingStatus]] = frozenset(
    {ShortletBookingStatus.PENDING_PAYMENT}
)


def parse_host_inbox_filter(value: object) -> Optional[HostInboxFilter]:
    token = clean_token(value)
    if token in FILTER_ALIASES:
        return FILTER_ALIASES[token]
    for inbox_filter in HostInboxFilter:
        if inbox_filter.value == token:
            return inbox_filter
    return None


def resolve_respond_by(row: Mapping[str, Any]) -> Optional[datetime]:
    """respond_by, falling back to the legacy expires_at column."""
    return parse_instant(row.get("respond_by")) or parse_instant(row.get("expires_at"))


def is_awaiting_approval(row: Mapping[str, Any], now: datetime) -> bool:
    """Pending and still inside the response window."""
    if normalize_shortlet_booking_status(row.get("status")) != ShortletBookingStatus.PENDING:
        return False
    deadline = resolve_respond_by(row)
    return deadline is None or deadline > now


def resolve_host_inbox_filter(row: Mapping[str, Any], now: datetime) -> HostInboxFilter:
    status = normalize_shortlet_booking_status(row.get("status"))

    if status == ShortletBookingStatus.PENDING:
        if is_awaiting_approval(row, now):
            return HostInboxFilter.AWAITING_APPROVAL
        return HostInboxFilter.CLOSED
    if status == ShortletBookingStatus.COMPLETED:
        return HostInboxFilter.PAST
    if status == ShortletBookingStatus.CONFIRMED:
        checkout = parse_booking_date(row.get("check_out"))
        if checkout is not None and checkout < now.date():
            return HostInboxFilter.PAST
        return HostInboxFilter.UPCOMING
    return HostInboxFilter.CLOSED


def filter_host_inbox(
    rows: Iterable[Mapping[str, Any]],
    inbox_filter: HostInboxFilter,
    now: datetime,
) -> list[Mapping[str, Any]]:
    return [
        row
        for row in rows
        if normalize_shortlet_booking_status(row.get("status")) not in HIDDEN_STATUSES
        and resolve_host_inbox_filter(row, now) == inbox_filter
    ]


def count_awaiting_approval(rows: Iterable[Mapping[str, Any]], now: datetime) -> int:
    return sum(1 for row in rows if is_awaiting_approval(row, now))


def format_respond_by_countdown(
    respond_by: object,
    now: datetime,
    window_hours: int = DEFAULT_RESPONSE_WINDOW_HOURS,
) -> str:
    """
    Human label for the time left to respond.

    >>> format_respond_by_countdown("2026-01-01T12:30:00Z", datetime(2026, 1, 1, 10, 0))
    '2h 30m left in the 12-hour response window.'
    """
    deadline = parse_instant(respond_by)
    if deadline is None:
        return f"Host response window: {window_hours} hours."

    remaining = (deadline - now).total_seconds()
    if remaining <= 0:
        return f"{window_hours}-hour response window elapsed."

    total_minutes = max(1, int(remaining // 60))
    hours, minutes = divmod(total_minutes, 60)
    suffix = f"left in the {window_hours}-hour response window."
    if hours <= 0:
        return f"{minutes}m {suffix}"
    if minutes <= 0:
        return f"{hours}h {suffix}"
    return f"{hours}h {minutes}m {suffix}"
