"""
Listing expiry windows.

Live listings expire a fixed number of days after they were (re)activated.
The day count comes from Config.listing_expiry_days and is passed in.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Final, Optional

from core.listings.status import ListingStatus, normalize_property_status

DEFAULT_EXPIRY_DAYS: Final[int] = 90


def compute_expiry_at(now: datetime, days: Optional[int] = DEFAULT_EXPIRY_DAYS) -> Optional[datetime]:
    """Expiry timestamp for a listing activated at `now`; None means never."""
    if not isinstance(days, int) or days <= 0:
        return None
    return now + timedelta(days=days)


def is_listing_expired(status: object, expires_at: Optional[datetime], now: datetime) -> bool:
    """Only live listings expire, and only once their expiry time has passed."""
    if normalize_property_status(status) != ListingStatus.LIVE:
        return False
    if expires_at is None:
        return False
    return expires_at <= now
