"""
Admin Review Queue - Views, Density and Queue Filtering

The review desk shows one of four views. Query-string values are coerced
to a view (default: pending) and a density (default: comfortable).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Final, Optional

from core.listings.status import ListingStatus, normalize_property_status
from utils.formatting import clean_token


# =============================================================================
# Enums
# =============================================================================


class ReviewView(Enum):
    """Tabs on the admin review desk."""

    PENDING = "pending"
    CHANGES = "changes"
    APPROVED = "approved"
    ALL = "all"


class ReviewDensity(Enum):
    """Row density for the review list."""

    COMFORTABLE = "comfortable"
    COMPACT = "compact"


DEFAULT_VIEW: Final[ReviewView] = ReviewView.PENDING
DEFAULT_DENSITY: Final[ReviewDensity] = ReviewDensity.COMFORTABLE

VIEW_STATUSES: Final[dict[ReviewView, tuple[ListingStatus, ...]]] = {
    ReviewView.PENDING: (ListingStatus.PENDING,),
    ReviewView.CHANGES: (ListingStatus.CHANGES_REQUESTED,),
    ReviewView.APPROVED: (ListingStatus.LIVE,),
    ReviewView.ALL: tuple(ListingStatus),
}


# =============================================================================
# Normalisers
# =============================================================================


def normalize_view(value: object) -> ReviewView:
    """Coerce a raw view parameter; anything unrecognised is 'pending'."""
    if isinstance(value, ReviewView):
        return value
    token = clean_token(value)
    for view in ReviewView:
        if view.value == token:
            return view
    return DEFAULT_VIEW


def normalize_review_density(value: object) -> ReviewDensity:
    """Coerce a raw density parameter; anything unrecognised is 'comfortable'."""
    if isinstance(value, ReviewDensity):
        return value
    token = clean_token(value)
    for density in ReviewDensity:
        if density.value == token:
            return density
    return DEFAULT_DENSITY


def statuses_for_view(view: object) -> tuple[ListingStatus, ...]:
    """Listing statuses shown under a view."""
    return VIEW_STATUSES[normalize_view(view)]


# =============================================================================
# Queue
# =============================================================================


def _row_status(row: Mapping[str, Any]) -> Optional[ListingStatus]:
    return normalize_property_status(row.get("status"))


def is_reviewable_row(row: Mapping[str, Any]) -> bool:
    """A row an admin can approve, reject or send back right now."""
    return _row_status(row) == ListingStatus.PENDING


def is_fix_request_row(row: Mapping[str, Any]) -> bool:
    """A row waiting on the owner to apply requested changes."""
    return _row_status(row) == ListingStatus.CHANGES_REQUESTED


@dataclass(frozen=True)
class ReviewQueue:
    """Filtered, ordered rows for one review view."""

    view: ReviewView
    rows: list[Mapping[str, Any]]

    @property
    def ids(self) -> list[str]:
        return [str(row.get("id")) for row in self.rows]


def _submitted_sort_key(row: Mapping[str, Any]) -> tuple[int, datetime]:
    submitted = row.get("submitted_at")
    if isinstance(submitted, datetime):
        return (0, submitted)
    return (1, datetime.max)


def build_review_queue(rows: Iterable[Mapping[str, Any]], view: object) -> ReviewQueue:
    """
    Filter rows down to a view, oldest submission first.

    Rows without a submission time sort last.
    """
    resolved = normalize_view(view)
    allowed = set(VIEW_STATUSES[resolved])
    selected = [row for row in rows if _row_status(row) in allowed]
    selected.sort(key=_submitted_sort_key)
    return ReviewQueue(view=resolved, rows=selected)
