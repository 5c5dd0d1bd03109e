"""
Admin Review Desk

View/density normalisation, queue filtering and selection helpers.
"""

from core.review.queue import (
    ReviewView,
    ReviewDensity,
    ReviewQueue,
    DEFAULT_VIEW,
    DEFAULT_DENSITY,
    normalize_view,
    normalize_review_density,
    statuses_for_view,
    is_reviewable_row,
    is_fix_request_row,
    build_review_queue,
)
from core.review.selection import (
    SELECTED_ID_PARAM,
    pick_next_id,
    build_selected_url,
    parse_selected_id,
)

__all__ = [
    # Queue
    "ReviewView",
    "ReviewDensity",
    "ReviewQueue",
    "DEFAULT_VIEW",
    "DEFAULT_DENSITY",
    "normalize_view",
    "normalize_review_density",
    "statuses_for_view",
    "is_reviewable_row",
    "is_fix_request_row",
    "build_review_queue",
    # Selection
    "SELECTED_ID_PARAM",
    "pick_next_id",
    "build_selected_url",
    "parse_selected_id",
]
