"""
Viewing Requests

Status normalisation, host responses and tenant reliability.
"""

from core.viewings.status import (
    ViewingStatus,
    ViewingAction,
    OPEN_STATUSES,
    RESPONDABLE_STATUSES,
    MAX_PREFERRED_TIMES,
    normalize_viewing_status,
    normalize_viewing_action,
    can_request_viewing,
    find_invalid_times,
    resolve_viewing_response,
    resolve_no_show_report,
)
from core.viewings.reliability import (
    ReliabilityLabel,
    TenantReliability,
    DEFAULT_RELIABILITY_WINDOW_DAYS,
    derive_reliability,
    summarize_tenant_reliability,
)

__all__ = [
    "ViewingStatus",
    "ViewingAction",
    "OPEN_STATUSES",
    "RESPONDABLE_STATUSES",
    "MAX_PREFERRED_TIMES",
    "normalize_viewing_status",
    "normalize_viewing_action",
    "can_request_viewing",
    "find_invalid_times",
    "resolve_viewing_response",
    "resolve_no_show_report",
    "ReliabilityLabel",
    "TenantReliability",
    "DEFAULT_RELIABILITY_WINDOW_DAYS",
    "derive_reliability",
    "summarize_tenant_reliability",
]
