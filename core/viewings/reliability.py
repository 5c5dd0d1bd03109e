"""
Tenant Viewing Reliability

Coarse reliability badge shown to hosts next to a viewing request. First
matching rule wins:

1. any no-show in the trailing window   -> Mixed
2. any completed viewing in the window  -> Reliable
3. otherwise                            -> Unknown

No scoring, decay or weighting.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Final

from core.viewings.status import ViewingStatus, normalize_viewing_status
from utils.formatting import format_count

DEFAULT_RELIABILITY_WINDOW_DAYS: Final[int] = 90


class ReliabilityLabel(Enum):
    MIXED = "Mixed"
    RELIABLE = "Reliable"
    UNKNOWN = "Unknown"


def _safe_count(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


def derive_reliability(no_show: object, completed: object) -> str:
    """
    Reliability label from no-show and completed counts.

    Malformed or negative counts count as zero.
    """
    if _safe_count(no_show) >= 1:
        return ReliabilityLabel.MIXED.value
    if _safe_count(completed) >= 1:
        return ReliabilityLabel.RELIABLE.value
    return ReliabilityLabel.UNKNOWN.value


@dataclass(frozen=True)
class TenantReliability:
    """Counts within the window plus the derived label."""

    no_show_count: int
    completed_count: int
    label: str
    window_days: int = DEFAULT_RELIABILITY_WINDOW_DAYS

    def describe(self) -> str:
        if self.label == ReliabilityLabel.MIXED.value:
            noun = format_count(self.no_show_count, "no-show")
            return f"({noun} in last {self.window_days} days)"
        if self.label == ReliabilityLabel.RELIABLE.value:
            return f"(no no-shows in last {self.window_days} days)"
        return "(no recent viewing history)"

    def to_dict(self) -> dict:
        return {
            "no_show_count": self.no_show_count,
            "completed_count": self.completed_count,
            "label": self.label,
            "window_days": self.window_days,
        }


def summarize_tenant_reliability(
    viewings: Iterable[Mapping[str, Any]],
    now: datetime,
    window_days: int = DEFAULT_RELIABILITY_WINDOW_DAYS,
) -> TenantReliability:
    """
    Count a tenant's no-shows and completed viewings in the trailing window.

    Each viewing mapping is read for `status`, `no_show_reported_at` and a
    timestamp (`approved_time`, falling back to `created_at`). Rows with no
    usable timestamp are skipped.
    """
    window_start = now - timedelta(days=window_days)
    no_shows = 0
    completed = 0

    for viewing in viewings:
        when = viewing.get("approved_time") or viewing.get("created_at")
        if not isinstance(when, datetime) or when < window_start or when > now:
            continue
        status = normalize_viewing_status(viewing.get("status"))
        if viewing.get("no_show_reported_at") or status == ViewingStatus.NO_SHOW:
            no_shows += 1
        elif status == ViewingStatus.COMPLETED:
            completed += 1

    return TenantReliability(
        no_show_count=no_shows,
        completed_count=completed,
        label=derive_reliability(no_shows, completed),
        window_days=window_days,
    )
