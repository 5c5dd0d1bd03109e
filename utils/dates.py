"""
Timestamp parsing for values read from rows, headers and request bodies.

Everything in the lifecycle layer compares naive UTC datetimes.
"""

from datetime import datetime, timezone
from typing import Optional


def parse_instant(value: object) -> Optional[datetime]:
    """Parse an ISO timestamp into a naive UTC datetime; None when unusable."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
