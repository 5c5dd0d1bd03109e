"""
Admin Review Selection - List Cursor and Selected-Id URLs

The review desk keeps the selected listing in the `id` query parameter.
After an admin acts on a row the row leaves the list and focus moves to a
neighbour: the successor, else the predecessor, else nothing.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, Optional, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

SELECTED_ID_PARAM: Final[str] = "id"


def pick_next_id(ids: Sequence[str], removed_id: Optional[str] = None) -> Optional[str]:
    """
    Choose the id to focus after `removed_id` leaves the list.

    Args:
        ids: Ordered ids as currently displayed (may still contain removed_id)
        removed_id: The id being removed

    Returns:
        The successor of removed_id; failing that its predecessor; None when
        nothing else remains. If removed_id is not in the list, the first
        remaining id.
    """
    items = [item for item in ids if isinstance(item, str) and item]
    if removed_id not in items:
        remaining = [item for item in items if item != removed_id]
        return remaining[0] if remaining else None

    index = items.index(removed_id)
    for candidate in items[index + 1:]:
        if candidate != removed_id:
            return candidate
    for candidate in reversed(items[:index]):
        if candidate != removed_id:
            return candidate
    return None


def _clean_id(value: object) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def build_selected_url(
    path: str,
    selected_id: Optional[str],
    params: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Build the review URL with `id` set to selected_id.

    Existing query parameters on `path` and in `params` are kept. A missing
    or blank selected_id removes the parameter entirely.
    """
    parts = urlsplit(path or "")
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != SELECTED_ID_PARAM]
    for key, value in (params or {}).items():
        if key == SELECTED_ID_PARAM:
            continue
        query = [(k, v) for k, v in query if k != key]
        query.append((key, value))

    clean = _clean_id(selected_id)
    if clean:
        query.append((SELECTED_ID_PARAM, clean))

    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def parse_selected_id(source: Union[str, Mapping[str, object], None]) -> Optional[str]:
    """Read the selected id from a URL or a query-parameter mapping."""
    if source is None:
        return None
    if isinstance(source, str):
        query = dict(parse_qsl(urlsplit(source).query, keep_blank_values=True))
        return _clean_id(query.get(SELECTED_ID_PARAM))
    if isinstance(source, Mapping):
        return _clean_id(source.get(SELECTED_ID_PARAM))
    return None
