"""
Marketplace Repository - In-Memory Storage for Lifecycle Rows

Holds listings, viewing requests, shortlet bookings and payouts as plain
row dicts, the same shape the lifecycle functions read. This is an
in-memory implementation with optional JSON persistence for development;
production rows live in the hosted database.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Final, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# Tables
# =============================================================================

LISTINGS: Final[str] = "listings"
VIEWINGS: Final[str] = "viewings"
BOOKINGS: Final[str] = "bookings"
PAYOUTS: Final[str] = "payouts"

TABLES: Final[tuple[str, ...]] = (LISTINGS, VIEWINGS, BOOKINGS, PAYOUTS)

# Stored as ISO strings on disk, restored to datetimes on load
DATETIME_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "created_at",
        "updated_at",
        "submitted_at",
        "reviewed_at",
        "expires_at",
        "paused_at",
        "approved_time",
        "no_show_reported_at",
        "respond_by",
        "paid_at",
    }
)


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _decode_row(row: dict[str, Any]) -> dict[str, Any]:
    decoded = dict(row)
    for key in DATETIME_FIELDS & decoded.keys():
        raw = decoded[key]
        if isinstance(raw, str):
            try:
                decoded[key] = datetime.fromisoformat(raw)
            except ValueError:
                decoded[key] = None
    return decoded


# =============================================================================
# Repository
# =============================================================================


class MarketplaceRepository:
    """
    Repository for marketplace lifecycle rows.

    Every row carries a string `id`. Reads return copies so callers can't
    mutate stored rows behind the repository's back.
    """

    def __init__(self, persist_path: Optional[str] = None):
        """
        Initialise repository.

        Args:
            persist_path: Optional path to persist data to a JSON file
        """
        self._tables: dict[str, dict[str, dict[str, Any]]] = {name: {} for name in TABLES}
        self._persist_path = Path(persist_path) if persist_path else None

        if self._persist_path and self._persist_path.exists():
            self._load_from_file()

    def _save_to_file(self) -> None:
        if not self._persist_path:
            return

        data = {
            name: {
                row_id: {key: _encode(value) for key, value in row.items()}
                for row_id, row in rows.items()
            }
            for name, rows in self._tables.items()
        }
        data["saved_at"] = datetime.utcnow().isoformat()

        self._persist_path.parent.mkdir(parents=True, exist_ok=True)
        self._persist_path.write_text(json.dumps(data, indent=2))

    def _load_from_file(self) -> None:
        try:
            data = json.loads(self._persist_path.read_text())
            for name in TABLES:
                for row_id, row in data.get(name, {}).items():
                    self._tables[name][row_id] = _decode_row(row)
        except (json.JSONDecodeError, AttributeError, ValueError) as e:
            # Start fresh rather than refuse to boot
            logger.warning("Could not load repository data from %s: %s", self._persist_path, e)
            self._tables = {name: {} for name in TABLES}

    # =========================================================================
    # Generic Operations
    # =========================================================================

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new row.

        Raises:
            ValueError: If the row has no id or the id already exists
        """
        row_id = str(row.get("id") or "").strip()
        if not row_id:
            raise ValueError(f"Row for {table} has no id")
        rows = self._tables[table]
        if row_id in rows:
            raise ValueError(f"{table} row {row_id} already exists")

        stored = dict(row, id=row_id)
        rows[row_id] = stored
        self._save_to_file()
        logger.debug("Inserted %s row %s", table, row_id)
        return dict(stored)

    def get(self, table: str, row_id: str) -> Optional[dict[str, Any]]:
        row = self._tables[table].get(row_id)
        return dict(row) if row is not None else None

    def update(self, table: str, row_id: str, **fields: Any) -> Optional[dict[str, Any]]:
        """Merge fields into a row; None if the row doesn't exist."""
        row = self._tables[table].get(row_id)
        if row is None:
            return None

        fields.pop("id", None)
        row.update(fields)
        self._save_to_file()
        logger.debug("Updated %s row %s: %s", table, row_id, sorted(fields))
        return dict(row)

    def delete(self, table: str, row_id: str) -> bool:
        if row_id in self._tables[table]:
            del self._tables[table][row_id]
            self._save_to_file()
            return True
        return False

    def query(self, table: str, **filters: Any) -> list[dict[str, Any]]:
        """Rows whose fields equal every given filter, in insertion order."""
        return [
            dict(row)
            for row in self._tables[table].values()
            if all(row.get(key) == value for key, value in filters.items())
        ]

    def count(self, table: str) -> int:
        return len(self._tables[table])

    # =========================================================================
    # Listings
    # =========================================================================

    def add_listing(self, row: dict[str, Any]) -> dict[str, Any]:
        return self.insert(LISTINGS, row)

    def get_listing(self, listing_id: str) -> Optional[dict[str, Any]]:
        return self.get(LISTINGS, listing_id)

    def update_listing(self, listing_id: str, **fields: Any) -> Optional[dict[str, Any]]:
        return self.update(LISTINGS, listing_id, **fields)

    def list_listings(self, **filters: Any) -> list[dict[str, Any]]:
        return self.query(LISTINGS, **filters)

    # =========================================================================
    # Viewings
    # =========================================================================

    def add_viewing(self, row: dict[str, Any]) -> dict[str, Any]:
        return self.insert(VIEWINGS, row)

    def get_viewing(self, viewing_id: str) -> Optional[dict[str, Any]]:
        return self.get(VIEWINGS, viewing_id)

    def update_viewing(self, viewing_id: str, **fields: Any) -> Optional[dict[str, Any]]:
        return self.update(VIEWINGS, viewing_id, **fields)

    def list_viewings(self, **filters: Any) -> list[dict[str, Any]]:
        return self.query(VIEWINGS, **filters)

    # =========================================================================
    # Shortlet Bookings
    # =========================================================================

    def add_booking(self, row: dict[str, Any]) -> dict[str, Any]:
        return self.insert(BOOKINGS, row)

    def get_booking(self, booking_id: str) -> Optional[dict[str, Any]]:
        return self.get(BOOKINGS, booking_id)

    def update_booking(self, booking_id: str, **fields: Any) -> Optional[dict[str, Any]]:
        return self.update(BOOKINGS, booking_id, **fields)

    def list_bookings(self, **filters: Any) -> list[dict[str, Any]]:
        return self.query(BOOKINGS, **filters)

    # =========================================================================
    # Payouts
    # =========================================================================

    def add_payout(self, row: dict[str, Any]) -> dict[str, Any]:
        return self.insert(PAYOUTS, row)

    def get_payout(self, payout_id: str) -> Optional[dict[str, Any]]:
        return self.get(PAYOUTS, payout_id)

    def update_payout(self, payout_id: str, **fields: Any) -> Optional[dict[str, Any]]:
        return self.update(PAYOUTS, payout_id, **fields)

    def list_payouts(self, **filters: Any) -> list[dict[str, Any]]:
        return self.query(PAYOUTS, **filters)

    def count_by_status(self, table: str) -> dict[str, int]:
        counts: dict[str, int] = {}
        for row in self._tables[table].values():
            status = str(row.get("status") or "unknown")
            counts[status] = counts.get(status, 0) + 1
        return counts


# =============================================================================
# Singleton Instance
# =============================================================================

_repository_instance: Optional[MarketplaceRepository] = None


def get_marketplace_repository(persist_path: Optional[str] = None) -> MarketplaceRepository:
    """
    Get the marketplace repository singleton.

    Args:
        persist_path: Optional path for persistence (only used on first call)
    """
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = MarketplaceRepository(persist_path)
    return _repository_instance


def reset_marketplace_repository() -> None:
    """Drop the singleton (for testing)."""
    global _repository_instance
    _repository_instance = None
