"""
Transition Results - Allow/Deny Values for Lifecycle Predicates

Every transition predicate in the lifecycle layer returns one of these
values instead of raising. Route handlers translate a denial into an HTTP
status with denial_http_status().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Optional, Union


# =============================================================================
# Denial Codes
# =============================================================================

FORBIDDEN: Final[str] = "FORBIDDEN"
NOT_OWNER: Final[str] = "NOT_OWNER"
INVALID_STATUS: Final[str] = "INVALID_STATUS"
INVALID_STATUS_TRANSITION: Final[str] = "INVALID_STATUS_TRANSITION"
NOT_APPROVED: Final[str] = "NOT_APPROVED"
MISSING_FIELD: Final[str] = "MISSING_FIELD"
INVALID_INPUT: Final[str] = "INVALID_INPUT"

FORBIDDEN_CODES: Final[frozenset[str]] = frozenset({FORBIDDEN, NOT_OWNER})
CONFLICT_CODES: Final[frozenset[str]] = frozenset(
    {INVALID_STATUS_TRANSITION, NOT_APPROVED}
)


# =============================================================================
# Result Types
# =============================================================================


@dataclass(frozen=True)
class TransitionAllowed:
    """Returned when a transition may proceed."""

    status: Optional[str] = None  # Target status, when the transition sets one
    changed: bool = True  # False when the caller has nothing to write

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class TransitionDenied:
    """Returned when a transition is not allowed."""

    code: str
    message: str

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {"ok": False, "code": self.code, "message": self.message}


TransitionResult = Union[TransitionAllowed, TransitionDenied]


def denial_http_status(code: str) -> int:
    """Map a denial code to the HTTP status a route handler should return."""
    if code in FORBIDDEN_CODES:
        return 403
    if code in CONFLICT_CODES or code.startswith("ALREADY_"):
        return 409
    return 400
