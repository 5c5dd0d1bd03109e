"""
Trust Markers

Per-user verification flags (email, phone, bank) aggregated into a coarse
public badge. Identity counts as verified once both email and phone are
verified; bank verification is tracked but does not affect the badge.

Only the badge is meant for public pages. The raw flags and timestamps
stay with the owner and admins.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Optional


class OverallVerification(Enum):
    VERIFIED = "verified"
    PENDING = "pending"


IDENTITY_VERIFIED_LABEL: Final[str] = "Identity verified"
IDENTITY_PENDING_LABEL: Final[str] = "Identity pending"


@dataclass(frozen=True)
class VerificationStatus:
    """Verification flags for one user."""

    email_verified: bool = False
    phone_verified: bool = False
    bank_verified: bool = False
    email_verified_at: Optional[str] = None
    phone_verified_at: Optional[str] = None
    bank_verified_at: Optional[str] = None
    phone_e164: Optional[str] = None
    bank_provider: Optional[str] = None

    @property
    def overall(self) -> OverallVerification:
        if self.email_verified and self.phone_verified:
            return OverallVerification.VERIFIED
        return OverallVerification.PENDING

    def to_dict(self) -> dict[str, Any]:
        """Full status for the owner's settings page; not for public use."""
        return {
            "overall": self.overall.value,
            "email": {"verified": self.email_verified, "verified_at": self.email_verified_at},
            "phone": {
                "verified": self.phone_verified,
                "verified_at": self.phone_verified_at,
                "phone_e164": self.phone_e164,
            },
            "bank": {
                "verified": self.bank_verified,
                "verified_at": self.bank_verified_at,
                "provider": self.bank_provider,
            },
        }


def compute_verification_status(
    email_verified_at: Optional[str] = None,
    phone_verified_at: Optional[str] = None,
    bank_verified_at: Optional[str] = None,
    phone_e164: Optional[str] = None,
    bank_provider: Optional[str] = None,
) -> VerificationStatus:
    """A flag is set when its timestamp is present and non-empty."""
    return VerificationStatus(
        email_verified=bool(email_verified_at),
        phone_verified=bool(phone_verified_at),
        bank_verified=bool(bank_verified_at),
        email_verified_at=email_verified_at or None,
        phone_verified_at=phone_verified_at or None,
        bank_verified_at=bank_verified_at or None,
        phone_e164=phone_e164 or None,
        bank_provider=bank_provider or None,
    )


def public_trust_label(status: VerificationStatus) -> str:
    if status.overall == OverallVerification.VERIFIED:
        return IDENTITY_VERIFIED_LABEL
    return IDENTITY_PENDING_LABEL


def public_trust_markers(status: VerificationStatus) -> dict[str, Any]:
    return {
        "identity_verified": status.overall == OverallVerification.VERIFIED,
        "label": public_trust_label(status),
    }
