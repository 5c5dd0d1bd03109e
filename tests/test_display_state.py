"""
Tests for Derived Display State

Tests covering:
1. Message delivery ticks default to delivered
2. Trust badge from verification flags, without leaking raw flags
3. Storefront access order and page state
4. Listing call-to-action
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pytest

from core.messaging import (
    DeliveryState,
    count_delivery_states,
    derive_delivery_state,
    format_delivery_state,
)
from core.results import TransitionAllowed
from core.roles import ActorContext, UserRole
from core.storefront import (
    AGENT_DISABLED,
    GLOBAL_DISABLED,
    MISSING_SLUG,
    NOT_AGENT,
    NOT_FOUND,
    CtaState,
    StorefrontViewState,
    derive_cta_state,
    resolve_storefront_access,
    resolve_storefront_view_state,
)
from core.trust import (
    OverallVerification,
    compute_verification_status,
    public_trust_label,
    public_trust_markers,
)


# =============================================================================
# Messaging
# =============================================================================


@dataclass
class Message:
    body: str
    delivery_state: Optional[str] = None


class TestDeliveryState:
    def test_reads_mapping_and_attribute(self):
        assert derive_delivery_state({"delivery_state": "read"}) == DeliveryState.READ
        assert derive_delivery_state(Message("hi", "SENT")) == DeliveryState.SENT

    def test_defaults_to_delivered(self):
        assert derive_delivery_state({}) == DeliveryState.DELIVERED
        assert derive_delivery_state({"delivery_state": "bounced"}) == DeliveryState.DELIVERED
        assert derive_delivery_state(Message("hi")) == DeliveryState.DELIVERED
        assert derive_delivery_state(None) == DeliveryState.DELIVERED

    def test_labels(self):
        assert format_delivery_state(DeliveryState.READ) == "Read"
        assert format_delivery_state("sent") == "Sent"
        assert format_delivery_state("???") == "Delivered"

    def test_counts(self):
        messages = [{"delivery_state": "read"}, {}, Message("x", "sent"), {"delivery_state": "read"}]
        assert count_delivery_states(messages) == {"sent": 1, "delivered": 1, "read": 2}


# =============================================================================
# Trust
# =============================================================================


class TestTrustMarkers:
    def test_verified_needs_email_and_phone(self):
        status = compute_verification_status(
            email_verified_at="2026-01-01T00:00:00Z",
            phone_verified_at="2026-01-02T00:00:00Z",
        )
        assert status.overall == OverallVerification.VERIFIED
        assert public_trust_label(status) == "Identity verified"

    def test_bank_alone_is_pending(self):
        status = compute_verification_status(bank_verified_at="2026-01-01T00:00:00Z")
        assert status.bank_verified
        assert status.overall == OverallVerification.PENDING
        assert public_trust_label(status) == "Identity pending"

    def test_empty_timestamps_are_unverified(self):
        status = compute_verification_status(email_verified_at="", phone_verified_at="2026-01-01")
        assert not status.email_verified
        assert status.email_verified_at is None

    def test_public_markers_omit_raw_flags(self):
        status = compute_verification_status(
            email_verified_at="2026-01-01",
            phone_verified_at="2026-01-01",
            phone_e164="+2348000000000",
            bank_provider="paystack",
        )
        markers = public_trust_markers(status)
        assert markers == {"identity_verified": True, "label": "Identity verified"}
        assert "+2348000000000" not in str(markers)

    def test_private_dict_has_detail(self):
        status = compute_verification_status(phone_verified_at="2026-01-01", phone_e164="+447700900000")
        data = status.to_dict()
        assert data["overall"] == "pending"
        assert data["phone"]["phone_e164"] == "+447700900000"


# =============================================================================
# Storefront
# =============================================================================


class TestStorefrontAccess:
    def test_allowed(self):
        result = resolve_storefront_access("ada-homes", True, True, "agent", True)
        assert isinstance(result, TransitionAllowed)

    def test_missing_per_agent_switch_counts_as_enabled(self):
        assert resolve_storefront_access("ada-homes", True, True, "agent", None).ok

    @pytest.mark.parametrize(
        "args,code",
        [
            (("ada", False, False, None, False), GLOBAL_DISABLED),
            (("  ", True, True, "agent", True), MISSING_SLUG),
            ((None, True, True, "agent", True), MISSING_SLUG),
            (("ada", True, False, None, True), NOT_FOUND),
            (("ada", True, True, "agent", False), AGENT_DISABLED),
            (("ada", True, True, "landlord", True), NOT_AGENT),
        ],
    )
    def test_first_failure_wins(self, args, code):
        assert resolve_storefront_access(*args).code == code

    def test_view_state(self):
        allowed = resolve_storefront_access("ada", True, True, "agent", True)
        assert resolve_storefront_view_state(allowed, 3) == StorefrontViewState.READY
        assert resolve_storefront_view_state(allowed, 0) == StorefrontViewState.EMPTY
        assert resolve_storefront_view_state(allowed, None) == StorefrontViewState.EMPTY
        assert resolve_storefront_view_state(allowed, 3, "ada-homes") == StorefrontViewState.REDIRECT

        disabled = resolve_storefront_access("ada", True, True, "agent", False)
        assert resolve_storefront_view_state(disabled) == StorefrontViewState.UNAVAILABLE
        off = resolve_storefront_access("ada", False, True, "agent", True)
        assert resolve_storefront_view_state(off) == StorefrontViewState.UNAVAILABLE
        missing = resolve_storefront_access("ada", True, False)
        assert resolve_storefront_view_state(missing) == StorefrontViewState.NOT_FOUND


class TestCtaState:
    @pytest.fixture
    def tenant(self):
        return ActorContext(id="tenant-1", role=UserRole.TENANT)

    def test_owner_manages(self):
        owner = ActorContext(id="owner-1", role=UserRole.LANDLORD)
        assert derive_cta_state("paused_owner", owner, "owner-1") == CtaState.MANAGE

    def test_non_live_unavailable(self, tenant):
        assert derive_cta_state("expired", tenant, "owner-1") == CtaState.UNAVAILABLE

    def test_anonymous_signs_in(self):
        assert derive_cta_state("live", None, "owner-1") == CtaState.SIGN_IN
        assert derive_cta_state("live", ActorContext(id=""), "owner-1") == CtaState.SIGN_IN

    def test_shortlet_books(self, tenant):
        assert derive_cta_state("live", tenant, "owner-1", is_shortlet=True) == CtaState.BOOK

    def test_viewing_states(self, tenant):
        assert derive_cta_state("live", tenant, "owner-1") == CtaState.REQUEST_VIEWING
        assert derive_cta_state("live", tenant, "owner-1", has_open_viewing=True) == CtaState.VIEWING_REQUESTED
