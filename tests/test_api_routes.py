"""
Tests for the HTTP API

Route-level behaviour over an in-memory repository:
1. Actor headers, 401/403/404 handling
2. Denials mapped to 400/403/409 with a stable code
3. Listing, review, viewing, shortlet and payout flows end to end
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from core.repository import (
    MarketplaceRepository,
    get_marketplace_repository,
    reset_marketplace_repository,
)
from utils.config import Config
from web.app import create_app
from web.deps import get_config, get_now, get_repository


NOW = datetime(2026, 7, 15, 12, 0, 0)


def actor(actor_id: str, role: str) -> dict[str, str]:
    return {"X-Actor-Id": actor_id, "X-Actor-Role": role}


OWNER = actor("owner-1", "landlord")
STRANGER = actor("owner-2", "landlord")
TENANT = actor("tenant-1", "tenant")
AGENT = actor("agent-1", "agent")
ADMIN = actor("admin-1", "admin")


@pytest.fixture
def repo():
    return MarketplaceRepository()


@pytest.fixture
def client(repo):
    app = create_app(Config())
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_now] = lambda: NOW
    app.dependency_overrides[get_config] = lambda: Config()
    return TestClient(app)


@pytest.fixture
def live_listing(repo):
    return repo.add_listing(
        {"id": "live-1", "owner_id": "owner-1", "status": "live", "is_approved": True, "title": "2 bed flat"}
    )


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_startup_opens_persisted_repository(self, tmp_path):
        seeded = MarketplaceRepository(persist_path=str(tmp_path / "marketplace.json"))
        seeded.add_listing({"id": "l1", "owner_id": "owner-1", "status": "draft"})

        reset_marketplace_repository()
        try:
            with TestClient(create_app(Config(data_dir=str(tmp_path)))):
                assert get_marketplace_repository().get_listing("l1")["status"] == "draft"
        finally:
            reset_marketplace_repository()


# =============================================================================
# Listings
# =============================================================================


class TestListingRoutes:
    def test_requires_actor_headers(self, client, repo):
        repo.add_listing({"id": "l1", "owner_id": "owner-1", "status": "draft"})
        assert client.post("/api/properties/l1/submit").status_code == 401

    def test_missing_listing(self, client):
        assert client.post("/api/properties/nope/submit", headers=OWNER).status_code == 404

    def test_submit_draft_then_repeat(self, client, repo):
        repo.add_listing({"id": "l1", "owner_id": "owner-1", "status": "draft"})

        first = client.post("/api/properties/l1/submit", headers=OWNER)
        assert first.status_code == 200
        assert first.json()["status"] == "pending"
        assert first.json()["status_label"] == "Pending review"
        assert repo.get_listing("l1")["submitted_at"] == NOW

        again = client.post("/api/properties/l1/submit", headers=OWNER)
        assert again.status_code == 200
        assert again.json()["changed"] is False

    def test_submit_by_stranger(self, client, repo):
        repo.add_listing({"id": "l1", "owner_id": "owner-1", "status": "draft"})
        assert client.post("/api/properties/l1/submit", headers=STRANGER).status_code == 403

    def test_resubmit_wrong_status(self, client, repo):
        repo.add_listing({"id": "l1", "owner_id": "owner-1", "status": "draft"})
        response = client.post("/api/properties/l1/resubmit", headers=OWNER)
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_STATUS"

    def test_resubmit_forbidden(self, client, repo):
        repo.add_listing({"id": "l1", "owner_id": "owner-1", "status": "changes_requested"})
        response = client.post("/api/properties/l1/resubmit", headers=STRANGER)
        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "FORBIDDEN"

    def test_resubmit(self, client, repo):
        repo.add_listing({"id": "l1", "owner_id": "owner-1", "status": "changes_requested"})
        response = client.post("/api/properties/l1/resubmit", headers=OWNER)
        assert response.status_code == 200
        assert response.json()["status"] == "pending"

    def test_pause_requires_reason(self, client, live_listing):
        response = client.post("/api/properties/live-1/status", json={"status": "paused"}, headers=OWNER)
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "MISSING_FIELD"

    def test_pause_and_reactivate(self, client, repo, live_listing):
        paused = client.post(
            "/api/properties/live-1/status",
            json={"status": "paused_occupied", "paused_reason": "Let agreed"},
            headers=OWNER,
        )
        assert paused.status_code == 200
        assert paused.json()["status"] == "paused_occupied"

        live = client.post("/api/properties/live-1/status", json={"status": "live"}, headers=OWNER)
        assert live.status_code == 200
        assert live.json()["status"] == "live"
        assert repo.get_listing("live-1")["expires_at"] == NOW + timedelta(days=90)

    def test_reactivate_unapproved(self, client, repo):
        repo.add_listing({"id": "l1", "owner_id": "owner-1", "status": "paused_owner", "is_approved": False})
        response = client.post("/api/properties/l1/status", json={"status": "live"}, headers=OWNER)
        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "NOT_APPROVED"

    def test_invalid_target_status(self, client, live_listing):
        response = client.post("/api/properties/live-1/status", json={"status": "draft"}, headers=OWNER)
        assert response.status_code == 400

    def test_body_validation(self, client, live_listing):
        assert client.post("/api/properties/live-1/status", json={}, headers=OWNER).status_code == 422


# =============================================================================
# Admin Review
# =============================================================================


class TestReviewRoutes:
    @pytest.fixture
    def pending_rows(self, repo):
        repo.add_listing({"id": "p2", "owner_id": "o", "status": "pending", "submitted_at": NOW - timedelta(days=1)})
        repo.add_listing({"id": "p1", "owner_id": "o", "status": "pending", "submitted_at": NOW - timedelta(days=2)})
        repo.add_listing({"id": "c1", "owner_id": "o", "status": "changes_requested"})

    def test_admin_only(self, client, pending_rows):
        assert client.get("/api/admin/review", headers=OWNER).status_code == 403

    def test_queue(self, client, pending_rows):
        response = client.get("/api/admin/review?view=bogus&id=p2&density=compact", headers=ADMIN)
        data = response.json()
        assert data["view"] == "pending"
        assert data["density"] == "compact"
        assert [row["id"] for row in data["rows"]] == ["p1", "p2"]
        assert data["selected_id"] == "p2"

    def test_selected_falls_back_to_first(self, client, pending_rows):
        data = client.get("/api/admin/review?id=c1", headers=ADMIN).json()
        assert data["selected_id"] == "p1"

    def test_approve_moves_selection(self, client, repo, pending_rows):
        response = client.post("/api/admin/review/p1/decision", json={"action": "approve"}, headers=ADMIN)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "live"
        assert data["next_id"] == "p2"
        assert data["next_url"] == "/admin/review?view=pending&id=p2"

        listing = repo.get_listing("p1")
        assert listing["is_approved"] is True
        assert listing["reviewed_by"] == "admin-1"

    def test_decision_on_non_pending(self, client, pending_rows):
        response = client.post("/api/admin/review/c1/decision", json={"action": "reject"}, headers=ADMIN)
        assert response.status_code == 409


# =============================================================================
# Viewings
# =============================================================================


class TestViewingRoutes:
    def _request(self, client, times=None):
        return client.post(
            "/api/viewings/request",
            json={"property_id": "live-1", "preferred_times": times or ["2026-07-20T10:00:00Z"]},
            headers=TENANT,
        )

    def test_request_and_duplicate(self, client, live_listing):
        first = self._request(client)
        assert first.status_code == 201
        assert first.json()["viewing"]["status"] == "requested"

        second = self._request(client)
        assert second.status_code == 409
        assert second.json()["detail"]["code"] == "ALREADY_REQUESTED"

    def test_too_many_times_rejected(self, client, live_listing):
        times = [f"2026-07-2{d}T10:00:00Z" for d in range(4)]
        assert self._request(client, times).status_code == 422

    def test_owner_cannot_request(self, client, live_listing):
        response = client.post(
            "/api/viewings/request",
            json={"property_id": "live-1", "preferred_times": ["2026-07-20T10:00:00Z"]},
            headers=OWNER,
        )
        assert response.status_code == 403

    @pytest.mark.parametrize("role", ["landlord", "agent", "admin"])
    def test_only_tenants_can_request(self, client, repo, live_listing, role):
        response = client.post(
            "/api/viewings/request",
            json={"property_id": "live-1", "preferred_times": ["2026-07-20T10:00:00Z"]},
            headers=actor(f"{role}-9", role),
        )
        assert response.status_code == 403
        assert repo.list_viewings() == []

    def test_unreadable_preferred_time_rejected(self, client, repo, live_listing):
        response = self._request(client, ["2026-07-20T10:00:00Z", "Saturday 10am"])
        assert response.status_code == 400
        assert "Saturday 10am" in response.json()["detail"]
        assert repo.list_viewings() == []

    def test_unreadable_proposed_time_rejected(self, client, repo, live_listing):
        viewing_id = self._request(client).json()["viewing"]["id"]
        response = client.patch(
            "/api/viewings/respond",
            json={"viewing_id": viewing_id, "action": "propose", "proposed_times": ["next week"]},
            headers=OWNER,
        )
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_INPUT"
        assert repo.get_viewing(viewing_id)["status"] == "requested"

    def test_host_approves_and_sees_reliability(self, client, repo, live_listing):
        viewing_id = self._request(client).json()["viewing"]["id"]
        repo.add_viewing(
            {"id": "old", "tenant_id": "tenant-1", "property_id": "x", "status": "completed",
             "approved_time": NOW - timedelta(days=3)}
        )

        response = client.patch(
            "/api/viewings/respond",
            json={"viewing_id": viewing_id, "action": "approve", "approved_time": "2026-07-20T10:00:00Z"},
            headers=OWNER,
        )
        assert response.status_code == 200
        assert response.json()["viewing"]["approved_time"] == "2026-07-20T10:00:00"

        detail = client.get(f"/api/viewings/{viewing_id}", headers=OWNER).json()
        assert detail["tenant_reliability"]["label"] == "Reliable"

        tenant_view = client.get(f"/api/viewings/{viewing_id}", headers=TENANT).json()
        assert "tenant_reliability" not in tenant_view

    def test_tenant_cannot_respond(self, client, live_listing):
        viewing_id = self._request(client).json()["viewing"]["id"]
        response = client.patch(
            "/api/viewings/respond",
            json={"viewing_id": viewing_id, "action": "decline", "decline_reason_code": "x"},
            headers=TENANT,
        )
        assert response.status_code == 403

    def test_no_show_report(self, client, repo, live_listing):
        repo.add_viewing({"id": "v1", "tenant_id": "tenant-1", "property_id": "live-1", "status": "approved"})
        response = client.post("/api/viewings/v1/no-show", headers=OWNER)
        assert response.status_code == 200
        assert repo.get_viewing("v1")["no_show_reported_at"] == NOW


# =============================================================================
# Shortlets
# =============================================================================


class TestShortletRoutes:
    @pytest.fixture
    def bookings(self, repo):
        repo.add_booking(
            {"id": "b1", "host_user_id": "owner-1", "guest_user_id": "tenant-1", "status": "pending",
             "respond_by": NOW + timedelta(hours=3), "check_in": "2026-08-01", "check_out": "2026-08-03",
             "total_amount_minor": 15000000, "currency": "NGN", "delegate_agent_ids": ["agent-1"]}
        )
        repo.add_booking(
            {"id": "b2", "host_user_id": "owner-1", "guest_user_id": "tenant-1", "status": "pending",
             "respond_by": NOW - timedelta(minutes=5)}
        )
        repo.add_booking(
            {"id": "b3", "host_user_id": "owner-1", "guest_user_id": "tenant-1", "status": "pending_payment",
             "payment_status": "succeeded"}
        )

    def test_inbox(self, client, bookings):
        data = client.get("/api/shortlet/bookings/inbox?filter=awaiting", headers=OWNER).json()
        assert data["filter"] == "awaiting_approval"
        assert data["awaiting_approval_count"] == 1
        assert [b["id"] for b in data["bookings"]] == ["b1"]
        assert data["bookings"][0]["countdown"] == "3h left in the 12-hour response window."
        assert data["bookings"][0]["total_display"] == "₦150,000.00"

    def test_inbox_scoped_to_host(self, client, bookings):
        data = client.get("/api/shortlet/bookings/inbox", headers=STRANGER).json()
        assert data["bookings"] == []

    def test_accept(self, client, bookings):
        response = client.post("/api/shortlet/bookings/b1/respond", json={"action": "accept"}, headers=OWNER)
        assert response.status_code == 200
        assert response.json()["booking"]["status"] == "confirmed"

    def test_delegated_agent_may_respond(self, client, bookings):
        response = client.post("/api/shortlet/bookings/b1/respond", json={"action": "decline"}, headers=AGENT)
        assert response.status_code == 200

    def test_stranger_forbidden(self, client, bookings):
        response = client.post("/api/shortlet/bookings/b1/respond", json={"action": "accept"}, headers=STRANGER)
        assert response.status_code == 403

    def test_lapsed_window_expires_booking(self, client, repo, bookings):
        response = client.post("/api/shortlet/bookings/b2/respond", json={"action": "accept"}, headers=OWNER)
        assert response.status_code == 409
        assert repo.get_booking("b2")["status"] == "expired"

    def test_cancel(self, client, bookings):
        assert client.post("/api/shortlet/bookings/b1/cancel", headers=TENANT).status_code == 200
        assert client.post("/api/shortlet/bookings/b3/cancel", headers=TENANT).status_code == 409

    def test_return_status(self, client, bookings):
        data = client.get("/api/shortlet/bookings/b3/return-status?elapsed_ms=1000", headers=TENANT).json()
        assert data["ui_state"] == "finalising"
        assert data["action"] == "continue"
        assert data["timeout_message"] is None

        timed_out = client.get(
            "/api/shortlet/bookings/b3/return-status?elapsed_ms=60000", headers=TENANT
        ).json()
        assert timed_out["action"] == "final_fetch_then_wait_then_stop"
        assert "does not mean your payment failed" in timed_out["timeout_message"]


# =============================================================================
# Payouts
# =============================================================================


class TestPayoutRoutes:
    @pytest.fixture
    def payouts(self, repo):
        repo.add_booking({"id": "done", "status": "completed", "check_out": "2026-07-10"})
        repo.add_booking({"id": "future", "status": "confirmed", "check_out": "2026-08-10"})
        repo.add_payout({"id": "p1", "booking_id": "done", "status": "eligible", "amount_minor": 500000, "currency": "NGN"})
        repo.add_payout({"id": "p2", "booking_id": "future", "status": "eligible", "amount_minor": 100})

    def test_list_eligible(self, client, payouts):
        data = client.get("/api/admin/shortlet/payouts?status=eligible", headers=ADMIN).json()
        assert [p["id"] for p in data["payouts"]] == ["p1"]
        assert data["payouts"][0]["amount_display"] == "₦5,000.00"

    def test_mark_paid_then_again(self, client, payouts):
        first = client.post("/api/admin/shortlet/payouts/p1/mark-paid", json={"paid_ref": "TRX-1"}, headers=ADMIN)
        assert first.status_code == 200
        assert first.json()["payout"]["status"] == "paid"
        assert first.json()["payout"]["paid_ref"] == "TRX-1"

        second = client.post("/api/admin/shortlet/payouts/p1/mark-paid", json={}, headers=ADMIN)
        assert second.status_code == 409
        assert second.json()["detail"]["code"] == "ALREADY_PAID"

    def test_not_yet_eligible(self, client, payouts):
        response = client.post("/api/admin/shortlet/payouts/p2/mark-paid", json={}, headers=ADMIN)
        assert response.status_code == 409

    def test_completed_booking_without_checkout_is_payable(self, client, repo, payouts):
        repo.add_booking({"id": "legacy", "status": "completed"})
        repo.add_payout({"id": "p3", "booking_id": "legacy", "status": "eligible", "amount_minor": 700})
        response = client.post("/api/admin/shortlet/payouts/p3/mark-paid", json={}, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["payout"]["status"] == "paid"

    def test_non_admin(self, client, payouts):
        assert client.get("/api/admin/shortlet/payouts", headers=OWNER).status_code == 403

    def test_missing_payout(self, client, payouts):
        assert client.post("/api/admin/shortlet/payouts/zz/mark-paid", json={}, headers=ADMIN).status_code == 404
