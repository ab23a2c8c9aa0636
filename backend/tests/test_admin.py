import pytest

from rentverse.utils import permissions
from rentverse.utils.permissions import ADMIN_ROLES, ROLE_PERMISSIONS, accessible_modules, has_permission, is_admin_role


class TestAdminAccess:
    def test_regular_user_rejected(self, client, make_user):
        user = make_user()
        r = client.get("/api/v1/admin/me", headers=user.headers)
        assert r.status_code == 403
        assert r.json()["detail"] == "Admin access required"

    def test_admin_me_lists_modules(self, client, make_user):
        support = make_user(role="SUPPORT")
        r = client.get("/api/v1/admin/me", headers=support.headers)
        assert r.status_code == 200
        assert r.json()["role"] == "SUPPORT"
        assert r.json()["modules"] == ["dashboard", "users", "listings", "bookings", "moderation", "audit"]

    def test_missing_permission(self, client, make_user):
        support = make_user(role="SUPPORT")
        target = make_user()
        r = client.post(f"/api/v1/admin/users/{target.id}/ban", json={}, headers=support.headers)
        assert r.status_code == 403
        assert r.json()["detail"] == "Missing permission users.write"


class TestAdminUsers:
    def test_ban_and_unban(self, client, make_user):
        admin = make_user(role="ADMIN")
        target = make_user(first_name="Mallory")

        r = client.post(f"/api/v1/admin/users/{target.id}/ban", json={}, headers=admin.headers)
        assert r.status_code == 200
        assert r.json()["banned"] is True
        assert r.json()["ban_reason"] == "Violation of terms"
        assert client.get("/api/v1/users/me", headers=target.headers).status_code == 401
        assert client.get(f"/api/v1/users/{target.id}").status_code == 404

        r = client.delete(f"/api/v1/admin/users/{target.id}/ban", headers=admin.headers)
        assert r.json()["banned"] is False
        assert client.get("/api/v1/users/me", headers=target.headers).status_code == 200

        logs = client.get("/api/v1/admin/audit/logs?module=users", headers=admin.headers).json()
        assert [l["action"] for l in logs] == ["UNBAN_USER", "BAN_USER"]
        assert logs[1]["target_id"] == target.id

    def test_cannot_ban_self(self, client, make_user):
        admin = make_user(role="ADMIN")
        r = client.post(f"/api/v1/admin/users/{admin.id}/ban", json={"reason": "x"}, headers=admin.headers)
        assert r.status_code == 400

    def test_list_users(self, client, make_user):
        admin = make_user(role="ADMIN", email="admin@example.com")
        make_user(first_name="Mallory", email="mallory@example.com")

        r = client.get("/api/v1/admin/users?q=mallory", headers=admin.headers)
        assert [u["email"] for u in r.json()] == ["mallory@example.com"]
        r = client.get("/api/v1/admin/users?banned=true", headers=admin.headers)
        assert r.json() == []


class TestAdminListings:
    def test_block_listing_hides_it(self, client, make_user, make_listing):
        moderator = make_user(role="MODERATOR")
        owner = make_user()
        listing = make_listing(owner, title="Counterfeit Watch", category="Fashion")

        r = client.patch(f"/api/v1/admin/listings/{listing['id']}/status", json={
            "status": "BLOCKED",
            "reason": "Counterfeit goods",
        }, headers=moderator.headers)
        assert r.status_code == 200
        assert r.json()["status"] == "BLOCKED"
        assert client.get("/api/v1/search?q=watch").json()["results"] == []

        r = client.put(f"/api/v1/listings/{listing['id']}", json={"status": "ACTIVE"}, headers=owner.headers)
        assert r.status_code == 403

        blocked = client.get("/api/v1/admin/listings?status=BLOCKED", headers=moderator.headers).json()
        assert [l["id"] for l in blocked] == [listing["id"]]

    def test_invalid_status(self, client, make_user, make_listing):
        moderator = make_user(role="MODERATOR")
        listing = make_listing(make_user())
        r = client.patch(f"/api/v1/admin/listings/{listing['id']}/status", json={"status": "GONE"},
                         headers=moderator.headers)
        assert r.status_code == 400

    def test_analyst_cannot_moderate(self, client, make_user, make_listing):
        analyst = make_user(role="ANALYST")
        listing = make_listing(make_user())
        r = client.patch(f"/api/v1/admin/listings/{listing['id']}/status", json={"status": "BLOCKED"},
                         headers=analyst.headers)
        assert r.status_code == 403


class TestAdminSettings:
    def test_super_admin_toggles_maintenance(self, client, make_user):
        root = make_user(role="SUPER_ADMIN")
        r = client.put("/api/v1/admin/settings/maintenance_mode", json={"value": "true"}, headers=root.headers)
        assert r.status_code == 200
        assert r.json()["value"] == "true"
        assert client.get("/api/v1/settings/public").json() == {"maintenance_mode": True}

        keys = [s["key"] for s in client.get("/api/v1/admin/settings", headers=root.headers).json()]
        assert "maintenance_mode" in keys

    def test_admin_cannot_manage_settings(self, client, make_user):
        admin = make_user(role="ADMIN")
        r = client.put("/api/v1/admin/settings/maintenance_mode", json={"value": "true"}, headers=admin.headers)
        assert r.status_code == 403


class TestPermissionMatrix:
    @pytest.mark.parametrize("role", list(ROLE_PERMISSIONS))
    def test_every_admin_role_sees_dashboard(self, role):
        assert is_admin_role(role)
        assert has_permission(role, "dashboard", "read")
        assert accessible_modules(role)[0] == "dashboard"

    def test_lookups(self):
        assert has_permission("SUPER_ADMIN", "settings", "manage")
        assert not has_permission("ADMIN", "settings", "read")
        assert has_permission("FINANCE", "payments", "manage")
        assert not has_permission("USER", "dashboard", "read")
        assert not is_admin_role("USER")
        assert not is_admin_role(None)
        assert accessible_modules("USER") == []

    def test_matrix_covers_exactly_the_admin_roles(self):
        assert set(ROLE_PERMISSIONS) == set(ADMIN_ROLES)
        assert not hasattr(permissions, "ROLE_HIERARCHY")


class TestAdminBookings:
    def _booking(self, client, make_user, make_listing):
        owner = make_user()
        renter = make_user(first_name="Rita")
        listing = make_listing(owner, title="Kayak", category="Equipment")
        r = client.post("/api/v1/bookings", json={
            "listing_id": listing["id"],
            "start_date": "2026-11-01",
            "end_date": "2026-11-02",
            "total_price": 40,
        }, headers=renter.headers)
        return r.json()["booking"]["id"]

    def test_list_bookings(self, client, make_user, make_listing):
        finance = make_user(role="FINANCE")
        booking_id = self._booking(client, make_user, make_listing)

        r = client.get("/api/v1/admin/bookings?status=PENDING", headers=finance.headers)
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 1
        assert data["total_pages"] == 1
        assert data["items"][0]["id"] == booking_id
        assert data["items"][0]["renter"]["first_name"] == "Rita"

        r = client.get("/api/v1/admin/bookings?status=CONFIRMED", headers=finance.headers)
        assert r.json()["items"] == []

    def test_set_booking_status(self, client, make_user, make_listing):
        finance = make_user(role="FINANCE")
        booking_id = self._booking(client, make_user, make_listing)
        url = f"/api/v1/admin/bookings/{booking_id}/status"

        assert client.patch(url, json={"status": "REFUNDED"}, headers=finance.headers).status_code == 400
        r = client.patch(url, json={"status": "CANCELLED"}, headers=finance.headers)
        assert r.status_code == 200
        assert r.json()["status"] == "CANCELLED"

        logs = client.get("/api/v1/admin/audit/logs?module=bookings", headers=finance.headers).json()
        assert logs[0]["action"] == "SET_BOOKING_STATUS"
        assert logs[0]["details"] == "PENDING -> CANCELLED"

        r = client.patch("/api/v1/admin/bookings/missing/status", json={"status": "CANCELLED"},
                         headers=finance.headers)
        assert r.status_code == 404

    def test_support_cannot_change_bookings(self, client, make_user, make_listing):
        support = make_user(role="SUPPORT")
        booking_id = self._booking(client, make_user, make_listing)
        r = client.patch(f"/api/v1/admin/bookings/{booking_id}/status", json={"status": "CANCELLED"},
                         headers=support.headers)
        assert r.status_code == 403


class TestModerationQueue:
    def _report(self, client, reporter, target_id, priority="MEDIUM", target_type="Listing"):
        r = client.post("/api/v1/reports", json={
            "target_type": target_type,
            "target_id": target_id,
            "reason": "Looks counterfeit",
            "priority": priority,
        }, headers=reporter.headers)
        assert r.status_code == 201, r.text
        return r.json()

    def test_report_validation(self, client, make_user, make_listing):
        reporter = make_user()
        listing = make_listing(make_user())
        base = {"target_type": "Listing", "target_id": listing["id"], "reason": "spam"}

        assert client.post("/api/v1/reports", json=base).status_code == 401
        r = client.post("/api/v1/reports", json={**base, "target_type": "Review"}, headers=reporter.headers)
        assert r.status_code == 400
        r = client.post("/api/v1/reports", json={**base, "priority": "URGENT"}, headers=reporter.headers)
        assert r.status_code == 400
        r = client.post("/api/v1/reports", json={**base, "reason": "  "}, headers=reporter.headers)
        assert r.status_code == 400
        r = client.post("/api/v1/reports", json={**base, "target_id": "missing"}, headers=reporter.headers)
        assert r.status_code == 404

    def test_queue_orders_by_priority_then_age(self, client, make_user, make_listing):
        moderator = make_user(role="MODERATOR")
        reporter = make_user()
        owner = make_user()
        listing = make_listing(owner)
        low = self._report(client, reporter, listing["id"], priority="LOW")
        medium = self._report(client, reporter, listing["id"], priority="MEDIUM")
        high = self._report(client, reporter, owner.id, priority="high", target_type="User")
        medium_later = self._report(client, reporter, listing["id"], priority="MEDIUM")

        r = client.get("/api/v1/admin/moderation/queue", headers=moderator.headers)
        assert r.status_code == 200
        data = r.json()
        assert [i["id"] for i in data["items"]] == [high["id"], medium["id"], medium_later["id"], low["id"]]
        assert data["total"] == 4
        assert data["items"][0]["priority"] == "HIGH"

        r = client.get("/api/v1/admin/moderation/queue?page=2&page_size=3", headers=moderator.headers)
        assert [i["id"] for i in r.json()["items"]] == [low["id"]]
        assert r.json()["total_pages"] == 2

    def test_approve_and_reject(self, client, make_user, make_listing):
        moderator = make_user(role="MODERATOR", first_name="Mona")
        reporter = make_user()
        listing = make_listing(make_user())
        first = self._report(client, reporter, listing["id"])
        second = self._report(client, reporter, listing["id"])

        r = client.post(f"/api/v1/admin/moderation/queue/{first['id']}/approve",
                        json={"note": "Confirmed fake"}, headers=moderator.headers)
        assert r.status_code == 200
        item = r.json()
        assert item["status"] == "APPROVED"
        assert item["review_note"] == "Confirmed fake"
        assert item["reviewer"]["first_name"] == "Mona"
        assert item["reviewed_at"]

        r = client.post(f"/api/v1/admin/moderation/queue/{second['id']}/reject", json={},
                        headers=moderator.headers)
        assert r.json()["status"] == "REJECTED"

        pending = client.get("/api/v1/admin/moderation/queue", headers=moderator.headers).json()
        assert pending["items"] == []
        approved = client.get("/api/v1/admin/moderation/queue?status=APPROVED", headers=moderator.headers).json()
        assert [i["id"] for i in approved["items"]] == [first["id"]]

        logs = client.get("/api/v1/admin/audit/logs?module=moderation", headers=moderator.headers).json()
        assert [l["action"] for l in logs] == ["REJECT_MODERATION_ITEM", "APPROVE_MODERATION_ITEM"]
        assert logs[1]["target_id"] == listing["id"]

    def test_review_errors(self, client, make_user, make_listing):
        moderator = make_user(role="MODERATOR")
        item = self._report(client, make_user(), make_listing(make_user())["id"])
        url = f"/api/v1/admin/moderation/queue/{item['id']}/approve"

        client.post(url, json={}, headers=moderator.headers)
        assert client.post(url, json={}, headers=moderator.headers).status_code == 400
        r = client.post("/api/v1/admin/moderation/queue/missing/reject", json={}, headers=moderator.headers)
        assert r.status_code == 404

    def test_permissions(self, client, make_user, make_listing):
        support = make_user(role="SUPPORT")
        finance = make_user(role="FINANCE")
        item = self._report(client, make_user(), make_listing(make_user())["id"])

        assert client.get("/api/v1/admin/moderation/queue", headers=support.headers).status_code == 200
        r = client.post(f"/api/v1/admin/moderation/queue/{item['id']}/approve", json={},
                        headers=support.headers)
        assert r.status_code == 403
        assert client.get("/api/v1/admin/moderation/queue", headers=finance.headers).status_code == 403
