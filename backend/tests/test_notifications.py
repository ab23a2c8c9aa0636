import pytest

from rentverse.models.notification import Notification
from rentverse.services.notification_service import add_notification


class TestNotifications:
    def _booking_requests(self, client, make_user, make_listing, count=2):
        owner = make_user()
        renter = make_user(first_name="Rita")
        listing = make_listing(owner)
        for day in range(1, count + 1):
            client.post("/api/v1/bookings", json={
                "listing_id": listing["id"],
                "start_date": f"2026-12-0{day}",
                "end_date": f"2026-12-0{day}",
                "total_price": 25,
            }, headers=renter.headers)
        return owner, renter

    def test_list_newest_first(self, client, make_user, make_listing):
        owner, _ = self._booking_requests(client, make_user, make_listing)
        r = client.get("/api/v1/notifications", headers=owner.headers)
        assert r.status_code == 200
        data = r.json()
        assert data["unread_count"] == 2
        assert "2026-12-02" in data["notifications"][0]["message"]

    def test_mark_read(self, client, make_user, make_listing):
        owner, renter = self._booking_requests(client, make_user, make_listing)
        note_id = client.get("/api/v1/notifications", headers=owner.headers).json()["notifications"][0]["id"]

        assert client.patch(f"/api/v1/notifications/{note_id}/read", headers=renter.headers).status_code == 404
        r = client.patch(f"/api/v1/notifications/{note_id}/read", headers=owner.headers)
        assert r.status_code == 200
        assert r.json()["read"] is True
        assert client.get("/api/v1/notifications", headers=owner.headers).json()["unread_count"] == 1

    def test_mark_all_read(self, client, make_user, make_listing):
        owner, _ = self._booking_requests(client, make_user, make_listing)
        r = client.patch("/api/v1/notifications/read-all", headers=owner.headers)
        assert r.status_code == 200
        data = client.get("/api/v1/notifications", headers=owner.headers).json()
        assert data["unread_count"] == 0
        assert all(n["read"] for n in data["notifications"])

    def test_requires_auth(self, client):
        assert client.get("/api/v1/notifications").status_code == 401

    def test_unknown_type_is_rejected(self, test_db, make_user):
        user = make_user()
        with test_db() as db:
            with pytest.raises(ValueError):
                add_notification(db, user_id=user.id, type="PAYMENT_RECEIVED", title="t", message="m")
            db.commit()
            assert db.query(Notification).count() == 0
