"""Every administrator-only route answers 403 to a regular user."""
import pytest

from tests.conftest import create_booking, create_user

ADMIN_ROUTES = [
    ("GET", "/api/bookings", None),
    ("GET", "/api/bookings/pending/list", None),
    ("GET", "/api/bookings/upcoming/list", None),
    ("GET", "/api/bookings/approved/list", None),
    ("PATCH", "/api/bookings/{booking_id}/status", {"status": "Approved"}),
    ("PATCH", "/api/bookings/{booking_id}", {"event_name": "Taken Over"}),
    ("DELETE", "/api/bookings/{booking_id}", None),
    ("GET", "/api/users", None),
    ("GET", "/api/users/summary", None),
    ("PATCH", "/api/users/{user_id}/role", {"role": "Admin"}),
    ("POST", "/api/venues", {"name": "Annex", "area": "NxtGen Room"}),
    ("PATCH", "/api/venues/1", {"is_active": False}),
    ("POST", "/api/audit-logs", {"booking_id": 0, "action": "Reviewed"}),
    ("GET", "/api/audit-logs", None),
    ("GET", "/api/change-requests", None),
    ("PATCH", "/api/change-requests/{change_request_id}", {"status": "Approved"}),
    ("DELETE", "/api/change-requests/{change_request_id}", None),
    ("GET", "/api/metrics/counts", None),
]


class TestAdminOnlyRoutes:

    @pytest.mark.parametrize("method,path,body", ADMIN_ROUTES)
    def test_regular_user_gets_403(self, client, method, path, body):
        user = create_user(client, "leader@church.org")
        booking = create_booking(client, user["headers"])
        cr = client.post("/api/change-requests", json={
            "booking_id": booking["id"], "description": "Earlier start please",
        }, headers=user["headers"]).json()["change_request"]
        ids = {"booking_id": booking["id"], "user_id": user["id"], "change_request_id": cr["id"]}
        if body is not None and "booking_id" in body:
            body = {**body, "booking_id": booking["id"]}

        resp = client.request(method, path.format(**ids), json=body, headers=user["headers"])
        assert resp.status_code == 403, resp.text
        assert resp.json()["error"] == "Admin access only"

    @pytest.mark.parametrize("method,path,body", ADMIN_ROUTES)
    def test_anonymous_gets_401(self, client, method, path, body):
        resp = client.request(method, path.format(booking_id=1, user_id="x", change_request_id=1), json=body)
        assert resp.status_code == 401
