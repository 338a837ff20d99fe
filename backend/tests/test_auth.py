"""Tests for signup, login and bearer-token authentication."""
from jose import jwt

from reservations.config import settings
from reservations.security import create_access_token, password_problems
from tests.conftest import PASSWORD, auth, create_admin, create_user, login, signup


class TestSignup:
    """POST /api/auth/signup."""

    def test_signup_creates_account(self, client):
        resp = client.post("/api/auth/signup", json={
            "full_name": "Grace Santos",
            "email": "Grace@Church.org",
            "contact_number": "09170000000",
            "role": "Ministry Head",
            "password": PASSWORD,
        })
        assert resp.status_code == 201
        assert resp.json() == {"message": "Account created."}

        data = login(client, "grace@church.org")
        assert data["user"]["role"] == "Ministry Head"
        assert data["user"]["email"] == "grace@church.org"

    def test_admin_cannot_be_self_selected(self, client):
        resp = client.post("/api/auth/signup", json={
            "full_name": "Sneaky",
            "email": "sneaky@church.org",
            "contact_number": "0917",
            "role": "Admin",
            "password": PASSWORD,
        })
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid role selected."

    def test_unknown_role_rejected(self, client):
        resp = client.post("/api/auth/signup", json={
            "full_name": "Someone",
            "email": "someone@church.org",
            "contact_number": "0917",
            "role": "Pastor",
            "password": PASSWORD,
        })
        assert resp.status_code == 400

    def test_weak_password_lists_unmet_rules(self, client):
        resp = client.post("/api/auth/signup", json={
            "full_name": "Weak",
            "email": "weak@church.org",
            "contact_number": "0917",
            "role": "COS",
            "password": "short",
        })
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert "At least 12 characters" in error
        assert "uppercase" in error

    def test_duplicate_email_rejected(self, client):
        signup(client, "dup@church.org")
        resp = client.post("/api/auth/signup", json={
            "full_name": "Dup Again",
            "email": "DUP@church.org",
            "contact_number": "0917",
            "role": "COS",
            "password": PASSWORD,
        })
        assert resp.status_code == 400
        assert "already exists" in resp.json()["error"]

    def test_missing_field_is_400(self, client):
        resp = client.post("/api/auth/signup", json={"email": "x@church.org"})
        assert resp.status_code == 400
        assert "error" in resp.json()


class TestLogin:
    """POST /api/auth/login and /api/auth/admin/login."""

    def test_wrong_password_is_401(self, client):
        signup(client, "leader@church.org")
        resp = client.post("/api/auth/login", json={"email": "leader@church.org", "password": "Wrong!Password1"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid credentials"

    def test_unknown_email_is_401(self, client):
        resp = client.post("/api/auth/login", json={"email": "ghost@church.org", "password": PASSWORD})
        assert resp.status_code == 401

    def test_token_payload(self, client):
        signup(client, "leader@church.org")
        data = login(client, "leader@church.org")
        payload = jwt.decode(data["token"], settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        assert payload["id"] == data["user"]["id"]
        assert payload["email"] == "leader@church.org"
        assert payload["role"] == "DGroup Leader"
        assert "exp" in payload

    def test_admin_login_requires_admin_role(self, client):
        signup(client, "leader@church.org")
        resp = client.post("/api/auth/admin/login", json={"email": "leader@church.org", "password": PASSWORD})
        assert resp.status_code == 403
        assert resp.json()["error"] == "Not authorized as admin"

    def test_admin_login_succeeds_for_admin(self, client, db):
        create_admin(client, db)
        resp = client.post("/api/auth/admin/login", json={"email": "admin@church.org", "password": PASSWORD})
        assert resp.status_code == 200
        assert resp.json()["user"]["role"] == "Admin"


class TestBearerToken:
    """get_current_user / require_admin."""

    def test_missing_token_is_401(self, client):
        resp = client.get("/api/users/me")
        assert resp.status_code == 401
        assert resp.json()["error"] == "No token provided"

    def test_garbage_token_is_401(self, client):
        resp = client.get("/api/users/me", headers=auth("not-a-jwt"))
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid or expired token"

    def test_expired_token_is_401(self, client):
        user = create_user(client, "leader@church.org")
        token = create_access_token(user["id"], user["email"], "DGroup Leader", expires_minutes=-5)
        resp = client.get("/api/users/me", headers=auth(token))
        assert resp.status_code == 401

    def test_token_for_deleted_user_is_401(self, client):
        token = create_access_token("no-such-user", "x@church.org", "Admin", expires_minutes=5)
        resp = client.get("/api/users/me", headers=auth(token))
        assert resp.status_code == 401

    def test_stored_role_wins_over_token_claim(self, client):
        """A token claiming Admin does not grant admin access to a regular user."""
        user = create_user(client, "leader@church.org")
        forged = create_access_token(user["id"], user["email"], "Admin", expires_minutes=5)
        resp = client.get("/api/users/summary", headers=auth(forged))
        assert resp.status_code == 403

    def test_me_returns_caller(self, client):
        user = create_user(client, "leader@church.org", name="Leader One")
        resp = client.get("/api/users/me", headers=user["headers"])
        assert resp.status_code == 200
        assert resp.json()["full_name"] == "Leader One"


class TestPasswordRules:

    def test_strong_password_has_no_problems(self):
        assert password_problems(PASSWORD) == []

    def test_each_rule_reported(self):
        problems = password_problems("alllowercaseletters")
        assert "At least 1 uppercase letter (A-Z)" in problems
        assert "At least 1 number (0-9)" in problems
        assert "At least 1 special character (!@#$%^&* etc)" in problems
        assert "At least 12 characters" not in problems


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
