"""Pytest fixtures — in-memory SQLite database and a recording notifier."""
import os

# Must be set before the application modules are imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REMINDER_SCHEDULER_ENABLED"] = "false"
os.environ["RESEND_API_KEY"] = ""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from reservations.database import Base, get_db
from reservations.main import app
from reservations.services.notifier import Notifier, get_notifier

# Import all models so they register with Base.metadata
from reservations.models.user import User, Role               # noqa: F401
from reservations.models.venue import Venue                   # noqa: F401
from reservations.models.booking import Booking               # noqa: F401
from reservations.models.audit_log import AuditLog            # noqa: F401
from reservations.models.change_request import ChangeRequest  # noqa: F401

PASSWORD = "Str0ng!Password"


class FakeNotifier(Notifier):
    """Records every message instead of sending it."""

    def __init__(self):
        self.sent = []

    def send(self, message):
        self.sent.append(message)

    def kinds(self):
        return [m.kind for m in self.sent]


class FailingNotifier(FakeNotifier):
    """Records the attempt, then fails like an unreachable email provider."""

    def send(self, message):
        self.sent.append(message)
        raise RuntimeError("email provider unavailable")


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh in-memory SQLite engine for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """A session on the same database the client uses."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def notifier():
    return FakeNotifier()


@pytest.fixture(scope="function")
def client(session_factory, notifier):
    """FastAPI TestClient with database and notifier dependencies overridden."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def signup(client: TestClient, email: str, role: str = "DGroup Leader", name: str = "Test User") -> None:
    """Helper — POST /api/auth/signup and assert it succeeded."""
    resp = client.post("/api/auth/signup", json={
        "full_name": name,
        "email": email,
        "contact_number": "09171234567",
        "role": role,
        "password": PASSWORD,
    })
    assert resp.status_code == 201, resp.text


def login(client: TestClient, email: str) -> dict:
    """Helper — log in and return the {token, user} response."""
    resp = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return resp.json()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_user(client: TestClient, email: str, name: str = "Test User") -> dict:
    """Sign up and log in a regular user; returns ``{"id", "headers"}``."""
    signup(client, email, name=name)
    data = login(client, email)
    return {"id": data["user"]["id"], "email": email, "headers": auth(data["token"])}


def create_admin(client: TestClient, db, email: str = "admin@church.org", name: str = "Admin User") -> dict:
    """Sign up a user, promote it to Admin in the database, then log in."""
    signup(client, email, name=name)
    user = db.query(User).filter(User.email == email).first()
    user.role = Role.admin
    db.commit()
    data = login(client, email)
    return {"id": data["user"]["id"], "email": email, "headers": auth(data["token"])}


def booking_payload(venue: str = "Main Hall", start: str = "2030-03-01T10:00:00+00:00",
                    end: str = "2030-03-01T12:00:00+00:00", **overrides) -> dict:
    payload = {
        "event_name": "Youth Fellowship",
        "purpose": "Monthly fellowship night",
        "attendees": 40,
        "venue": venue,
        "start_datetime": start,
        "end_datetime": end,
        "additional_needs": "Projector",
    }
    payload.update(overrides)
    return payload


def create_booking(client: TestClient, headers: dict, **kwargs) -> dict:
    """Helper — POST /api/bookings and return the booking."""
    resp = client.post("/api/bookings", json=booking_payload(**kwargs), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["booking"]


def approve(client: TestClient, admin_headers: dict, booking_id: int) -> dict:
    resp = client.patch(f"/api/bookings/{booking_id}/status", json={"status": "Approved"}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    return resp.json()
