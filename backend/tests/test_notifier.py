"""Tests for best-effort email delivery and message rendering."""
from datetime import datetime
from types import SimpleNamespace

import pytz

from reservations.services import notifier
from reservations.services.notifier import EmailMessage, ResendNotifier, deliver
from tests.conftest import FailingNotifier, FakeNotifier


def _booking(**overrides):
    fields = dict(
        display_id="BK-000007",
        event_name="Youth <Night>",
        purpose="Fellowship",
        venue="Main Hall",
        attendees=30,
        start_datetime=datetime(2030, 3, 1, 10, 0, tzinfo=pytz.utc),
        end_datetime=datetime(2030, 3, 1, 12, 0, tzinfo=pytz.utc),
        additional_needs=None,
        status=SimpleNamespace(value="Approved"),
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestDeliver:

    def test_success_returns_true(self):
        mailer = FakeNotifier()
        message = EmailMessage(to="a@church.org", subject="Hi", html="<p>Hi</p>", kind="test")
        assert deliver(mailer, message) is True
        assert mailer.sent == [message]

    def test_failure_is_swallowed(self):
        message = EmailMessage(to="a@church.org", subject="Hi", html="<p>Hi</p>", kind="test")
        assert deliver(FailingNotifier(), message) is False

    def test_resend_without_key_skips(self, monkeypatch):
        def _explode(params):
            raise AssertionError("should not be called")

        monkeypatch.setattr(notifier.resend.Emails, "send", _explode)
        ResendNotifier(api_key="", sender="noreply@church.org").send(
            EmailMessage(to="a@church.org", subject="Hi", html="", kind="test"),
        )

    def test_resend_payload(self, monkeypatch):
        calls = []
        monkeypatch.setattr(notifier.resend.Emails, "send", lambda params: calls.append(params))
        ResendNotifier(api_key="re_test", sender="noreply@church.org").send(
            EmailMessage(to="a@church.org", subject="Hi", html="<p>Hi</p>", kind="test"),
        )
        assert calls == [{
            "from": "noreply@church.org",
            "to": ["a@church.org"],
            "subject": "Hi",
            "html": "<p>Hi</p>",
        }]


class TestMessages:

    def test_status_message_renders_local_time_and_escapes(self):
        user = SimpleNamespace(email="leader@church.org", full_name="Leader")
        message = notifier.booking_status_message(user, _booking())
        assert message.subject == "Booking Approved"
        assert message.kind == "booking-approved"
        assert "Youth &lt;Night&gt;" in message.html
        # 10:00 UTC is 6:00 PM in Manila.
        assert "March 01, 2030 06:00 PM" in message.html

    def test_change_request_message_default_notes(self):
        user = SimpleNamespace(email="leader@church.org", full_name="Leader")
        cr = SimpleNamespace(status=SimpleNamespace(value="Rejected"), event_name="Prayer", admin_notes=None)
        message = notifier.change_request_message(user, cr)
        assert message.subject == "Change Request Rejected"
        assert "No additional notes provided." in message.html
