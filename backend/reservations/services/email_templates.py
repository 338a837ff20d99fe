"""HTML bodies for transactional booking emails."""
from datetime import datetime
from html import escape

from reservations.timeutil import facility_tz, stored_utc

_LAYOUT = """
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2 style="color: #2c3e50;">{heading}</h2>
    <p>Hi {name},</p>
    {body}
    <p style="color: #888; font-size: 12px; margin-top: 30px;">
      This is an automated message from the facility reservations office.
    </p>
  </div>
</body>
</html>
"""


def _when(value: datetime | None) -> str:
    if value is None:
        return ""
    return stored_utc(value).astimezone(facility_tz()).strftime("%B %d, %Y %I:%M %p")


def _details(booking) -> str:
    rows = [
        ("Booking ID", booking.display_id),
        ("Event", booking.event_name),
        ("Purpose", booking.purpose),
        ("Venue", booking.venue),
        ("Attendees", booking.attendees),
        ("Start", _when(booking.start_datetime)),
        ("End", _when(booking.end_datetime)),
        ("Additional needs", booking.additional_needs or "None"),
    ]
    items = "".join(
        f"<tr><td style=\"padding: 4px 12px 4px 0;\"><strong>{label}</strong></td>"
        f"<td>{escape(str(value))}</td></tr>"
        for label, value in rows
    )
    return f"<table>{items}</table>"


def _render(heading: str, name: str, body: str) -> str:
    return _LAYOUT.format(heading=escape(heading), name=escape(name or "User"), body=body)


def booking_request(name: str, booking) -> str:
    body = (
        "<p>We received your booking request. It is now <strong>Pending</strong> "
        "and will be reviewed by an administrator.</p>" + _details(booking)
    )
    return _render("Booking Request Submitted", name, body)


def booking_status(name: str, booking, status: str) -> str:
    body = (
        f"<p>Your booking has been <strong>{escape(status.lower())}</strong>.</p>"
        + _details(booking)
    )
    return _render(f"Booking {status}", name, body)


def booking_reminder(name: str, booking) -> str:
    body = (
        f"<p>This is a reminder that <strong>{escape(booking.event_name)}</strong> "
        f"starts on {escape(_when(booking.start_datetime))}.</p>" + _details(booking)
    )
    return _render("Booking Reminder", name, body)


def change_request_status(name: str, event_name: str, status: str, admin_notes: str | None) -> str:
    body = (
        f"<p>Your change request for <strong>{escape(event_name)}</strong> has been "
        f"<strong>{escape(status.lower())}</strong>.</p>"
        f"<p><strong>Notes:</strong> {escape(admin_notes or 'No additional notes provided.')}</p>"
    )
    return _render(f"Change Request {status}", name, body)
