from __future__ import annotations

from html import escape

from studio_booking.application.utils.date_parser import format_iso_date, format_slot_time
from studio_booking.domain.entities.booking import Booking

CONFIRMATION_SUBJECT = "{studio_name}: Booking confirmation"

CONFIRMATION_HTML = """\
<div style="font-family:Inter,system-ui,Arial,sans-serif;color:#021026">
  <h2>Thanks for booking with {studio_name}!</h2>
  <p><strong>Service:</strong> {service}</p>
  <p><strong>Date &amp; time:</strong> {date} @ {time} ({timezone})</p>
  <p>We look forward to seeing you!</p>
  <hr/>
  <p style="font-size:0.9rem;color:#6b7280">If you have questions, reply to this email or contact {contact_email}</p>
</div>
"""


def build_confirmation_subject(studio_name: str) -> str:
    return CONFIRMATION_SUBJECT.format(studio_name=studio_name)


def build_confirmation_html(booking: Booking, studio_name: str, contact_email: str) -> str:
    """Render the confirmation body; every booking value is HTML-escaped."""
    return CONFIRMATION_HTML.format(
        studio_name=escape(studio_name),
        service=escape(booking.service),
        date=escape(format_iso_date(booking.date)),
        time=escape(format_slot_time(booking.time)),
        timezone=escape(booking.timezone or "local"),
        contact_email=escape(contact_email),
    )
