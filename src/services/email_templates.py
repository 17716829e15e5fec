# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""HTML mail templates for booking notifications."""

from html import escape

from src.models.booking import Booking

_WRAPPER = (
    '<div style="font-family:system-ui,Segoe UI,Arial,sans-serif;line-height:1.6">'
    "{body}</div>"
)


def format_date(iso: str) -> str:
    """Format ``YYYY-MM-DD`` as ``DD.MM.YYYY``."""
    return ".".join(reversed(iso.split("-")))


def _period(booking: Booking) -> str:
    return f"{format_date(booking.start_date)} – {format_date(booking.end_date)}"


def _greeting(booking: Booking) -> str:
    return f"<p>Hallo {escape(booking.contact_name or 'und guten Tag')},</p>"


def booking_request_owner(booking: Booking, property_name: str) -> tuple[str, str]:
    """Mail to the owner announcing a new request."""
    phone = f" • {escape(booking.contact_phone)}" if booking.contact_phone else ""
    message = ""
    if booking.message:
        message = (
            "<p><strong>Nachricht:</strong><br>"
            + escape(booking.message).replace("\n", "<br>")
            + "</p>"
        )
    body = (
        f"<h2>Neue Buchungsanfrage – {escape(property_name)}</h2>"
        f"<p><strong>Zeitraum:</strong> {_period(booking)}</p>"
        f"<p><strong>Gäste:</strong> {booking.adults} Erw., {booking.children} Kinder</p>"
        f"<p><strong>Kontakt:</strong> {escape(booking.contact_name)} "
        f"&lt;{escape(booking.contact_email)}&gt;{phone}</p>"
        f"{message}"
    )
    return "Neue Buchungsanfrage", _WRAPPER.format(body=body)


def booking_request_guest_ack(booking: Booking, property_name: str) -> tuple[str, str]:
    """Acknowledgement sent to the guest after a request."""
    body = (
        "<h2>Ihre Anfrage ist eingegangen</h2>"
        f"{_greeting(booking)}"
        f"<p>vielen Dank für Ihre Anfrage für <strong>{_period(booking)}</strong>. "
        "Wir prüfen die Verfügbarkeit und melden uns in Kürze.</p>"
        f"<p>Freundliche Grüße<br/>{escape(property_name)}</p>"
    )
    return "Anfrage eingegangen – wir melden uns", _WRAPPER.format(body=body)


def booking_approved_guest(booking: Booking, property_name: str) -> tuple[str, str]:
    """Confirmation sent to the guest."""
    body = (
        "<h2>Buchung bestätigt</h2>"
        f"{_greeting(booking)}"
        f"<p>wir bestätigen Ihre Buchung für <strong>{_period(booking)}</strong> "
        f"in {escape(property_name)}.</p>"
    )
    return "Buchung bestätigt", _WRAPPER.format(body=body)


def booking_declined_guest(booking: Booking, property_name: str) -> tuple[str, str]:
    """Rejection sent to the guest."""
    body = (
        "<h2>Ihre Anfrage</h2>"
        f"{_greeting(booking)}"
        f"<p>leider können wir Ihre Anfrage <strong>{_period(booking)}</strong> "
        "nicht annehmen.</p>"
    )
    return "Buchung leider abgelehnt", _WRAPPER.format(body=body)


def booking_cancelled_guest(booking: Booking, property_name: str) -> tuple[str, str]:
    """Cancellation notice sent to the guest."""
    body = (
        "<h2>Buchung storniert</h2>"
        f"{_greeting(booking)}"
        f"<p>Ihre Buchung <strong>{_period(booking)}</strong> wurde storniert.</p>"
    )
    return "Buchung storniert", _WRAPPER.format(body=body)
