# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Booking notifications sent through an HTTP mail relay."""

import logging
from enum import StrEnum
from typing import Protocol

import httpx
from pydantic import BaseModel

from src.config import Settings, get_settings
from src.models.booking import Booking
from src.services import email_templates

logger = logging.getLogger(__name__)


class NotificationAction(StrEnum):
    """Booking events that trigger a notification."""

    REQUESTED = "requested"
    APPROVED = "approved"
    DECLINED = "declined"
    CANCELLED = "cancelled"


class NotificationResult(BaseModel):
    """Outcome of a notification attempt."""

    ok: bool
    detail: str = ""


class Notifier(Protocol):
    """Sends guest and owner messages for booking events.

    Implementations never raise; failures are reported in the result.
    """

    async def notify(
        self,
        action: NotificationAction,
        booking: Booking,
        property_name: str,
    ) -> NotificationResult:
        """Send the messages for ``action``."""
        ...


class LoggingNotifier:
    """Notifier used when no mail relay is configured."""

    async def notify(
        self,
        action: NotificationAction,
        booking: Booking,
        property_name: str,
    ) -> NotificationResult:
        """Log the event instead of sending mail."""
        logger.info(
            "Mail relay not configured, skipping %s notification for booking %s",
            action,
            booking.id,
        )
        return NotificationResult(ok=True, detail="skipped: mail relay not configured")


class WebhookMailNotifier:
    """Posts rendered mails to an HTTP relay endpoint.

    The relay accepts ``{"to", "subject", "html"}`` and authenticates the
    caller with an ``X-Api-Key`` header.
    """

    def __init__(
        self,
        endpoint_url: str,
        api_key: str = "",
        owner_email: str = "",
        timeout: float = 10.0,
    ) -> None:
        """Initialize notifier.

        Args:
            endpoint_url: Relay URL.
            api_key: Value sent as ``X-Api-Key``.
            owner_email: Recipient of new request mails.
            timeout: Request timeout in seconds.
        """
        self._endpoint_url = endpoint_url
        self._api_key = api_key
        self._owner_email = owner_email
        self._timeout = timeout

    def _messages(
        self,
        action: NotificationAction,
        booking: Booking,
        property_name: str,
    ) -> list[tuple[str, str, str]]:
        """Render ``(to, subject, html)`` triples for an event."""
        guest = booking.contact_email
        if action is NotificationAction.REQUESTED:
            messages = []
            if self._owner_email:
                messages.append(
                    (
                        self._owner_email,
                        *email_templates.booking_request_owner(booking, property_name),
                    )
                )
            messages.append(
                (guest, *email_templates.booking_request_guest_ack(booking, property_name))
            )
            return messages
        if action is NotificationAction.APPROVED:
            return [(guest, *email_templates.booking_approved_guest(booking, property_name))]
        if action is NotificationAction.DECLINED:
            return [(guest, *email_templates.booking_declined_guest(booking, property_name))]
        return [(guest, *email_templates.booking_cancelled_guest(booking, property_name))]

    async def notify(
        self,
        action: NotificationAction,
        booking: Booking,
        property_name: str,
    ) -> NotificationResult:
        """Send all messages for the event.

        Args:
            action: Booking event.
            booking: Booking the event belongs to.
            property_name: Name used in the mail body.

        Returns:
            ``ok=False`` with a reason if any message failed.
        """
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["X-Api-Key"] = self._api_key

        sent = 0
        try:
            async with httpx.AsyncClient() as client:
                for to, subject, html in self._messages(action, booking, property_name):
                    response = await client.post(
                        self._endpoint_url,
                        json={"to": to, "subject": subject, "html": html},
                        headers=headers,
                        timeout=self._timeout,
                    )
                    if not response.is_success:
                        logger.warning(
                            "Mail relay rejected %s mail for booking %s: %s %s",
                            action,
                            booking.id,
                            response.status_code,
                            response.text,
                        )
                        return NotificationResult(
                            ok=False,
                            detail=f"relay error: {response.status_code}",
                        )
                    sent += 1
        except httpx.HTTPError as e:
            logger.warning(
                "Mail relay unreachable for %s mail of booking %s: %s",
                action,
                booking.id,
                e,
            )
            return NotificationResult(ok=False, detail=f"relay unreachable: {e}")

        logger.info("Sent %d %s mail(s) for booking %s", sent, action, booking.id)
        return NotificationResult(ok=True, detail=f"sent {sent}")


def get_notifier(settings: Settings | None = None) -> Notifier:
    """Choose the notifier for the current configuration.

    Args:
        settings: Settings to read. Defaults to the cached application settings.

    Returns:
        WebhookMailNotifier when a relay URL is set, LoggingNotifier otherwise.
    """
    settings = settings or get_settings()
    if not settings.mail_endpoint_url:
        return LoggingNotifier()
    return WebhookMailNotifier(
        endpoint_url=settings.mail_endpoint_url,
        api_key=settings.mail_api_key,
        owner_email=settings.owner_email,
        timeout=settings.mail_timeout_seconds,
    )
