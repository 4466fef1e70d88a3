from __future__ import annotations

import logging

import resend

from studio_booking.application.exceptions import NotificationError


class ResendClient:
    def __init__(self, api_key: str) -> None:
        if not api_key:
            raise ValueError("RESEND_API_KEY is required for the Resend client")
        resend.api_key = api_key
        self._logger = logging.getLogger(__name__)

    def send_email(self, sender: str, to: str, subject: str, html: str) -> str | None:
        """Send one email. Returns the provider message id when present."""
        email_data = {
            "from": sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }

        try:
            response = resend.Emails.send(email_data)
        except Exception as e:
            self._logger.error(
                "Resend send failed",
                extra={"error": str(e), "reason": type(e).__name__},
            )
            raise NotificationError(f"Email sending failed: {e}") from e

        if isinstance(response, dict):
            return response.get("id")
        return getattr(response, "id", None)
