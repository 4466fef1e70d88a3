from __future__ import annotations

import logging

from studio_booking.application.ports.notifier import NotifierPort
from studio_booking.domain.entities.booking import Booking
from studio_booking.infrastructure.email.resend_client import ResendClient
from studio_booking.infrastructure.email.templates import (
    build_confirmation_html,
    build_confirmation_subject,
)


class ResendNotifier(NotifierPort):
    def __init__(
        self,
        client: ResendClient,
        from_email: str,
        studio_name: str,
        contact_email: str,
    ) -> None:
        self._client = client
        self._from_email = from_email
        self._studio_name = studio_name
        self._contact_email = contact_email
        self._logger = logging.getLogger(__name__)

    def send_confirmation(self, booking: Booking) -> None:
        message_id = self._client.send_email(
            sender=self._from_email,
            to=booking.email,
            subject=build_confirmation_subject(self._studio_name),
            html=build_confirmation_html(booking, self._studio_name, self._contact_email),
        )
        self._logger.info(
            "Confirmation email sent",
            extra={"booking_id": booking.id, "reason": message_id},
        )
