from __future__ import annotations

import logging

from studio_booking.application.ports.notifier import NotifierPort
from studio_booking.domain.entities.booking import Booking


class MockNotifier(NotifierPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.sent: list[Booking] = []

    def send_confirmation(self, booking: Booking) -> None:
        self.sent.append(booking)
        self._logger.info(
            "Mock confirmation email",
            extra={"booking_id": booking.id, "service": booking.service},
        )
