from abc import ABC, abstractmethod

from studio_booking.domain.entities.booking import Booking


class NotifierPort(ABC):
    @abstractmethod
    def send_confirmation(self, booking: Booking) -> None:
        raise NotImplementedError
