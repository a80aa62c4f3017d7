from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.booking_record import BookingReceipt, BookingRecord


class BookingBackendPort(ABC):
    @abstractmethod
    async def submit_booking(self, record: BookingRecord) -> BookingReceipt:
        """
        Store a finished booking (and trigger whatever notifications the backend owns).
        Raises BookingSubmissionError on failure.
        """
        raise NotImplementedError
