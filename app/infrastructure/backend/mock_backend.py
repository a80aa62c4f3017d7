from __future__ import annotations

import asyncio
import logging

from app.application.exceptions import BookingSubmissionError
from app.application.ports.booking_backend import BookingBackendPort
from app.domain.entities.booking_record import BookingReceipt, BookingRecord


class MockBookingBackend(BookingBackendPort):
    def __init__(self, delay_seconds: float = 2.0, fail_with: str | None = None) -> None:
        self._delay_seconds = delay_seconds
        self._fail_with = fail_with
        self._records: dict[str, BookingRecord] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def records(self) -> dict[str, BookingRecord]:
        return dict(self._records)

    def fail_next(self, reason: str | None) -> None:
        self._fail_with = reason

    async def submit_booking(self, record: BookingRecord) -> BookingReceipt:
        # simulated network round trip
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)

        if self._fail_with:
            reason, self._fail_with = self._fail_with, None
            self._logger.error("Mock booking rejected", extra={"reason": reason})
            raise BookingSubmissionError(reason)

        booking_id = f"mock_booking_{len(self._records) + 1}"
        self._records[booking_id] = record
        self._logger.info(
            "Mock booking stored",
            extra={
                "booking_id": booking_id,
                "slot_id": record.time_slot_id,
                "email": record.email,
            },
        )
        return BookingReceipt(booking_id=booking_id, record=record)
