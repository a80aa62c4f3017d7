from __future__ import annotations

import logging

import httpx

from app.application.exceptions import BookingSubmissionError
from app.application.ports.booking_backend import BookingBackendPort
from app.core.config import settings
from app.domain.entities.booking_record import BookingReceipt, BookingRecord


class SupabaseBookingBackend(BookingBackendPort):
    """Inserts bookings into a hosted Supabase table through its REST endpoint."""

    def __init__(
        self,
        url: str | None = None,
        anon_key: str | None = None,
        table: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = (url or settings.SUPABASE_URL or "").rstrip("/")
        self._anon_key = anon_key or settings.SUPABASE_ANON_KEY
        self._table = table or settings.SUPABASE_BOOKINGS_TABLE
        self._client = client or httpx.AsyncClient(timeout=10.0)
        self._logger = logging.getLogger(__name__)

        if not self._url or not self._anon_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY are required for the Supabase backend")

    async def submit_booking(self, record: BookingRecord) -> BookingReceipt:
        url = f"{self._url}/rest/v1/{self._table}"
        headers = {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {self._anon_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }
        try:
            response = await self._client.post(url, json=record.to_payload(), headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "Supabase rejected booking",
                extra={"error": str(e), "status_code": e.response.status_code},
            )
            raise BookingSubmissionError(
                f"Booking backend returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            self._logger.error("Error reaching Supabase", extra={"error": str(e)})
            raise BookingSubmissionError("Booking backend is unreachable") from e

        try:
            data = response.json()
        except ValueError as e:
            self._logger.error("Supabase returned a non-JSON body", extra={"error": str(e)})
            raise BookingSubmissionError("Booking backend returned an unreadable response") from e
        row = data[0] if isinstance(data, list) and data else data
        booking_id = row.get("id") if isinstance(row, dict) else None
        if not booking_id:
            raise BookingSubmissionError("No booking id returned from Supabase")

        self._logger.info("Booking stored", extra={"booking_id": booking_id})
        return BookingReceipt(booking_id=str(booking_id), record=record)

    async def aclose(self) -> None:
        await self._client.aclose()
