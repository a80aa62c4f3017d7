"""
Tests for booking backend adapters.
"""

from __future__ import annotations

import asyncio
import json
from datetime import date

import httpx
import pytest

from app.application.exceptions import BookingSubmissionError
from app.domain.entities.booking_record import BookingRecord
from app.infrastructure.backend.mock_backend import MockBookingBackend
from app.infrastructure.backend.supabase_backend import SupabaseBookingBackend

RECORD = BookingRecord(
    name="Ana",
    phone="600111222",
    email="ana@example.com",
    notes="",
    date=date(2024, 1, 2),
    time_slot_id="2024-01-02-10:30",
    language="es",
)


def _supabase(handler) -> SupabaseBookingBackend:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SupabaseBookingBackend(
        url="https://demo.supabase.co/",
        anon_key="anon-key",
        table="bookings",
        client=client,
    )


def test_mock_backend_stores_records():
    backend = MockBookingBackend(delay_seconds=0)

    first = asyncio.run(backend.submit_booking(RECORD))
    second = asyncio.run(backend.submit_booking(RECORD))

    assert first.booking_id != second.booking_id
    assert set(backend.records) == {first.booking_id, second.booking_id}


def test_mock_backend_failure_is_one_shot():
    backend = MockBookingBackend(delay_seconds=0)
    backend.fail_next("mail server down")

    with pytest.raises(BookingSubmissionError, match="mail server down"):
        asyncio.run(backend.submit_booking(RECORD))

    receipt = asyncio.run(backend.submit_booking(RECORD))
    assert receipt.record == RECORD


def test_supabase_posts_record():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json=[{"id": 42, **seen["body"]}])

    receipt = asyncio.run(_supabase(handler).submit_booking(RECORD))

    assert receipt.booking_id == "42"
    assert seen["url"] == "https://demo.supabase.co/rest/v1/bookings"
    assert seen["headers"]["apikey"] == "anon-key"
    assert seen["headers"]["authorization"] == "Bearer anon-key"
    assert seen["body"] == {
        "name": "Ana",
        "phone": "600111222",
        "email": "ana@example.com",
        "notes": "",
        "date": "2024-01-02",
        "time_slot": "2024-01-02-10:30",
        "language": "es",
    }


def test_supabase_http_error_is_typed():
    backend = _supabase(lambda request: httpx.Response(500, json={"message": "boom"}))

    with pytest.raises(BookingSubmissionError, match="HTTP 500"):
        asyncio.run(backend.submit_booking(RECORD))


def test_supabase_transport_error_is_typed():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BookingSubmissionError, match="unreachable"):
        asyncio.run(_supabase(handler).submit_booking(RECORD))


def test_supabase_non_json_body_is_typed():
    backend = _supabase(lambda request: httpx.Response(201, text="<html>gateway</html>"))

    with pytest.raises(BookingSubmissionError, match="unreadable"):
        asyncio.run(backend.submit_booking(RECORD))


def test_supabase_missing_id_is_typed():
    backend = _supabase(lambda request: httpx.Response(201, json=[]))

    with pytest.raises(BookingSubmissionError):
        asyncio.run(backend.submit_booking(RECORD))


def test_supabase_requires_credentials(monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    monkeypatch.setattr(settings, "SUPABASE_ANON_KEY", None)

    with pytest.raises(ValueError):
        SupabaseBookingBackend(url="https://demo.supabase.co")
