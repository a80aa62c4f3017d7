"""
Tests for the in-memory booking session store.
"""

from __future__ import annotations

import asyncio
from datetime import date

import pytest

from app.application.exceptions import SessionNotFoundError
from app.application.use_cases.booking_flow import BookingFlow
from app.application.utils.availability_policy import always_available
from app.infrastructure.backend.mock_backend import MockBookingBackend
from app.infrastructure.store.memory_store import MemoryBookingSessionStore


def _flow(backend: MockBookingBackend | None = None) -> BookingFlow:
    return BookingFlow.start(
        backend=backend or MockBookingBackend(delay_seconds=0),
        today=date(2024, 1, 1),
        policy=always_available,
        window_days=7,
    )


def test_sessions_are_isolated():
    store = MemoryBookingSessionStore()
    first, second = _flow(), _flow()
    first_id = store.create(first)
    second_id = store.create(second)

    store.get(first_id).update_form_data(name="Ana")

    assert first_id != second_id
    assert store.get(second_id).state.form_data.name == ""
    assert len(store) == 2


def test_delete_tears_down_session():
    store = MemoryBookingSessionStore()
    session_id = store.create(_flow())

    store.delete(session_id)

    assert len(store) == 0
    with pytest.raises(SessionNotFoundError):
        store.get(session_id)
    with pytest.raises(SessionNotFoundError):
        store.delete(session_id)


def test_idle_sessions_expire():
    store = MemoryBookingSessionStore(ttl_seconds=60)
    stale_id = store.create(_flow(), now_ts=1000.0)
    fresh_id = store.create(_flow(), now_ts=1030.0)

    store.get(fresh_id, now_ts=1050.0)  # refreshes the idle timer

    assert store.purge_expired(now_ts=1100.0) == 1
    assert len(store) == 1
    with pytest.raises(SessionNotFoundError):
        store.get(stale_id, now_ts=1100.0)
    assert store.get(fresh_id, now_ts=1100.0).session_id == fresh_id


def test_sessions_never_expire_without_ttl():
    store = MemoryBookingSessionStore(ttl_seconds=None)
    session_id = store.create(_flow(), now_ts=0.0)

    assert store.purge_expired(now_ts=10**9) == 0
    assert store.get(session_id, now_ts=10**9).session_id == session_id


def test_submitting_session_is_not_expired():
    async def scenario():
        store = MemoryBookingSessionStore(ttl_seconds=60)
        flow = _flow(MockBookingBackend(delay_seconds=0.05))
        flow.set_selected_date(date(2024, 1, 2))
        flow.set_selected_time_slot("2024-01-02-09:00")
        session_id = store.create(flow, now_ts=0.0)
        task = asyncio.create_task(flow.complete_booking())
        await asyncio.sleep(0)

        removed = store.purge_expired(now_ts=1000.0)
        await task
        return removed, store.get(session_id, now_ts=1000.0)

    removed, flow = asyncio.run(scenario())

    assert removed == 0
    assert flow.state.is_booking_complete is True
