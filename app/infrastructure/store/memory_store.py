from __future__ import annotations

import logging
import threading
import time

from app.application.exceptions import SessionNotFoundError
from app.application.ports.session_store import BookingSessionStorePort
from app.application.use_cases.booking_flow import BookingFlow


class MemoryBookingSessionStore(BookingSessionStorePort):
    def __init__(self, ttl_seconds: float | None = 3600.0) -> None:
        self._flows: dict[str, BookingFlow] = {}
        self._last_seen_at: dict[str, float] = {}
        self._ttl_seconds = ttl_seconds
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def create(self, flow: BookingFlow, now_ts: float | None = None) -> str:
        now_ts = time.time() if now_ts is None else now_ts
        self.purge_expired(now_ts)
        with self._lock:
            self._flows[flow.session_id] = flow
            self._last_seen_at[flow.session_id] = now_ts
        self._logger.info("Booking session created", extra={"session_id": flow.session_id})
        return flow.session_id

    def get(self, session_id: str, now_ts: float | None = None) -> BookingFlow:
        now_ts = time.time() if now_ts is None else now_ts
        self.purge_expired(now_ts)
        with self._lock:
            flow = self._flows.get(session_id)
            if flow is not None:
                self._last_seen_at[session_id] = now_ts
        if flow is None:
            raise SessionNotFoundError(session_id)
        return flow

    def delete(self, session_id: str) -> None:
        with self._lock:
            flow = self._flows.pop(session_id, None)
            self._last_seen_at.pop(session_id, None)
        if flow is None:
            raise SessionNotFoundError(session_id)
        self._logger.info("Booking session closed", extra={"session_id": session_id})

    def purge_expired(self, now_ts: float | None = None) -> int:
        """
        Drop sessions idle for longer than the TTL. Sessions with a submission
        in flight are kept until it settles.
        """
        if self._ttl_seconds is None:
            return 0
        now_ts = time.time() if now_ts is None else now_ts
        with self._lock:
            expired = [
                session_id
                for session_id, seen_at in self._last_seen_at.items()
                if now_ts - seen_at > self._ttl_seconds and not self._flows[session_id].state.is_loading
            ]
            for session_id in expired:
                del self._flows[session_id]
                del self._last_seen_at[session_id]
        for session_id in expired:
            self._logger.info(
                "Booking session expired", extra={"session_id": session_id, "reason": "idle"}
            )
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._flows)
