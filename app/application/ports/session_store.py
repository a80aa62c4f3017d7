from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.application.use_cases.booking_flow import BookingFlow


class BookingSessionStorePort(ABC):
    @abstractmethod
    def create(self, flow: "BookingFlow", now_ts: float | None = None) -> str:
        """Register a new booking session. Returns session_id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, session_id: str, now_ts: float | None = None) -> "BookingFlow":
        """Refreshes the session idle timer. Raises SessionNotFoundError for unknown or expired ids."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, session_id: str) -> None:
        """Tear down a booking session. Raises SessionNotFoundError for unknown ids."""
        raise NotImplementedError

    @abstractmethod
    def purge_expired(self, now_ts: float | None = None) -> int:
        """Drop idle sessions. Returns how many were removed."""
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError
