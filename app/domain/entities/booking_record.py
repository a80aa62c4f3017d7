from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True)
class BookingRecord:
    name: str
    phone: str
    email: str
    notes: str
    date: date | None
    time_slot_id: str | None
    language: str = "es"

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "notes": self.notes,
            "date": self.date.isoformat() if self.date else None,
            "time_slot": self.time_slot_id,
            "language": self.language,
        }


@dataclass(frozen=True)
class BookingReceipt:
    booking_id: str
    record: BookingRecord
