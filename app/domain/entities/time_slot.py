from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class TimeSlot:
    id: str  # "<YYYY-MM-DD>-<HH:MM>"
    time: str  # "HH:MM"
    available: bool


def build_slot_id(day: date, time: str) -> str:
    return f"{day.isoformat()}-{time}"
