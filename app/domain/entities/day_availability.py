from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from app.domain.entities.time_slot import TimeSlot


@dataclass(frozen=True)
class DayAvailability:
    date: date
    available: bool  # False on weekends; independent of individual slot flags
    time_slots: tuple[TimeSlot, ...] = ()

    def find_slot(self, slot_id: str) -> TimeSlot | None:
        for slot in self.time_slots:
            if slot.id == slot_id:
                return slot
        return None

    @property
    def open_slots(self) -> tuple[TimeSlot, ...]:
        return tuple(slot for slot in self.time_slots if slot.available)
