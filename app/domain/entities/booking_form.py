from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date


@dataclass(frozen=True)
class BookingFormData:
    name: str = ""
    phone: str = ""
    email: str = ""
    notes: str = ""
    # Mirrors of BookingFlowState.selected_date / selected_time_slot, never set directly
    date: date | None = None
    time_slot: str | None = None


FORM_FIELD_NAMES: frozenset[str] = frozenset(f.name for f in fields(BookingFormData))
CONTACT_FIELD_NAMES: frozenset[str] = FORM_FIELD_NAMES - {"date", "time_slot"}
