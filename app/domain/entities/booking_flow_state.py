from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from app.domain.entities.booking_form import BookingFormData
from app.domain.entities.day_availability import DayAvailability
from app.domain.entities.widget_options import WidgetOptions

FIRST_STEP = 1  # selecting date and time
DETAILS_STEP = 2  # entering contact details
LAST_STEP = 3  # reviewing


@dataclass(frozen=True)
class BookingFlowState:
    available_days: tuple[DayAvailability, ...] = ()
    selected_date: date | None = None
    selected_time_slot: str | None = None
    form_data: BookingFormData = BookingFormData()
    step: int = FIRST_STEP
    is_confirmation_open: bool = False
    is_booking_complete: bool = False
    is_loading: bool = False
    submission_error: str | None = None
    booking_id: str | None = None
    options: WidgetOptions = WidgetOptions()

    def find_day(self, day: date) -> DayAvailability | None:
        for entry in self.available_days:
            if entry.date == day:
                return entry
        return None
