import datetime

from pydantic import BaseModel, Field

from app.domain.entities.booking_flow_state import BookingFlowState
from app.domain.entities.widget_options import Language, Theme


class CreateSessionRequestSchema(BaseModel):
    today: datetime.date | None = None
    theme: Theme | None = None
    lang: Language | None = None
    api_key: str | None = None


class SelectionRequestSchema(BaseModel):
    date: datetime.date | None = None
    time_slot: str | None = None


class FormUpdateRequestSchema(BaseModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    notes: str | None = None


class TimeSlotSchema(BaseModel):
    id: str
    time: str
    available: bool


class DayAvailabilitySchema(BaseModel):
    date: datetime.date
    available: bool
    time_slots: list[TimeSlotSchema] = Field(default_factory=list)


class FormDataSchema(BaseModel):
    name: str = ""
    phone: str = ""
    email: str = ""
    notes: str = ""
    date: datetime.date | None = None
    time_slot: str | None = None


class WidgetOptionsSchema(BaseModel):
    theme: Theme
    lang: Language
    has_api_key: bool = False


class SessionStateSchema(BaseModel):
    session_id: str
    available_days: list[DayAvailabilitySchema] = Field(default_factory=list)
    selected_date: datetime.date | None = None
    selected_time_slot: str | None = None
    form_data: FormDataSchema
    step: int = Field(ge=1, le=3)
    is_confirmation_open: bool = False
    is_booking_complete: bool = False
    is_loading: bool = False
    submission_error: str | None = None
    booking_id: str | None = None
    options: WidgetOptionsSchema

    @classmethod
    def from_state(cls, session_id: str, state: BookingFlowState) -> "SessionStateSchema":
        form = state.form_data
        return cls(
            session_id=session_id,
            available_days=[
                DayAvailabilitySchema(
                    date=day.date,
                    available=day.available,
                    time_slots=[
                        TimeSlotSchema(id=slot.id, time=slot.time, available=slot.available)
                        for slot in day.time_slots
                    ],
                )
                for day in state.available_days
            ],
            selected_date=state.selected_date,
            selected_time_slot=state.selected_time_slot,
            form_data=FormDataSchema(
                name=form.name,
                phone=form.phone,
                email=form.email,
                notes=form.notes,
                date=form.date,
                time_slot=form.time_slot,
            ),
            step=state.step,
            is_confirmation_open=state.is_confirmation_open,
            is_booking_complete=state.is_booking_complete,
            is_loading=state.is_loading,
            submission_error=state.submission_error,
            booking_id=state.booking_id,
            options=WidgetOptionsSchema(
                theme=state.options.theme,
                lang=state.options.lang,
                has_api_key=bool(state.options.api_key),
            ),
        )
