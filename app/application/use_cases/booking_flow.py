from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable, NoReturn

from app.application.exceptions import (
    BookingInProgressError,
    BookingSubmissionError,
    InvalidSelectionError,
    SubmissionTimeoutError,
)
from app.application.ports.booking_backend import BookingBackendPort
from app.application.use_cases.generate_availability import (
    CLOSING_HOUR,
    OPENING_HOUR,
    SLOT_MINUTES,
    WINDOW_DAYS,
    generate_availability,
)
from app.application.utils.availability_policy import AvailabilityPolicy
from app.domain.entities.booking_flow_state import FIRST_STEP, LAST_STEP, BookingFlowState
from app.domain.entities.booking_form import CONTACT_FIELD_NAMES, FORM_FIELD_NAMES, BookingFormData
from app.domain.entities.booking_record import BookingReceipt, BookingRecord
from app.domain.entities.day_availability import DayAvailability
from app.domain.entities.widget_options import WidgetOptions

_UNSET: Any = object()


class BookingFlow:
    """
    State container for one visitor's booking session.

    The selection (`selected_date` / `selected_time_slot`) is the source of truth;
    `form_data.date` and `form_data.time_slot` are rewritten from it on every change.
    All commands run synchronously except `complete_booking`, which awaits the backend.
    """

    def __init__(
        self,
        backend: BookingBackendPort,
        available_days: Iterable[DayAvailability],
        options: WidgetOptions | None = None,
        submit_timeout_seconds: float | None = 10.0,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self._backend = backend
        self._submit_timeout = submit_timeout_seconds
        self._state = BookingFlowState(
            available_days=tuple(available_days),
            options=options or WidgetOptions(),
        )
        self._logger = logging.getLogger(__name__)

    @classmethod
    def start(
        cls,
        backend: BookingBackendPort,
        today: date,
        policy: AvailabilityPolicy,
        *,
        window_days: int = WINDOW_DAYS,
        opening_hour: int = OPENING_HOUR,
        closing_hour: int = CLOSING_HOUR,
        slot_minutes: int = SLOT_MINUTES,
        options: WidgetOptions | None = None,
        submit_timeout_seconds: float | None = 10.0,
    ) -> "BookingFlow":
        """Build a flow whose calendar is generated once from `today`."""
        days = generate_availability(
            today,
            policy,
            window_days,
            opening_hour=opening_hour,
            closing_hour=closing_hour,
            slot_minutes=slot_minutes,
        )
        return cls(
            backend=backend,
            available_days=days,
            options=options,
            submit_timeout_seconds=submit_timeout_seconds,
        )

    @property
    def state(self) -> BookingFlowState:
        return self._state

    # Selection

    def set_selected_date(self, day: date | None) -> None:
        self._ensure_idle("Date change")
        day, slot_id = self._resolve_date(day, self._state.selected_time_slot)
        self._apply_selection(day, slot_id)

    def set_selected_time_slot(self, slot_id: str | None) -> None:
        self._ensure_idle("Time slot change")
        if slot_id is not None:
            self._check_slot(self._state.selected_date, slot_id)
        self._apply_selection(self._state.selected_date, slot_id)

    # Form

    def update_form_data(self, **fields: Any) -> None:
        """Merge fields into the form. Nothing changes if any part of the update is rejected."""
        unknown = set(fields) - FORM_FIELD_NAMES
        if unknown:
            raise TypeError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        self._ensure_idle("Form update")

        day = self._state.selected_date
        slot_id = self._state.selected_time_slot
        requested_date = fields.pop("date", _UNSET)
        requested_slot = fields.pop("time_slot", _UNSET)
        if requested_date is not _UNSET:
            day, slot_id = self._resolve_date(requested_date, slot_id)
        if requested_slot is not _UNSET:
            if requested_slot is not None:
                self._check_slot(day, requested_slot)
            slot_id = requested_slot

        contact = {key: value for key, value in fields.items() if key in CONTACT_FIELD_NAMES}
        self._state = replace(
            self._state,
            selected_date=day,
            selected_time_slot=slot_id,
            form_data=replace(self._state.form_data, date=day, time_slot=slot_id, **contact),
        )

    # Steps

    def go_to_next_step(self) -> None:
        if self._state.step < LAST_STEP:
            self._set_step(self._state.step + 1)

    def go_to_previous_step(self) -> None:
        if self._state.step > FIRST_STEP:
            self._set_step(self._state.step - 1)

    # Confirmation gate

    def open_confirmation(self) -> None:
        self._state = replace(self._state, is_confirmation_open=True)

    def close_confirmation(self) -> None:
        self._state = replace(self._state, is_confirmation_open=False)

    def reset_booking(self) -> None:
        self._ensure_idle("Reset")

        self._state = replace(
            self._state,
            selected_date=None,
            selected_time_slot=None,
            form_data=BookingFormData(),
            step=FIRST_STEP,
            is_confirmation_open=False,
            is_booking_complete=False,
            submission_error=None,
            booking_id=None,
        )
        self._logger.info("Booking reset", extra={"session_id": self.session_id})

    # Submission

    def build_record(self) -> BookingRecord:
        form = self._state.form_data
        return BookingRecord(
            name=form.name,
            phone=form.phone,
            email=form.email,
            notes=form.notes,
            date=self._state.selected_date,
            time_slot_id=self._state.selected_time_slot,
            language=self._state.options.lang.value,
        )

    async def complete_booking(self) -> BookingReceipt:
        """
        Submit the booking to the backend.

        Rejects a second call while one is in flight. On failure or timeout the
        loading flag is reverted, the error is recorded on the state and the
        typed exception is raised; form data and selection stay untouched so
        the visitor can retry.
        """
        if self._state.is_loading:
            self._logger.warning(
                "Duplicate submission rejected", extra={"session_id": self.session_id}
            )
            raise BookingInProgressError("A booking submission is already in progress")

        if self._state.selected_date is None or self._state.selected_time_slot is None:
            self._reject("A date and a time slot must be selected before booking")
        self._check_slot(self._state.selected_date, self._state.selected_time_slot)

        record = self.build_record()
        self._state = replace(self._state, is_loading=True, submission_error=None)
        self._logger.info(
            "Submitting booking",
            extra={"session_id": self.session_id, "slot_id": record.time_slot_id},
        )

        try:
            if self._submit_timeout is None:
                receipt = await self._backend.submit_booking(record)
            else:
                receipt = await asyncio.wait_for(
                    self._backend.submit_booking(record), timeout=self._submit_timeout
                )
        except asyncio.TimeoutError:
            self._fail("Booking submission timed out")
            raise SubmissionTimeoutError(
                f"Booking backend did not answer within {self._submit_timeout}s"
            ) from None
        except BookingSubmissionError as e:
            self._fail(str(e))
            raise
        except asyncio.CancelledError:
            self._state = replace(self._state, is_loading=False)
            self._logger.warning("Booking submission cancelled", extra={"session_id": self.session_id})
            raise
        except Exception as e:
            self._fail(str(e))
            raise BookingSubmissionError(f"Booking backend failed: {e}") from e

        self._state = replace(
            self._state,
            is_booking_complete=True,
            is_confirmation_open=False,
            is_loading=False,
            booking_id=receipt.booking_id,
        )
        self._logger.info(
            "Booking completed",
            extra={"session_id": self.session_id, "booking_id": receipt.booking_id},
        )
        return receipt

    # Internals

    def _ensure_idle(self, action: str) -> None:
        if self._state.is_loading:
            self._logger.warning(
                f"{action} rejected while submitting", extra={"session_id": self.session_id}
            )
            raise BookingInProgressError(f"{action} is not allowed while a booking is being submitted")

    def _resolve_date(self, day: date | None, slot_id: str | None) -> tuple[date | None, str | None]:
        """Validate a requested date; the current slot survives only if it belongs to that day."""
        if isinstance(day, datetime):
            day = day.date()
        if day is None:
            return None, None

        entry = self._state.find_day(day)
        if entry is None:
            self._reject(f"{day.isoformat()} is outside the booking window")
        if not entry.available:
            self._reject(f"{day.isoformat()} does not accept bookings")

        if slot_id is not None and entry.find_slot(slot_id) is None:
            slot_id = None
        return day, slot_id

    def _check_slot(self, day: date | None, slot_id: str) -> None:
        if day is None:
            self._reject("Select a date before choosing a time slot")
        entry = self._state.find_day(day)
        slot = entry.find_slot(slot_id) if entry else None
        if slot is None:
            self._reject(f"Time slot {slot_id} does not belong to {day.isoformat()}")
        if not slot.available:
            self._reject(f"Time slot {slot_id} is not available")

    def _apply_selection(self, day: date | None, slot_id: str | None) -> None:
        self._state = replace(
            self._state,
            selected_date=day,
            selected_time_slot=slot_id,
            form_data=replace(self._state.form_data, date=day, time_slot=slot_id),
        )

    def _set_step(self, step: int) -> None:
        self._logger.info(
            "Step changed", extra={"session_id": self.session_id, "step": step}
        )
        self._state = replace(self._state, step=step)

    def _fail(self, reason: str) -> None:
        self._state = replace(self._state, is_loading=False, submission_error=reason)
        self._logger.error(
            "Booking submission failed",
            extra={"session_id": self.session_id, "error": reason},
        )

    def _reject(self, reason: str) -> NoReturn:
        self._logger.warning(
            "Selection rejected", extra={"session_id": self.session_id, "reason": reason}
        )
        raise InvalidSelectionError(reason)
